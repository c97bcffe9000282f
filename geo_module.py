import logging
from typing import NamedTuple, Optional

import requests

logger = logging.getLogger(__name__)

UNKNOWN_COUNTRY = "XX"


class CountryLookup(NamedTuple):
    country_code: str
    resolved: bool


UNRESOLVED = CountryLookup(UNKNOWN_COUNTRY, False)


class Geolocator:
    """Resolves an IP address to a country code through an HTTP lookup service.

    Lookups never raise: network errors, timeouts, non-success statuses and
    malformed bodies all come back as the ``XX`` sentinel.
    """

    def __init__(self, url_template: str = "http://ip-api.com/json/{ip}", timeout: float = 3.0):
        self.url_template = url_template
        self.timeout = timeout

    def lookup_country(self, ip: Optional[str]) -> CountryLookup:
        if not ip:
            return UNRESOLVED

        url = self.url_template.format(ip=ip)
        try:
            r = requests.get(url, params={"fields": "status,countryCode"}, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning("Country lookup failed for %s: %s", ip, e)
            return UNRESOLVED

        if not isinstance(data, dict) or data.get("status") != "success":
            logger.warning("Country lookup for %s returned %r", ip, data)
            return UNRESOLVED

        code = data.get("countryCode")
        if not isinstance(code, str) or not code:
            return UNRESOLVED
        return CountryLookup(code.upper(), True)


def client_ip(forwarded_for: Optional[str], peer: Optional[str]) -> Optional[str]:
    """Pick the caller's address: first X-Forwarded-For hop, else the socket peer."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return peer
