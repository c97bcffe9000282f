import unittest
from unittest import mock

import requests

from geo_module import UNKNOWN_COUNTRY, Geolocator, client_ip


def response(payload=None, status_error=None, json_error=None):
    r = mock.Mock()
    r.raise_for_status.side_effect = status_error
    if json_error is not None:
        r.json.side_effect = json_error
    else:
        r.json.return_value = payload
    return r


class LookupCountryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.geo = Geolocator("http://geo.test/json/{ip}", timeout=2.0)

    @mock.patch("geo_module.requests.get")
    def test_success_returns_country_code(self, get) -> None:
        get.return_value = response({"status": "success", "countryCode": "AT"})
        lookup = self.geo.lookup_country("81.10.1.1")
        self.assertEqual(lookup.country_code, "AT")
        self.assertTrue(lookup.resolved)
        args, kwargs = get.call_args
        self.assertEqual(args[0], "http://geo.test/json/81.10.1.1")
        self.assertEqual(kwargs["timeout"], 2.0)

    @mock.patch("geo_module.requests.get")
    def test_network_error_returns_sentinel(self, get) -> None:
        get.side_effect = requests.exceptions.ConnectionError("down")
        lookup = self.geo.lookup_country("81.10.1.1")
        self.assertEqual(lookup.country_code, UNKNOWN_COUNTRY)
        self.assertFalse(lookup.resolved)

    @mock.patch("geo_module.requests.get")
    def test_timeout_returns_sentinel(self, get) -> None:
        get.side_effect = requests.exceptions.Timeout()
        self.assertEqual(self.geo.lookup_country("81.10.1.1").country_code, "XX")

    @mock.patch("geo_module.requests.get")
    def test_error_status_returns_sentinel(self, get) -> None:
        get.return_value = response(status_error=requests.exceptions.HTTPError("503"))
        self.assertEqual(self.geo.lookup_country("81.10.1.1").country_code, "XX")

    @mock.patch("geo_module.requests.get")
    def test_failed_lookup_status_returns_sentinel(self, get) -> None:
        get.return_value = response({"status": "fail", "message": "private range"})
        self.assertEqual(self.geo.lookup_country("10.0.0.1").country_code, "XX")

    @mock.patch("geo_module.requests.get")
    def test_malformed_body_returns_sentinel(self, get) -> None:
        get.return_value = response(json_error=ValueError("not json"))
        self.assertEqual(self.geo.lookup_country("81.10.1.1").country_code, "XX")

        get.return_value = response(["AT"])
        self.assertEqual(self.geo.lookup_country("81.10.1.1").country_code, "XX")

    @mock.patch("geo_module.requests.get")
    def test_missing_ip_skips_lookup(self, get) -> None:
        self.assertEqual(self.geo.lookup_country(None).country_code, "XX")
        self.assertEqual(self.geo.lookup_country("").country_code, "XX")
        get.assert_not_called()


class ClientIpTests(unittest.TestCase):
    def test_prefers_first_forwarded_hop(self) -> None:
        self.assertEqual(client_ip("203.0.113.7, 10.0.0.2", "10.0.0.3"), "203.0.113.7")

    def test_falls_back_to_peer(self) -> None:
        self.assertEqual(client_ip(None, "198.51.100.4"), "198.51.100.4")
        self.assertEqual(client_ip(" , ", "198.51.100.4"), "198.51.100.4")
        self.assertIsNone(client_ip(None, None))


if __name__ == "__main__":
    unittest.main()
