import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

# Front-end deployments that talk to this backend
FRONTEND_ORIGINS = [
    "https://santas-scanner.vercel.app",
    "https://santas-scanner.netlify.app",
    "http://localhost:5173",
    "http://localhost:3000",
]

# The leaderboard never returns more than this many records
MAX_LEADERBOARD_LIMIT = 100


def _number_env(name, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _split_origins(raw: str) -> List[str]:
    return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "santas-scanner"
    mongodb_timeout_ms: int = 5000
    allowed_origins: List[str] = field(default_factory=lambda: list(FRONTEND_ORIGINS))
    cors_max_age: int = 84600
    geo_lookup_url: str = "http://ip-api.com/json/{ip}"
    geo_timeout: float = 3.0
    leaderboard_limit: int = 100
    questions_file: Optional[str] = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "Settings":
        origins = list(FRONTEND_ORIGINS)
        for origin in _split_origins(os.getenv("ALLOWED_ORIGINS", "")):
            if origin not in origins:
                origins.append(origin)

        return cls(
            mongodb_uri=os.getenv("MONGODB_URI", cls.mongodb_uri),
            mongodb_db=os.getenv("MONGODB_DB", cls.mongodb_db),
            mongodb_timeout_ms=_number_env("MONGODB_TIMEOUT_MS", cls.mongodb_timeout_ms, int),
            allowed_origins=origins,
            cors_max_age=_number_env("CORS_MAX_AGE", cls.cors_max_age, int),
            geo_lookup_url=os.getenv("GEO_LOOKUP_URL", cls.geo_lookup_url),
            geo_timeout=_number_env("GEO_TIMEOUT", cls.geo_timeout, float),
            leaderboard_limit=min(
                _number_env("LEADERBOARD_LIMIT", cls.leaderboard_limit, int), MAX_LEADERBOARD_LIMIT
            ),
            questions_file=os.getenv("QUESTIONS_FILE") or None,
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            host=os.getenv("HOST", cls.host),
            port=_number_env("PORT", cls.port, int),
        )
