import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CORSConfig:
    allowed_origins: Tuple[str, ...]
    allowed_methods: Tuple[str, ...] = ("GET", "POST", "OPTIONS")
    allowed_headers: Tuple[str, ...] = ("Content-Type",)
    max_age: int = 84600
    _origin_set: FrozenSet[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.allowed_origins:
            raise ValueError("CORS allow-list must contain at least one origin")
        object.__setattr__(self, "_origin_set", frozenset(self.allowed_origins))

    def allow_origin(self, origin: Optional[str]) -> str:
        # Unknown origins get the primary front-end origin, which the browser rejects
        if origin and origin.rstrip("/") in self._origin_set:
            return origin.rstrip("/")
        return self.allowed_origins[0]

    def headers_for(self, origin: Optional[str]) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.allow_origin(origin),
            "Access-Control-Allow-Methods": ", ".join(self.allowed_methods),
            "Access-Control-Allow-Headers": ", ".join(self.allowed_headers),
            "Access-Control-Max-Age": str(self.max_age),
            "Vary": "Origin",
        }


def install_cors(app: FastAPI, config: CORSConfig) -> None:
    """Answer preflights and stamp CORS headers on every response."""

    @app.middleware("http")
    async def apply_cors(request: Request, call_next):
        headers = config.headers_for(request.headers.get("origin"))
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = JSONResponse(status_code=500, content={"error": "Internal server error"})
        response.headers.update(headers)
        return response
