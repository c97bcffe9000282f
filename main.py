import logging
from contextlib import asynccontextmanager
from typing import Any, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import MAX_LEADERBOARD_LIMIT, Settings
from cors import CORSConfig, install_cors
from errors import PersistenceError, ValidationError
from geo_module import Geolocator, client_ip
from models import CountryResponse
from questions import load_questions
from store import ResultStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = app.state.store
    try:
        await store.connect()
    except PersistenceError:
        # uvicorn exits when startup fails, so no traffic reaches a dead store
        logger.critical("Result store unreachable at startup, shutting down", exc_info=True)
        raise
    yield
    store.close()


def get_store(request: Request) -> ResultStore:
    return request.app.state.store


def get_geolocator(request: Request) -> Geolocator:
    return request.app.state.geolocator


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ResultStore] = None,
    geolocator: Optional[Geolocator] = None,
    questions: Optional[List[dict]] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(title="Santa's Scanner API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store or ResultStore.from_settings(settings)
    app.state.geolocator = geolocator or Geolocator(settings.geo_lookup_url, settings.geo_timeout)
    app.state.questions = questions if questions is not None else load_questions(settings.questions_file)

    install_cors(
        app,
        CORSConfig(
            allowed_origins=tuple(settings.allowed_origins),
            max_age=settings.cors_max_age,
        ),
    )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Malformed request body on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object"})

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.get("/questions")
    async def list_questions(request: Request):
        questions = request.app.state.questions
        if not questions:
            logger.error("Question set is not loaded")
            raise HTTPException(status_code=500, detail="Questions are unavailable")
        return questions

    @app.post("/scan-results", status_code=201)
    async def submit_scan_result(payload: Any = Body(...), store: ResultStore = Depends(get_store)):
        record = await store.insert(payload)
        logger.info(
            "Saved scan result %s (%s, score=%s)", record["_id"], record["verdict"], record["score"]
        )
        return record

    @app.get("/leaderboard")
    async def leaderboard(request: Request, store: ResultStore = Depends(get_store)):
        limit = min(request.app.state.settings.leaderboard_limit, MAX_LEADERBOARD_LIMIT)
        return await store.query_top(limit)

    # Sync route: the blocking lookup runs in the threadpool, off the event loop
    @app.get("/country", response_model=CountryResponse)
    def get_country(request: Request, geolocator: Geolocator = Depends(get_geolocator)):
        peer = request.client.host if request.client else None
        ip = client_ip(request.headers.get("x-forwarded-for"), peer)
        lookup = geolocator.lookup_country(ip)
        return {"countryCode": lookup.country_code}

    return app


settings = Settings.from_env()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
