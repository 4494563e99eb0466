# backend/birdsurvey/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from birdsurvey.api.routers import foraging, rookery
from birdsurvey.config import get_settings
from birdsurvey.db import init_db
from birdsurvey.errors import PersistenceUnavailableError, SurveyNotFoundError, SurveyValidationError
from birdsurvey.logging_utils import configure_root_logger, get_logger

LOGGER = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # 初回起動時にDBスキーマを作成
    init_db()
    LOGGER.info("Database schema ready")
    yield


def _error(status_code: int, detail) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SurveyValidationError)
    async def _validation(_: Request, exc: SurveyValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _request_validation(_: Request, exc: RequestValidationError):
        return _error(status.HTTP_400_BAD_REQUEST, jsonable_errors(exc))

    @app.exception_handler(SurveyNotFoundError)
    async def _not_found(_: Request, exc: SurveyNotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(PersistenceUnavailableError)
    async def _unavailable(_: Request, exc: PersistenceUnavailableError):
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred.")


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def create_app() -> FastAPI:
    settings = get_settings()
    configure_root_logger(settings.log_level.upper())

    app = FastAPI(title="Bird Survey API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ルートは大文字小文字を区別しない（/WaterbirdForagingSurvey/... も受け付ける）
    @app.middleware("http")
    async def case_insensitive_paths(request: Request, call_next):
        request.scope["path"] = request.scope["path"].lower()
        return await call_next(request)

    @app.get("/health")
    def health():
        return {"ok": True}

    register_error_handlers(app)

    app.include_router(foraging.router, prefix=foraging.PREFIX, tags=["waterbird foraging"])
    app.include_router(rookery.router,  prefix=rookery.PREFIX,  tags=["rookery census"])
    return app


app = create_app()
