import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from cryptic_chest.app.api.v1.router import api_router
from cryptic_chest.app.core.config import settings
from cryptic_chest.app.core.exceptions import (
    AccessDeniedError,
    ConfigurationError,
    CrypticChestError,
    FormatError,
    KeyMismatchError,
    RecoveryPhraseError,
)
from cryptic_chest.app.db import init_models
from cryptic_chest.app.services.cache import PasswordCache

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    AccessDeniedError: 403,
    ConfigurationError: 400,
    FormatError: 400,
    KeyMismatchError: 409,
    RecoveryPhraseError: 401,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    app.state.password_cache = PasswordCache()
    logger.info("%s %s started", settings.PROJECT_NAME, settings.PROJECT_VERSION)
    yield
    # Drop decrypted credentials on shutdown
    app.state.password_cache.clear()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(CrypticChestError)
async def domain_error_handler(request: Request, exc: CrypticChestError):
    status_code = ERROR_STATUS.get(type(exc), 400)
    logger.warning("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.kind, "operation": exc.operation},
    )


app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    return {"message": f"{settings.PROJECT_NAME} API is running"}
