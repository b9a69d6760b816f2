import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from polinpin.core import config
from polinpin.core.errors import PolinpinError
from polinpin.routers import auth, studies
from polinpin.services.auth_service import AuthService
from polinpin.services.observation_log import ObservationLog
from polinpin.services.passwords import PasswordHasher
from polinpin.services.session_manager import SessionManager
from polinpin.services.study_service import StudyService
from polinpin.services.study_store import StudyStore
from polinpin.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


def setup_logging(level: str):
    if level == "NONE":
        return
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"polinpin serving {len(app.state.study_store)} studies")
    yield
    logger.info("polinpin shutting down")


def register_error_handlers(app: FastAPI):
    @app.exception_handler(PolinpinError)
    async def polinpin_error_handler(request: Request, exc: PolinpinError):
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Malformed request on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Invalid request data",
                "code": "BAD_REQUEST",
                "errors": [
                    {"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"]}
                    for e in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "An unexpected error occurred", "code": "INTERNAL_ERROR"},
        )


def create_app() -> FastAPI:
    setup_logging(config.LOG_LEVEL)

    app = FastAPI(title="polinpin", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # Services
    study_store = StudyStore()
    user_directory = UserDirectory()
    session_manager = SessionManager(
        token_length=config.TOKEN_LENGTH,
        ttl_seconds=config.SESSION_TTL_SECONDS,
    )
    auth_service = AuthService(
        user_directory,
        session_manager,
        PasswordHasher(rounds=config.BCRYPT_ROUNDS),
        registration_policy=config.REGISTRATION_POLICY,
    )
    study_service = StudyService(study_store, ObservationLog())
    if config.SEED_DEMO:
        study_service.get_or_create_default_study(config.DEMO_STUDY_ID)

    # App State
    app.state.study_store = study_store
    app.state.user_directory = user_directory
    app.state.session_manager = session_manager
    app.state.auth_service = auth_service
    app.state.study_service = study_service
    app.state.require_editor_auth = config.REQUIRE_EDITOR_AUTH

    # Include Routers
    app.include_router(studies.router)
    app.include_router(auth.router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    import argparse

    parser = argparse.ArgumentParser(description="Run the polinpin study service")
    parser.add_argument("--port", type=int, default=config.PORT, help="Port to run the service on")
    parser.add_argument("--host", type=str, default=config.HOST, help="Host to bind to")
    args = parser.parse_args()

    uvicorn.run(app, host=args.host, port=args.port)
