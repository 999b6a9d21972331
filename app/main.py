# app/main.py
from contextlib import asynccontextmanager
import logging
import sys
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import Settings, settings as default_settings
from app.core.errors import ServiceError
from app.database.memory_assignment import InMemoryAssignmentRepository
from app.database.memory_submission import InMemorySubmissionRepository
from app.database.memory_user import InMemoryUserRepository
from app.services.seed_service import seed_demo_data
from app.routers.v1 import health
from app.routers.v1 import auth
from app.routers.v1 import assignment
from app.routers.v1 import submission

logging.basicConfig(
    level=default_settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger("assignment.api")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value").removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Errore non gestito su %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    settings.validate_runtime()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.seed_demo_data:
            await seed_demo_data(
                app.state.user_repo,
                app.state.assignment_repo,
                app.state.submission_repo,
                settings,
            )
        yield

    app = FastAPI(
        title="Assignment Service",
        description="Gestione di assignment e consegne per docenti e studenti",
        version="1.0.0",
        lifespan=lifespan,
    )

    # gli store vivono in memoria per tutta la durata del processo
    app.state.settings = settings
    app.state.user_repo = InMemoryUserRepository()
    app.state.assignment_repo = InMemoryAssignmentRepository()
    app.state.submission_repo = InMemorySubmissionRepository()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins, allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router,     prefix="/api/v1", tags=["health"])
    app.include_router(auth.router,       prefix="/api/v1", tags=["auth"])
    app.include_router(assignment.router, prefix="/api/v1", tags=["assignments"])
    app.include_router(submission.router, prefix="/api/v1", tags=["submissions"])
    return app

app = create_app()
