import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventhub.constant_file import cors_origins, database_url, log_level
from eventhub.database import Base, create_session_factory
from eventhub.errors import AppError, ServerError
from eventhub.response_model import ErrorResponseModel

from eventhub.routes.auth_route import router as AuthRouter
from eventhub.routes.user_route import router as UserRouter
from eventhub.routes.club_route import router as ClubRouter
from eventhub.routes.event_route import router as EventRouter
from eventhub.routes.student_route import router as StudentRouter
from eventhub.routes.chairperson_route import router as ChairpersonRouter

# register every table on Base.metadata
from eventhub.models.user_model import User  # noqa: F401
from eventhub.models.club_model import Club, ClubMember  # noqa: F401
from eventhub.models.event_model import Event  # noqa: F401
from eventhub.models.registration_model import Registration  # noqa: F401
from eventhub.models.attendance_model import AttendanceLog  # noqa: F401
from eventhub.models.audit_model import AuditLog  # noqa: F401

logger = logging.getLogger(__name__)


def create_app(db_url: str = None) -> FastAPI:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(title="EventHub")

    engine, SessionLocal = create_session_factory(db_url or database_url())
    app.state.engine = engine
    app.state.SessionLocal = SessionLocal

    app.include_router(AuthRouter, tags=["Auth"], prefix="/api/auth")
    app.include_router(UserRouter, tags=["User"], prefix="/api/users")
    app.include_router(ClubRouter, tags=["Club"], prefix="/api/clubs")
    app.include_router(EventRouter, tags=["Event"], prefix="/api/events")
    app.include_router(StudentRouter, tags=["Student"], prefix="/api/students")
    app.include_router(ChairpersonRouter, tags=["Chairperson"], prefix="/api/chairperson")

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponseModel(exc.code, exc.status_code, exc.message),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg', 'invalid value')}" if field else "Invalid request"
        return JSONResponse(status_code=400, content=ErrorResponseModel("VALIDATION_ERROR", 400, message))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        error = ServerError()
        return JSONResponse(
            status_code=error.status_code,
            content=ErrorResponseModel(error.code, error.status_code, error.message),
        )

    # Create all tables; the server still starts if the database is unreachable
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.warning("Could not create database tables: %s", e)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["POST", "GET", "OPTIONS", "DELETE", "PUT"],
        allow_headers=["*"],
    )
    return app
