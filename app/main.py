"""Campus Ride – FastAPI application.

Run with: uvicorn app.main:create_app --factory
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.config import Settings, get_settings
from app.database import Base, create_db_engine, create_session_factory
from app.errors import register_error_handlers
# Import models so Base.metadata has all tables before create_all (schema source of truth)
from app.models import User, CreditHistory, DropoffLocation  # noqa: F401
from app.routers import admin, auth, locations, users
from app.services.notifications import Mailer

log = logging.getLogger("uvicorn.error")


def create_app(settings: Settings | None = None, mailer: Mailer | None = None) -> FastAPI:
    """Build the application. Without arguments, settings come from the environment / .env
    and startup fails if JWT_SECRET_KEY is missing."""
    settings = settings or get_settings()
    engine = create_db_engine(settings)

    app = FastAPI(title=settings.app_name, debug=settings.debug)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.mailer = mailer or Mailer(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(admin.router)
    app.include_router(locations.router)

    @app.on_event("startup")
    def startup():
        if settings.mailgun_api_key and settings.mailgun_domain:
            log.info("[Mail] Using Mailgun domain=%s from=%s", settings.mailgun_domain, settings.mailgun_from_email)
        elif settings.sendgrid_api_key:
            log.info("[Mail] Using SendGrid from=%s", settings.sendgrid_from_email)
        else:
            log.warning("[Mail] No provider configured - verification codes will not be emailed")
        try:
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            log.warning("Database startup failed (tables not created). Check DATABASE_URL. Error: %s", e)

    @app.get("/")
    def root():
        return {"app": settings.app_name, "status": "ok"}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return app
