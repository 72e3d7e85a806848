"""Error taxonomy shared by services and routers.

Each AppError carries its HTTP status and a stable `code`; register_error_handlers()
renders them as {"detail": ..., "code": ...}.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger("uvicorn.error")


class AppError(Exception):
    status_code = 500
    code = "internal_error"
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None, *, extra: dict | None = None):
        self.detail = detail or self.default_detail
        self.extra = extra or {}
        super().__init__(self.detail)


class ValidationFailed(AppError):
    status_code = 400
    code = "validation_error"
    default_detail = "Invalid request"


class NotAuthenticated(AppError):
    status_code = 401
    code = "not_authenticated"
    default_detail = "Not authenticated"


class InvalidToken(AppError):
    status_code = 401
    code = "invalid_token"
    default_detail = "Invalid or expired token"


class InvalidCredentials(AppError):
    status_code = 401
    code = "invalid_credentials"
    default_detail = "Invalid credentials"


class EmailNotVerified(AppError):
    status_code = 403
    code = "email_not_verified"
    default_detail = "Email not verified"


class Forbidden(AppError):
    status_code = 403
    code = "forbidden"
    default_detail = "Forbidden"


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    default_detail = "Not found"


class Conflict(AppError):
    status_code = 409
    code = "conflict"
    default_detail = "Already exists"


class EmailDeliveryFailed(AppError):
    status_code = 500
    code = "email_delivery_failed"
    default_detail = "Failed to send verification code"


class IdentifierExhausted(AppError):
    code = "id_generation_failed"
    default_detail = "Could not allocate a unique account id"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "code": exc.code, **exc.extra},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        messages = []
        for err in exc.errors():
            field = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
            messages.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
        return JSONResponse(
            status_code=ValidationFailed.status_code,
            content={"detail": "; ".join(messages) or ValidationFailed.default_detail, "code": ValidationFailed.code},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        content = {"detail": "Internal server error", "code": AppError.code}
        if getattr(request.app.state, "settings", None) is not None and request.app.state.settings.debug:
            content["details"] = f"{type(exc).__name__}: {exc}"
        return JSONResponse(status_code=500, content=content)
