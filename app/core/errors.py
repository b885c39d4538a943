"""Exception handlers mapping domain errors to the standard ErrorResponse body."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.schemas.error import ErrorResponse, ValidationErrorItem
from app.services.auth import InvalidCredentialsError, UsernameTakenError
from app.services.user_store import DuplicateIdentifierError

logger = logging.getLogger(__name__)

# Never echoed back in validation errors.
SECRET_FIELDS = frozenset({"password"})


class UserNotFoundError(Exception):
    """Raised by routes when a user lookup by id or username finds nothing."""

    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        if field == "id":
            self.message = f"User not found with ID: {value}"
        else:
            self.message = f"User not found with {field}: {value}"
        super().__init__(self.message)


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    validation_errors: list[ValidationErrorItem] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        status=status_code,
        error=error,
        message=message,
        path=request.url.path,
        validation_errors=validation_errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def handle_user_not_found(request: Request, exc: UserNotFoundError) -> JSONResponse:
    return error_response(request, status.HTTP_404_NOT_FOUND, "User Not Found", exc.message)


async def handle_duplicate_identifier(request: Request, exc: DuplicateIdentifierError) -> JSONResponse:
    return error_response(request, status.HTTP_409_CONFLICT, "Duplicate User", exc.message)


async def handle_username_taken(request: Request, exc: UsernameTakenError) -> JSONResponse:
    return error_response(request, status.HTTP_400_BAD_REQUEST, "Bad Request", exc.message)


async def handle_invalid_credentials(request: Request, exc: InvalidCredentialsError) -> JSONResponse:
    return error_response(
        request,
        status.HTTP_401_UNAUTHORIZED,
        "Unauthorized",
        exc.message,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    items = []
    for err in exc.errors():
        # loc is e.g. ("body", "email"); drop the location prefix.
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        # "missing" errors carry the whole enclosing object as input.
        hide_input = not loc or loc[-1] in SECRET_FIELDS or err.get("type") == "missing"
        items.append(
            ValidationErrorItem(
                field=".".join(loc) or "body",
                rejected_value=None if hide_input else err.get("input"),
                message=err.get("msg", "Invalid value"),
            )
        )
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "Validation Error",
        "Input validation failed",
        validation_errors=items,
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(
        request,
        exc.status_code,
        _reason(exc.status_code),
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        "An unexpected error occurred",
    )


def _reason(status_code: int) -> str:
    return {
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        405: "Method Not Allowed",
        409: "Conflict",
        415: "Unsupported Media Type",
    }.get(status_code, "Error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UserNotFoundError, handle_user_not_found)
    app.add_exception_handler(DuplicateIdentifierError, handle_duplicate_identifier)
    app.add_exception_handler(UsernameTakenError, handle_username_taken)
    app.add_exception_handler(InvalidCredentialsError, handle_invalid_credentials)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected)
