"""Domain errors for the wallet-link API and their HTTP rendering."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class FoodPrintError(Exception):
    """Base exception for FoodPrint. Carries the HTTP status it maps to."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class InvalidAddress(FoodPrintError):
    """Wallet address is not 0x + 40 hex characters."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Invalid wallet address format."):
        super().__init__(message)


class InvalidRole(FoodPrintError):
    """Role token is outside the supply-chain role set."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str = (
            "Invalid role. Must be one of: "
            "farmer, wholesaler, distributor, retailer, admin"
        ),
    ):
        super().__init__(message)


class InvalidSignature(FoodPrintError):
    """Signature could not be recovered (or was required and missing)."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Invalid signature."):
        super().__init__(message)


class SignatureMismatch(FoodPrintError):
    """Signature recovered fine but belongs to a different address."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str = "Signature verification failed. Wallet address mismatch.",
    ):
        super().__init__(message)


class Unauthenticated(FoodPrintError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "User not authenticated."):
        super().__init__(message)


class UserNotFound(FoodPrintError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class AddressAlreadyLinked(FoodPrintError):
    """Another account already holds this wallet address."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(
        self,
        message: str = "Wallet address is already linked to another account.",
    ):
        super().__init__(message)


class InvalidUpload(FoodPrintError):
    """Uploaded file has an unsupported type or is too large."""

    status_code = status.HTTP_400_BAD_REQUEST


class InternalError(FoodPrintError):
    """Unexpected storage or runtime failure; message includes the cause."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(message: str) -> dict:
    return {"success": False, "message": message}


async def foodprint_error_handler(request: Request, exc: FoodPrintError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed JSON bodies are client errors, same shape as domain errors.
    errors = exc.errors()
    first = errors[0]["msg"] if errors else "Invalid request body."
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(first),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # Storage failures outside the services (e.g. loading the session user)
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(f"Database error: {getattr(exc, 'orig', None) or exc}"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error renderers to the application."""
    app.add_exception_handler(FoodPrintError, foodprint_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
