from typing import Any, List, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from logger import logger


class TransferServiceError(Exception):
    """Base class for failures raised below the HTTP layer."""


class ValidationError(TransferServiceError):
    pass


class NotFound(TransferServiceError):
    pass


class UpstreamError(TransferServiceError):
    """The exchange-rate provider answered with a non-success status."""

    def __init__(self, status_code: int, body: Any):
        super().__init__(f"Exchange rate provider returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class UpstreamUnreachable(TransferServiceError):
    pass


class UpstreamMalformed(TransferServiceError):
    pass


class ApiError(Exception):
    """Raised by route handlers; rendered verbatim as the JSON error body."""

    def __init__(
        self,
        status_code: int,
        message: str,
        error: Any = None,
        supported_countries: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error
        self.supported_countries = supported_countries

    def payload(self) -> dict:
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        if self.supported_countries is not None:
            body["supportedCountries"] = self.supported_countries
        return body


async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.payload())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        "Некорректное тело запроса",
        extra={"path": request.url.path, "errors": str(exc.errors())}
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request body", "error": jsonable_encoder(exc.errors())},
    )


async def server_error_handler(request: Request, exc: Exception):
    logger.exception("Необработанная ошибка", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )
