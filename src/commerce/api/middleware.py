"""Request plumbing shared by the app factory and the API tests."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError

from commerce.domain import commerce
from commerce.shared.exceptions import TransactionFailure
from commerce.utils.logging import bind_request_context, clear_request_context

REQUEST_ID_HEADER = "X-Request-ID"


def register_domain_context(app: FastAPI) -> None:
    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the Protean domain context and the log context for each request."""
        request_id = bind_request_context(request.url.path, request.headers.get(REQUEST_ID_HEADER))
        try:
            with commerce.domain_context():
                response = await call_next(request)
        finally:
            clear_request_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to HTTP responses."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"errors": exc.messages})

    @app.exception_handler(ObjectNotFoundError)
    async def not_found_handler(request: Request, exc: ObjectNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidOperationError)
    async def invalid_operation_handler(request: Request, exc: InvalidOperationError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(TransactionFailure)
    async def transaction_failure_handler(request: Request, exc: TransactionFailure):
        return JSONResponse(status_code=402, content={"detail": exc.reason})
