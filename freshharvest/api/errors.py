from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from freshharvest.application.errors import MethodNotSupported, PersistenceFailure, StorefrontError
from freshharvest.core import get_logger

logger = get_logger(__name__)

def _message(exc: StorefrontError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

def _validation_message(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "Invalid request: " + "; ".join(problems)

def register_exception_handlers(app: FastAPI) -> None:
    """Render every error as ``{"message": ...}`` with its status code."""

    @app.exception_handler(StorefrontError)
    async def storefront_error(request: Request, exc: StorefrontError):
        return _message(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": _validation_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            error = MethodNotSupported()
            return JSONResponse(status_code=error.status_code, content={"message": error.message}, headers=exc.headers)
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.error(f"Unhandled database error on {request.method} {request.url.path}", exc_info=exc)
        return _message(PersistenceFailure())

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return _message(PersistenceFailure())
