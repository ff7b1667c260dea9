import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import AppError, ValidationFailed
from app.core.logging import bind

log = logging.getLogger(__name__)


def _corr(request: Request):
    return getattr(request.state, "correlation_id", "-")


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=ValidationFailed.status_code,
        content={
            "detail": ValidationFailed.default_detail,
            "errors": jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
        },
    )


async def stale_data_handler(request: Request, exc: StaleDataError):
    # another writer bumped the version between our read and our write
    bind(log, _corr(request)).warning("concurrent modification: %s", exc)
    return JSONResponse(status_code=409, content={"detail": "Version mismatch, the resource was modified concurrently"})


async def integrity_error_handler(request: Request, exc: IntegrityError):
    bind(log, _corr(request)).warning("constraint violation: %s", exc.orig)
    return JSONResponse(status_code=409, content={"detail": "Constraint violation"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StaleDataError, stale_data_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
