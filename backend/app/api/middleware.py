import logging
import random
import time

from fastapi import FastAPI, Request

from app.core.logging import bind

CORRELATION_HEADER = "X-Correlation-Id"
RESPONSE_TIME_HEADER = "X-Response-Time"

log = logging.getLogger(__name__)


def parse_correlation_id(raw: str | None) -> int:
    try:
        value = int((raw or "").strip())
    except ValueError:
        value = 0
    return value or random.randint(10000, 99999)


def install_correlation_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def correlation(request: Request, call_next):
        corr_id = parse_correlation_id(request.headers.get(CORRELATION_HEADER))
        request.state.correlation_id = corr_id
        client = request.client.host if request.client else "-"
        bind(log, corr_id).info("%s %s from %s", request.method, request.url.path, client)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        response.headers[CORRELATION_HEADER] = str(corr_id)
        response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms:.2f}ms"
        return response
