"""
➡️ But : Tracer chaque requête HTTP (méthode, chemin, statut, durée).

Un identifiant de requête est repris du header X-Request-ID s'il existe,
sinon généré, puis renvoyé dans la réponse.

Les logs partent sur le logger "todo_api.http".
"""

import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request

REQUEST_ID_HEADER = "X-Request-ID"

log = logging.getLogger("todo_api.http")


def add_tracing(app: FastAPI) -> None:
    @app.middleware("http")
    async def trace_request(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()
        log.debug("started %s %s", request.method, request.url.path, extra={"request_id": request_id})

        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            log.error(
                "%s %s -> 500 (%.1f ms, unhandled error)",
                request.method,
                request.url.path,
                elapsed_ms,
                extra={"request_id": request_id, "status": 500, "latency_ms": round(elapsed_ms, 1)},
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        log.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            extra={"request_id": request_id, "status": response.status_code, "latency_ms": round(elapsed_ms, 1)},
        )
        return response
