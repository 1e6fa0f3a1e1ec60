"""
➡️ But : Centraliser les erreurs de l'application et leur traduction HTTP.

Les couches basses (config, pool, repositories) lèvent des exceptions métier,
jamais des HTTPException. La frontière HTTP (register_exception_handlers)
les convertit en réponses JSON {"status": "error", "message": ...} :

TodoNotFound → 404

toute autre TodoApiError → 500

validation de la requête → 422

🔹 Avantages :

Le processus ne s'arrête jamais sur une erreur de requête.

Un seul format d'erreur pour tous les endpoints.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

log = logging.getLogger(__name__)


class TodoApiError(Exception):
    """Racine de toutes les erreurs de l'application."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ---------- Démarrage (fatales) ----------

class ConfigError(TodoApiError):
    """Fichier de configuration absent, illisible ou mal formé."""


class DatabaseConnectionError(TodoApiError):
    """Impossible de construire le pool (hôte injoignable, identifiants refusés...)."""


# ---------- Par requête ----------

class TodoNotFound(TodoApiError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, todo_id: int):
        super().__init__(f"Todo {todo_id} not found")
        self.todo_id = todo_id


class QueryError(TodoApiError):
    """SQL invalide, contrainte violée, panne transitoire de la base."""


class SerializationError(TodoApiError):
    """Échec d'encodage de la réponse."""


def error_body(message: str) -> dict:
    return {"status": "error", "message": message}


async def _todo_api_error_handler(request: Request, exc: TodoApiError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # On garde le premier message lisible, le détail complet reste dans les logs.
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first.get('msg', 'invalid request')}" if location else "invalid request"
    log.debug("validation failed on %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(status_code=422, content=error_body(message))


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TodoApiError, _todo_api_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
