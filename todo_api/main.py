"""
➡️ But : assembler toutes les pièces du puzzle.

create_app(engine) crée l'instance FastAPI et configure :

CORS (toutes origines, toutes méthodes)

traçage des requêtes (todo_api.core.tracing)

gestion des erreurs → 404 / 422 / 500 en JSON

schéma OpenAPI personnalisé

Inclut les routers (/alive, /ready, /todos).

main() : logs → configuration → pool → table → serveur HTTP.

🔹 Avantages :

Centralise la configuration du serveur HTTP.

Point unique d'exécution : todo-api (ou python -m todo_api.main).
"""

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from todo_api import __version__
from todo_api.api.v1.routers import health, todos
from todo_api.core.config import Settings, get_settings, load_config
from todo_api.core.errors import ConfigError, DatabaseConnectionError, register_exception_handlers
from todo_api.core.logging import configure_logging
from todo_api.core.openapi import custom_openapi
from todo_api.core.tracing import add_tracing
from todo_api.db.session import connect, init_db

log = logging.getLogger(__name__)


def create_app(engine: Engine, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=__version__,
        openapi_tags=[
            {"name": "todos", "description": "Opérations CRUD sur les todos"},
            {"name": "health", "description": "Sondes liveness / readiness"},
        ],
    )
    # Pool partagé par toutes les requêtes (voir api.v1.dependencies.get_engine)
    app.state.engine = engine

    # Traçage d'abord : le CORS ajouté ensuite l'enveloppe
    add_tracing(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(todos.router)

    # Génération du schéma OpenAPI custom
    app.openapi = lambda: custom_openapi(app)

    return app


def main() -> None:
    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    try:
        db_config = load_config(settings.CONFIG_PATH)
        engine = connect(db_config)
    except (ConfigError, DatabaseConnectionError) as exc:
        log.error("startup failed: %s", exc.message)
        sys.exit(1)

    if settings.CREATE_TABLES:
        init_db(engine)

    app = create_app(engine, settings)
    try:
        uvicorn.run(
            app,
            host=settings.HOST,
            port=settings.PORT,
            timeout_keep_alive=settings.KEEP_ALIVE_TIMEOUT,
            log_config=None,  # garde la configuration de configure_logging
        )
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
