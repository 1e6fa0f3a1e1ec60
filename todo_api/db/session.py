"""
➡️ But : Construire le pool de connexions et gérer les sessions de base de données.

connect(config) : engine SQLAlchemy (pool borné par max_connections), validé immédiatement par un SELECT 1.

init_db(engine) : crée la table todos si elle n'existe pas (usage dev/demo, pas de migrations).

get_session(engine) : ouvre une session par requête, la ferme proprement.

🔹 Avantages :

Un seul endroit pour gérer les connexions DB.

Le pool est créé une fois au démarrage et partagé par toutes les requêtes.
"""

import logging
from typing import Any, Dict, Iterator, Union

from sqlalchemy import text
from sqlalchemy.engine import Engine, URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

# Import all models for creating all tables
from todo_api.db.models.todos import Todo  # noqa: F401

from todo_api.core.config import DatabaseConfig, MAX_CONNECTIONS
from todo_api.core.errors import DatabaseConnectionError

log = logging.getLogger(__name__)

DRIVERS = {
    "postgres": "postgresql+psycopg",
    "mysql": "mysql+pymysql",
}


def build_url(config: DatabaseConfig) -> URL:
    """URL du driver ; le mot de passe est masqué quand l'URL est affichée."""
    return URL.create(
        drivername=DRIVERS[config.backend],
        username=config.user,
        password=config.password.get_secret_value(),
        host=config.server,
        port=config.port,
        database=config.database,
    )


def _connect_args(config: DatabaseConfig) -> Dict[str, Any]:
    if config.backend == "postgres":
        return {
            "connect_timeout": config.connect_timeout,
            # statement_timeout est en millisecondes côté Postgres
            "options": f"-c statement_timeout={config.statement_timeout * 1000}",
        }
    return {
        "connect_timeout": config.connect_timeout,
        "read_timeout": config.statement_timeout,
        "write_timeout": config.statement_timeout,
    }


def connect(config: DatabaseConfig) -> Engine:
    """
    Construit le pool à partir de la configuration et le valide tout de suite.
    Lève DatabaseConnectionError si la base est injoignable ou refuse les identifiants.
    """
    log.info("connecting with %s", config)
    return connect_url(
        build_url(config),
        max_connections=config.pool_size,
        pool_timeout=config.pool_timeout,
        connect_args=_connect_args(config),
    )


def connect_url(
    url: Union[str, URL],
    max_connections: int = MAX_CONNECTIONS,
    **engine_kwargs: Any,
) -> Engine:
    """
    Même chose que connect() à partir d'une URL brute (ex : sqlite:///todos.db).

    Pour SQLite, le pool garde au plus `max_connections` connexions, sans débordement.
    """
    url = make_url(url)
    is_sqlite = url.get_backend_name() == "sqlite"

    connect_args: Dict[str, Any] = dict(engine_kwargs.pop("connect_args", {}))
    if is_sqlite:
        # Requis pour SQLite quand utilisé dans un app serveur (multi-threads)
        connect_args["check_same_thread"] = False

    if is_sqlite and url.database in (None, "", ":memory:"):
        # une seule connexion partagée, sinon chaque connexion verrait une base vide
        engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs.update(pool_size=max_connections, max_overflow=0)

    engine = create_engine(
        url,
        pool_pre_ping=not is_sqlite,  # ping utile pour Postgres/MySQL ; inutile pour SQLite
        connect_args=connect_args,
        **engine_kwargs,
    )

    try:
        ping(engine, raise_errors=True)
    except SQLAlchemyError as exc:
        engine.dispose()
        raise DatabaseConnectionError(
            f"cannot connect to {url.render_as_string(hide_password=True)}: {exc.__class__.__name__}"
        ) from exc

    log.info("connection pool ready (%s, max %d connections)", url.get_backend_name(), max_connections)
    return engine


def ping(engine: Engine, *, raise_errors: bool = False) -> bool:
    """Requête légère pour vérifier que le pool répond."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        if raise_errors:
            raise
        log.warning("database ping failed", exc_info=True)
        return False
    return True


def init_db(engine: Engine) -> None:
    """
    Crée les tables si elles n'existent pas (usage dev/demo).
    Pas de migrations : une table existante n'est jamais modifiée.
    """
    SQLModel.metadata.create_all(engine)


def get_session(engine: Engine) -> Iterator[Session]:
    """
    Fournit une session liée au pool partagé.
    Utilisation :
        for session in get_session(engine):
            ...
    """
    with Session(engine) as session:
        yield session
