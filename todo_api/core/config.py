"""
➡️ But : Centraliser tous les paramètres configurables (nom d'app, serveur HTTP, logs, base de données).

Deux sources :

Settings : pydantic-settings charge les variables d'environnement (.env, variables système…).

DatabaseConfig : le fichier JSON de connexion (server, user, database, port, password, max_connections).

from todo_api.core.config import get_settings, load_config
settings = get_settings()
db_config = load_config(settings.CONFIG_PATH)


🔹 Avantages :

Plus propre que des constantes éparpillées dans le code.

Le mot de passe n'apparaît jamais dans les logs (SecretStr + __str__ masqué).
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings

from todo_api.core.errors import ConfigError

MAX_CONNECTIONS = 10
DEFAULT_LOG_LEVEL = "sqlalchemy.engine=INFO,todo_api.http=DEBUG,INFO"


class Settings(BaseSettings):
    # -----------------------------
    # App
    # -----------------------------
    APP_NAME: str = "todo-api"
    ENV: str = "dev"  # dev | prod | test

    # -----------------------------
    # HTTP
    # -----------------------------
    HOST: str = "127.0.0.1"
    PORT: int = 8080
    KEEP_ALIVE_TIMEOUT: int = 5

    # -----------------------------
    # DB
    # -----------------------------
    CONFIG_PATH: str = "config.json"  # fichier JSON de connexion
    CREATE_TABLES: bool = True        # crée la table todos si absente

    # -----------------------------
    # Logs
    # -----------------------------
    # Niveau simple ("DEBUG") ou liste de directives "logger=niveau,...,défaut"
    LOG_LEVEL: str = DEFAULT_LOG_LEVEL
    LOG_JSON: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "ignore",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


class DatabaseConfig(BaseModel):
    """
    Paramètres de connexion, chargés une fois au démarrage et jamais modifiés.

    - `port` : accepté en texte ou en entier, validé comme entier 1..65535
    - `max_connections` : taille max du pool (10 par défaut)
    - `backend` : "postgres" (RETURNING) ou "mysql" (relecture)
    - `*_timeout` : en secondes
    """

    server: str
    user: str
    database: str
    port: int = Field(ge=1, le=65535)
    password: SecretStr
    max_connections: Optional[int] = Field(default=None, ge=1)

    backend: Literal["postgres", "mysql"] = "postgres"
    pool_timeout: float = Field(default=30, gt=0)
    connect_timeout: int = Field(default=10, gt=0)
    statement_timeout: int = Field(default=30, gt=0)

    model_config = {"frozen": True}

    @property
    def pool_size(self) -> int:
        return self.max_connections or MAX_CONNECTIONS

    def __str__(self) -> str:
        return (
            f"config: server: {self.server} user: {self.user} "
            f"database: {self.database} port: {self.port} password: ****"
        )

    def __repr__(self) -> str:
        return f"DatabaseConfig({self})"


def load_config(path: Union[str, Path]) -> DatabaseConfig:
    """
    Lit le fichier JSON `path` et le valide.
    Lève ConfigError si le fichier est illisible ou si son contenu n'a pas la forme attendue.
    """
    path = Path(path)
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"invalid config file {path}: not UTF-8 (byte {exc.start})") from exc

    try:
        return DatabaseConfig.model_validate_json(contents)
    except ValidationError as exc:
        # include_input=False : le mot de passe ne doit pas fuiter dans le message
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors(include_input=False, include_url=False)
        )
        raise ConfigError(f"invalid config file {path}: {problems}") from exc
