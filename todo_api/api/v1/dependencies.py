"""
➡️ But : Centraliser les dépendances réutilisables des routes.

get_engine() : le pool partagé, posé sur app.state au démarrage.

get_db_session() : une session par requête, fermée à la fin.

get_todo_repository() : le repository adapté au dialecte de la base.

🔹 Avantages :

Routes plus propres (pas de code dupliqué).

Facile à remplacer dans les tests (app.dependency_overrides).
"""

from typing import Iterator

from fastapi import Depends, Request
from sqlalchemy.engine import Engine
from sqlmodel import Session

from todo_api.db.repositories.todos import TodoRepository, repository_for
from todo_api.db.session import get_session


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_db_session(engine: Engine = Depends(get_engine)) -> Iterator[Session]:
    yield from get_session(engine)


# -----------------------------
# Repositories
# -----------------------------
def get_todo_repository(session: Session = Depends(get_db_session)) -> TodoRepository:
    return repository_for(session)
