"""
➡️ But : Encapsuler toutes les opérations de base de données sur la table todos.

TodoRepository : list, read, create, update, delete.

Deux implémentations, une par famille de bases :

ReturningTodoRepository : PostgreSQL, SQLite (une seule requête ... RETURNING).

ReadBackTodoRepository : MySQL (requête puis relecture de la ligne dans la même transaction).

repository_for(session) choisit selon le dialecte ; les routes ne voient que TodoRepository.

🔹 Avantages :

Les routes ne dépendent pas du dialecte SQL.

Testable indépendamment (SQLite suffit pour les deux implémentations).
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import Connection
from sqlmodel import Session

from todo_api.core.errors import TodoNotFound
from todo_api.db.models.todos import Todo
from todo_api.db.repositories.base import BaseRepository

# Pas d'ORDER BY : l'ordre est celui de la table (en pratique l'ordre d'insertion).
MAX_ROWS = 10


class TodoRepository(BaseRepository[Todo], ABC):
    """Opérations communes ; create/update/delete dépendent du dialecte."""

    model = Todo

    def _one(self, rows: Sequence[Mapping[str, Any]], todo_id: int) -> Todo:
        # Exactement une ligne attendue ; zéro ou plusieurs = introuvable.
        if len(rows) != 1:
            raise TodoNotFound(todo_id)
        return self._to_model(rows[0])

    def _select_by_id(self, conn: Connection, todo_id: int, *, for_update: bool = False):
        stmt = select(self.table).where(self.table.c.id == todo_id)
        if for_update:
            stmt = stmt.with_for_update()
        return conn.execute(stmt).mappings().all()

    # ---------- READ ----------

    def list(self) -> list[Todo]:
        """Retourne au plus MAX_ROWS todos, sans ordre garanti."""
        with self._transaction() as conn:
            rows = conn.execute(select(self.table).limit(MAX_ROWS)).mappings().all()
        return self._to_models(rows)

    def read(self, todo_id: int) -> Todo:
        with self._transaction() as conn:
            rows = self._select_by_id(conn, todo_id)
        return self._one(rows, todo_id)

    # ---------- WRITE ----------

    @abstractmethod
    def create(self, *, body: str) -> Todo:
        ...

    @abstractmethod
    def update(self, todo_id: int, *, body: str, completed: bool) -> Todo:
        ...

    @abstractmethod
    def delete(self, todo_id: int) -> Todo:
        """Supprime le todo et retourne la ligne supprimée."""


class ReturningTodoRepository(TodoRepository):
    """Une requête par opération grâce à RETURNING (PostgreSQL, SQLite >= 3.35)."""

    def create(self, *, body: str) -> Todo:
        stmt = insert(self.table).values(body=body).returning(*self.table.c)
        with self._transaction() as conn:
            row = conn.execute(stmt).mappings().one()
        return self._to_model(row)

    def update(self, todo_id: int, *, body: str, completed: bool) -> Todo:
        stmt = (
            update(self.table)
            .where(self.table.c.id == todo_id)
            .values(body=body, completed=completed, updated_at=func.now())
            .returning(*self.table.c)
        )
        with self._transaction() as conn:
            rows = conn.execute(stmt).mappings().all()
            todo = self._one(rows, todo_id)
        return todo

    def delete(self, todo_id: int) -> Todo:
        stmt = delete(self.table).where(self.table.c.id == todo_id).returning(*self.table.c)
        with self._transaction() as conn:
            rows = conn.execute(stmt).mappings().all()
            todo = self._one(rows, todo_id)
        return todo


class ReadBackTodoRepository(TodoRepository):
    """Pour les bases sans RETURNING (MySQL) : écriture puis relecture, même transaction."""

    def create(self, *, body: str) -> Todo:
        with self._transaction() as conn:
            result = conn.execute(insert(self.table).values(body=body))
            todo_id = result.inserted_primary_key[0]
            todo = self._one(self._select_by_id(conn, todo_id), todo_id)
        return todo

    def update(self, todo_id: int, *, body: str, completed: bool) -> Todo:
        with self._transaction() as conn:
            # verrouille la ligne : pas de suppression concurrente entre les deux requêtes
            self._one(self._select_by_id(conn, todo_id, for_update=True), todo_id)
            conn.execute(
                update(self.table)
                .where(self.table.c.id == todo_id)
                .values(body=body, completed=completed, updated_at=func.now())
            )
            todo = self._one(self._select_by_id(conn, todo_id), todo_id)
        return todo

    def delete(self, todo_id: int) -> Todo:
        with self._transaction() as conn:
            todo = self._one(self._select_by_id(conn, todo_id, for_update=True), todo_id)
            conn.execute(delete(self.table).where(self.table.c.id == todo_id))
        return todo


def repository_for(session: Session) -> TodoRepository:
    dialect = session.get_bind().dialect
    if dialect.insert_returning and dialect.update_returning and dialect.delete_returning:
        return ReturningTodoRepository(session)
    return ReadBackTodoRepository(session)
