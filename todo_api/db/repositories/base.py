from contextlib import contextmanager
from typing import Any, Generic, Iterator, Mapping, Sequence, Type, TypeVar

from pydantic import ValidationError
from sqlalchemy import Table
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session

from todo_api.core.errors import QueryError, SerializationError, TodoApiError

# Type générique pour le modèle (Todo, ...)
ModelT = TypeVar("ModelT", bound=SQLModel)


class BaseRepository(Generic[ModelT]):
    """
    Repository de base : une session par requête, une transaction par opération.

    👉 Ne contient aucune logique métier.
    👉 Chaque opération s'exécute dans `_transaction()` : commit si tout va bien,
       rollback sinon, aucune écriture partielle visible.
    👉 Les erreurs SQLAlchemy sont converties en QueryError.
    👉 Les repositories concrets définissent `model = MaClasseSQLModel`.
    """

    model: Type[ModelT]

    def __init__(self, session: Session):
        self.session = session

    @property
    def table(self) -> Table:
        return self.model.__table__  # type: ignore[attr-defined]

    @contextmanager
    def _transaction(self) -> Iterator[Connection]:
        try:
            yield self.session.connection()
            self.session.commit()
        except TodoApiError:
            self.session.rollback()
            raise
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise QueryError(f"{self.table.name}: {exc.__class__.__name__}") from exc

    def _to_model(self, row: Mapping[str, Any]) -> ModelT:
        try:
            return self.model.model_validate(dict(row))
        except ValidationError as exc:
            raise SerializationError(f"{self.table.name}: unexpected row shape ({exc.error_count()} errors)") from exc

    def _to_models(self, rows: Sequence[Mapping[str, Any]]) -> list[ModelT]:
        return [self._to_model(r) for r in rows]
