from sqlalchemy import Column, Text, text
from sqlmodel import Field

from .base import BaseModelDB


class Todo(BaseModelDB, table=True):
    """Tâche à faire : un texte et un état terminé / non terminé."""

    __tablename__ = "todos"

    body: str = Field(sa_column=Column(Text, nullable=False))
    completed: bool = Field(
        default=False,
        sa_column_kwargs={"server_default": text("false"), "nullable": False},
    )
