"""
➡️ But : Définir la structure des tables de la base (ORM).

Propriétés communes : identifiant et horodatages.

Les valeurs sont posées par la base elle-même (server_default), jamais par Python :
created_at et updated_at reçoivent now() à l'insertion, id est auto-incrémenté.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Integer, func
from sqlmodel import SQLModel, Field


class BaseModelDB(SQLModel, table=False):
    # BIGINT partout sauf SQLite, où seul INTEGER PRIMARY KEY est auto-incrémenté
    id: Optional[int] = Field(
        default=None,
        primary_key=True,
        sa_type=BigInteger().with_variant(Integer, "sqlite"),
    )
    created_at: Optional[datetime] = Field(
        default=None,
        sa_column_kwargs={"server_default": func.now(), "nullable": False},
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column_kwargs={"server_default": func.now(), "nullable": False},
    )
