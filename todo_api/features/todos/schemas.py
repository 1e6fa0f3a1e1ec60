"""
➡️ But : Définir les formats d'entrée/sortie de l'API (couche validation).

Contient les modèles Pydantic utilisés par FastAPI :

TodoCreate → corps de requête POST

TodoUpdate → corps PUT (remplacement complet : body et completed obligatoires)

TodoOut → réponse de l'API

StatusOut → enveloppe {status, message} de /ready et des erreurs

Sépare les modèles "de stockage" (ORM) de ceux "de transfert" (I/O API).
"""

from datetime import datetime
from pydantic import BaseModel, Field


class TodoCreate(BaseModel):
    body: str = Field(..., examples=["buy milk"])


class TodoUpdate(BaseModel):
    body: str = Field(..., examples=["buy oat milk"])
    completed: bool = Field(..., examples=[True])


class TodoOut(BaseModel):
    id: int
    body: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StatusOut(BaseModel):
    status: str = Field(..., examples=["success"])
    message: str = Field(..., examples=["hello from todo-api"])
