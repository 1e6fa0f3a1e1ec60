"""
➡️ But : Définir les endpoints de l'API.

C'est la couche la plus proche du web :

Réceptionne les requêtes HTTP (GET, POST, PUT, DELETE)

Appelle le repository correspondant

Retourne les schémas de sortie (response_model)

Les erreurs (TodoNotFound, QueryError) remontent jusqu'aux exception handlers
enregistrés dans todo_api.core.errors : 404 ou 500, jamais un crash.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from todo_api.api.v1.dependencies import get_todo_repository
from todo_api.db.repositories.todos import TodoRepository
from todo_api.features.todos.schemas import StatusOut, TodoCreate, TodoOut, TodoUpdate

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
    responses={
        404: {"model": StatusOut, "description": "Not Found"},
        500: {"model": StatusOut, "description": "Database error"},
    },
)


@router.get(
    "",
    summary="Lister les todos",
    description="Retourne au plus 10 tâches, dans l'ordre naturel de la table.",
    response_model=List[TodoOut],
)
def list_todos(repo: TodoRepository = Depends(get_todo_repository)):
    return repo.list()


@router.post(
    "",
    summary="Créer un todo",
    status_code=status.HTTP_201_CREATED,
    response_model=TodoOut,
)
def create_todo(payload: TodoCreate, repo: TodoRepository = Depends(get_todo_repository)):
    return repo.create(body=payload.body)


@router.get(
    "/{todo_id}",
    summary="Récupérer un todo",
    response_model=TodoOut,
)
def get_todo(todo_id: int, repo: TodoRepository = Depends(get_todo_repository)):
    return repo.read(todo_id)


@router.put(
    "/{todo_id}",
    summary="Mettre à jour un todo",
    response_model=TodoOut,
)
def update_todo(todo_id: int, payload: TodoUpdate, repo: TodoRepository = Depends(get_todo_repository)):
    return repo.update(todo_id, body=payload.body, completed=payload.completed)


@router.delete(
    "/{todo_id}",
    summary="Supprimer un todo",
    description="Retourne le todo supprimé.",
    response_model=TodoOut,
)
def delete_todo(todo_id: int, repo: TodoRepository = Depends(get_todo_repository)):
    return repo.delete(todo_id)
