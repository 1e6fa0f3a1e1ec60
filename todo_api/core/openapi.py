"""
➡️ But : Personnaliser la documentation Swagger/OpenAPI.

custom_openapi(app) modifie le schéma généré par FastAPI pour :

ajouter une description détaillée,

documenter les conventions (format des erreurs, limite de lignes).
"""

from fastapi.openapi.utils import get_openapi

from todo_api.db.repositories.todos import MAX_ROWS


def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=(
            "API CRUD de todos (FastAPI + SQLModel).\n\n"
            "### Conventions\n"
            f"- `GET /todos` retourne au plus {MAX_ROWS} éléments, sans ordre garanti.\n"
            "- Les erreurs ont la forme `{\"status\": \"error\", \"message\": \"...\"}`.\n"
            "- `/alive` et `/ready` servent de sondes liveness/readiness.\n"
        ),
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema
