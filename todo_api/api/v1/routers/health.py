from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.engine import Engine

from todo_api.api.v1.dependencies import get_engine
from todo_api.core.errors import error_body
from todo_api.db.session import ping
from todo_api.features.todos.schemas import StatusOut

router = APIRouter(tags=["health"])


@router.get("/alive", summary="Liveness", response_class=PlainTextResponse)
def alive():
    return "ok"


@router.get(
    "/ready",
    summary="Readiness (vérifie la base avec un SELECT 1)",
    response_model=StatusOut,
    responses={503: {"model": StatusOut, "description": "Database unreachable"}},
)
def ready(engine: Engine = Depends(get_engine)):
    if not ping(engine):
        return JSONResponse(status_code=503, content=error_body("database unreachable"))
    return StatusOut(status="success", message="hello from todo-api")
