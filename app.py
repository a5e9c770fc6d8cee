import logging
import os
import time
from http import HTTPStatus
from typing import Annotated, Iterable, Optional

from dotenv import load_dotenv
load_dotenv()

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from store import Store
from todo import NotFoundError, StorageError, Task, TodoError, ValidationError

TODO_FILE = os.getenv("TODO_FILE", "todoServer.json")
GREETING = "There's an API here\n"

logger = logging.getLogger(__name__)

app = FastAPI(title="TODO API Server", version="0.0.1", redirect_slashes=False)
app.state.store = Store(TODO_FILE)


def get_store(request: Request) -> Store:
    return request.app.state.store


class TaskRequest(BaseModel):
    task: str


def _text(status_code: int, message: Optional[str] = None, headers=None) -> PlainTextResponse:
    body = message or HTTPStatus(status_code).phrase
    return PlainTextResponse(f"{body}\n", status_code=status_code, headers=headers)


def _envelope(entries: Iterable[tuple[int, Task]], status_code: int = 200) -> JSONResponse:
    results = [{"position": position, **item.model_dump(mode="json")} for position, item in entries]
    return JSONResponse(
        status_code=status_code,
        content={"results": results, "date": int(time.time()), "total_results": len(results)},
    )


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------

@app.exception_handler(TodoError)
def todo_error(request: Request, exc: TodoError):
    if isinstance(exc, NotFoundError):
        logger.warning("%s %s: %s", request.method, request.url.path, exc)
        return _text(status.HTTP_404_NOT_FOUND)
    if isinstance(exc, ValidationError):
        logger.warning("%s %s: %s", request.method, request.url.path, exc)
        return _text(status.HTTP_400_BAD_REQUEST, str(exc))
    if isinstance(exc, StorageError):
        logger.error("%s %s: %s", request.method, request.url.path, exc)
    else:
        logger.exception("%s %s: unexpected error", request.method, request.url.path)
    return _text(status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.exception_handler(RequestValidationError)
def request_validation_error(request: Request, exc: RequestValidationError):
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    logger.warning("%s %s: invalid request: %s", request.method, request.url.path, detail)
    return _text(status.HTTP_400_BAD_REQUEST, f"Invalid request: {detail}")


@app.exception_handler(StarletteHTTPException)
def http_error(request: Request, exc: StarletteHTTPException):
    logger.warning("%s %s: %d", request.method, request.url.path, exc.status_code)
    return _text(exc.status_code, headers=getattr(exc, "headers", None))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/", response_class=PlainTextResponse)
def root():
    return GREETING


@app.get("/todo")
def list_tasks(store: Annotated[Store, Depends(get_store)]):
    return _envelope(store.read().entries())


@app.post("/todo", status_code=201)
def add_task(req: TaskRequest, store: Annotated[Store, Depends(get_store)]):
    with store.transaction() as tasks:
        item = tasks.add(req.task)
        position = len(tasks)
    logger.info("Added task %d: %r", position, item.task)
    return _envelope([(position, item)], status_code=status.HTTP_201_CREATED)


@app.get("/todo/{position}")
def get_task(position: int, store: Annotated[Store, Depends(get_store)]):
    item = store.read().get(position)
    return _envelope([(position, item)])


@app.patch("/todo/{position}", status_code=204)
def complete_task(
    position: int,
    store: Annotated[Store, Depends(get_store)],
    complete: Optional[str] = None,
):
    if complete is None:
        raise ValidationError("Missing query parameter 'complete'")
    with store.transaction() as tasks:
        tasks.complete(position)
    logger.info("Completed task %d", position)
    return Response(status_code=204)


@app.delete("/todo/{position}", status_code=204)
def delete_task(position: int, store: Annotated[Store, Depends(get_store)]):
    with store.transaction() as tasks:
        item = tasks.delete(position)
    logger.info("Deleted task %d: %r", position, item.task)
    return Response(status_code=204)
