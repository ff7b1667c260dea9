from fastapi import APIRouter, Depends
from app.api.deps import current_context, todo_repo
from app.core.context import RequestContext
from app.repositories.todos import TodoRepository
from app.schemas.todo import TodoAdminUpdate, TodoCreate, TodoOut, TodoReplace, TodoUpdate
from app.services import todos as todo_service

# admin checks live in the service so every entry point gets them
router = APIRouter(prefix="/todo", tags=["todo"])

@router.patch("/{todo_id}/admin", response_model=TodoOut)
def update_todo_admin(
    todo_id: int,
    body: TodoAdminUpdate,
    ctx: RequestContext = Depends(current_context),
    todos: TodoRepository = Depends(todo_repo),
):
    return todo_service.update_todo_by_admin(ctx, todos, todo_id, body)

@router.post("", response_model=TodoOut, status_code=201)
def create_todo(body: TodoCreate, ctx: RequestContext = Depends(current_context), todos: TodoRepository = Depends(todo_repo)):
    return todo_service.create_todo(ctx, todos, body)

@router.get("", response_model=list[TodoOut])
def list_todos(ctx: RequestContext = Depends(current_context), todos: TodoRepository = Depends(todo_repo)):
    return todo_service.list_todos(ctx, todos)

@router.get("/{todo_id}", response_model=TodoOut)
def get_todo(todo_id: int, ctx: RequestContext = Depends(current_context), todos: TodoRepository = Depends(todo_repo)):
    return todo_service.get_todo(ctx, todos, todo_id)

@router.put("/{todo_id}", response_model=TodoOut)
def replace_todo(
    todo_id: int,
    body: TodoReplace,
    ctx: RequestContext = Depends(current_context),
    todos: TodoRepository = Depends(todo_repo),
):
    return todo_service.replace_todo(ctx, todos, todo_id, body)

@router.patch("/{todo_id}", response_model=TodoOut)
def update_todo(
    todo_id: int,
    body: TodoUpdate,
    ctx: RequestContext = Depends(current_context),
    todos: TodoRepository = Depends(todo_repo),
):
    return todo_service.update_todo(ctx, todos, todo_id, body)

@router.delete("/{todo_id}", response_model=TodoOut)
def delete_todo(todo_id: int, ctx: RequestContext = Depends(current_context), todos: TodoRepository = Depends(todo_repo)):
    return todo_service.remove_todo(ctx, todos, todo_id)
