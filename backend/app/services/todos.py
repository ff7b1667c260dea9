"""Todo policy.

Who may do what with a todo, and the optimistic lock on full replace.

- create: anyone authenticated; the caller becomes the owner.
- read: the owner or an admin.
- list: admins see everything, everyone else only their own open todos.
- partial update: the owner or an admin, last write wins. Only an admin may
  reopen (``is_closed=False``).
- replace: admins only, and only against the current ``version``.
- close/reopen via the admin route, delete: admins only.
"""

from sqlalchemy.orm.attributes import flag_modified

from app.core.context import RequestContext
from app.core.errors import Conflict, Forbidden, NotFound
from app.models.todo import Todo
from app.repositories.todos import TodoRepository
from app.schemas.todo import TodoAdminUpdate, TodoCreate, TodoOut, TodoReplace, TodoUpdate

REOPEN_FORBIDDEN = "Opening todos is not allowed"

# fields a null in the request body must not clear
_NOT_NULLABLE = ("title", "is_closed")


def to_todo_out(t: Todo) -> TodoOut:
    return TodoOut.model_validate(t)


def is_owner(ctx: RequestContext, t: Todo) -> bool:
    return t.created_by_id == ctx.caller_id


def can_access(ctx: RequestContext, t: Todo) -> bool:
    return ctx.is_admin or is_owner(ctx, t)


def _get_or_404(ctx: RequestContext, todos: TodoRepository, todo_id: int) -> Todo:
    t = todos.find_by_id(todo_id)
    if t is None:
        ctx.log(__name__).debug("todo id=%s not found", todo_id)
        raise NotFound(f"Todo {todo_id} not found")
    return t


def _apply(t: Todo, changes: dict) -> None:
    for field, value in changes.items():
        if value is None and field in _NOT_NULLABLE:
            continue
        setattr(t, field, value)


def create_todo(ctx: RequestContext, todos: TodoRepository, body: TodoCreate) -> TodoOut:
    t = Todo(
        title=body.title,
        description=body.description,
        is_closed=False,
        created_by_id=ctx.caller_id,
        updated_by_id=ctx.caller_id,
    )
    todos.save(t)
    ctx.log(__name__).debug("created todo id=%s", t.id)
    return to_todo_out(t)


def list_todos(ctx: RequestContext, todos: TodoRepository) -> list[TodoOut]:
    if ctx.is_admin:
        rows = todos.list_all()
    else:
        rows = todos.list_open_owned_by(ctx.caller_id)
    return [to_todo_out(t) for t in rows]


def get_todo(ctx: RequestContext, todos: TodoRepository, todo_id: int) -> TodoOut:
    t = _get_or_404(ctx, todos, todo_id)
    if not can_access(ctx, t):
        raise Forbidden()
    return to_todo_out(t)


def update_todo(ctx: RequestContext, todos: TodoRepository, todo_id: int, body: TodoUpdate) -> TodoOut:
    t = _get_or_404(ctx, todos, todo_id)
    if not can_access(ctx, t):
        raise Forbidden()
    changes = body.model_dump(exclude_unset=True)
    if changes.get("is_closed") is False and not ctx.is_admin:
        ctx.log(__name__).info("caller %s tried to reopen todo id=%s", ctx.caller_id, todo_id)
        raise Forbidden(REOPEN_FORBIDDEN)
    _apply(t, changes)
    t.updated_by_id = ctx.caller_id
    todos.save(t)
    return to_todo_out(t)


def update_todo_by_admin(
    ctx: RequestContext, todos: TodoRepository, todo_id: int, body: TodoAdminUpdate
) -> TodoOut:
    t = _get_or_404(ctx, todos, todo_id)
    if not ctx.is_admin:
        raise Forbidden()
    t.is_closed = body.is_closed
    t.updated_by_id = ctx.caller_id
    todos.save(t)
    return to_todo_out(t)


def replace_todo(ctx: RequestContext, todos: TodoRepository, todo_id: int, body: TodoReplace) -> TodoOut:
    log = ctx.log(__name__)
    t = _get_or_404(ctx, todos, todo_id)
    if not ctx.is_admin:
        raise Forbidden()
    if t.version != body.version:
        log.debug("todo id=%s version mismatch. Expected %s got %s", todo_id, t.version, body.version)
        raise Conflict(f"Todo {todo_id} version mismatch, expected {t.version} got {body.version}")
    _apply(t, body.model_dump(exclude_unset=True, exclude={"id", "version"}))
    t.updated_by_id = ctx.caller_id
    # a replace always produces a new version, even when nothing differs
    flag_modified(t, "updated_by_id")
    todos.save(t)
    return to_todo_out(t)


def remove_todo(ctx: RequestContext, todos: TodoRepository, todo_id: int) -> TodoOut:
    t = _get_or_404(ctx, todos, todo_id)
    if not ctx.is_admin:
        raise Forbidden()
    t.updated_by_id = ctx.caller_id
    todos.save(t)
    out = to_todo_out(t)
    todos.delete(t)
    ctx.log(__name__).debug("deleted todo id=%s", todo_id)
    return out
