from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from app.db.session import SessionLocal
from app.core.context import RequestContext
from app.core.errors import Forbidden, Unauthorized
from app.core.security import decode_token
from app.repositories.todos import TodoRepository
from app.repositories.users import UserRepository

bearer = HTTPBearer(auto_error=False)

def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()

def correlation_id(request: Request) -> int:
    return getattr(request.state, "correlation_id", 0)

def user_repo(s: Session = Depends(db)) -> UserRepository:
    return UserRepository(s)

def todo_repo(s: Session = Depends(db)) -> TodoRepository:
    return TodoRepository(s)

def anonymous_context(corr_id: int = Depends(correlation_id)) -> RequestContext:
    return RequestContext.system(corr_id)

def current_context(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    corr_id: int = Depends(correlation_id),
    users: UserRepository = Depends(user_repo),
) -> RequestContext:
    if creds is None or not creds.credentials:
        raise Unauthorized()
    payload = decode_token(creds.credentials)
    # admin flag comes from the stored row, the token only names the caller
    u = users.find_by_id(payload.sub)
    if u is None:
        raise Unauthorized("User not found")
    return RequestContext(correlation_id=corr_id, caller_id=u.id, is_admin=bool(u.is_admin))

def require_admin(ctx: RequestContext = Depends(current_context)) -> RequestContext:
    if not ctx.is_admin:
        raise Forbidden()
    return ctx
