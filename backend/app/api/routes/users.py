from fastapi import APIRouter, Depends
from app.api.deps import current_context, require_admin, user_repo
from app.core.context import RequestContext
from app.repositories.users import UserRepository
from app.schemas.user import UserAdminUpdate, UserCreate, UserOut, UserReplace
from app.services import users as user_service

router = APIRouter(prefix="/user", tags=["user"])

@router.post("", response_model=UserOut, status_code=201)
def create_user(body: UserCreate, ctx: RequestContext = Depends(require_admin), users: UserRepository = Depends(user_repo)):
    return user_service.create_user(ctx, users, body)

@router.get("", response_model=list[UserOut])
def list_users(ctx: RequestContext = Depends(require_admin), users: UserRepository = Depends(user_repo)):
    return user_service.list_users(ctx, users)

@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int, ctx: RequestContext = Depends(current_context), users: UserRepository = Depends(user_repo)):
    return user_service.get_user(ctx, users, user_id)

@router.patch("/{user_id}/admin", response_model=UserOut)
def update_user_admin(
    user_id: int,
    body: UserAdminUpdate,
    ctx: RequestContext = Depends(require_admin),
    users: UserRepository = Depends(user_repo),
):
    return user_service.update_user(ctx, users, user_id, body.is_admin)

@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    body: UserAdminUpdate,
    ctx: RequestContext = Depends(require_admin),
    users: UserRepository = Depends(user_repo),
):
    return user_service.update_user(ctx, users, user_id, body.is_admin)

@router.put("/{user_id}", response_model=UserOut)
def replace_user(
    user_id: int,
    body: UserReplace,
    ctx: RequestContext = Depends(require_admin),
    users: UserRepository = Depends(user_repo),
):
    return user_service.replace_user(ctx, users, user_id, body)

@router.delete("/{user_id}", response_model=UserOut)
def delete_user(user_id: int, ctx: RequestContext = Depends(require_admin), users: UserRepository = Depends(user_repo)):
    return user_service.remove_user(ctx, users, user_id)
