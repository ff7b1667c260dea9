from fastapi import APIRouter, Depends
from app.api.deps import anonymous_context, current_context, user_repo
from app.core.context import RequestContext
from app.repositories.users import UserRepository
from app.schemas.auth import LoginIn, TokenOut
from app.schemas.user import UserCreate, UserOut
from app.services import users as user_service

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login", response_model=TokenOut, status_code=201)
def login(body: LoginIn, ctx: RequestContext = Depends(anonymous_context), users: UserRepository = Depends(user_repo)):
    return user_service.sign_in(ctx, users, body.username, body.password)

@router.post("/register", response_model=UserOut, status_code=201)
def register(body: UserCreate, ctx: RequestContext = Depends(anonymous_context), users: UserRepository = Depends(user_repo)):
    return user_service.create_user(ctx, users, body)

@router.get("/profile", response_model=UserOut)
def get_profile(ctx: RequestContext = Depends(current_context), users: UserRepository = Depends(user_repo)):
    return user_service.profile(ctx, users)
