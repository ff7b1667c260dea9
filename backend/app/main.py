import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings, require_jwt_secret
from app.core.logging import configure_logging
from app.api.errors import register_exception_handlers
from app.api.middleware import install_correlation_middleware
from app.api.routes.auth import router as auth_router
from app.api.routes.users import router as users_router
from app.api.routes.todos import router as todos_router
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.seed import seed

log = logging.getLogger(__name__)

app = FastAPI(title="Todo API", description="Backend for a todo app", version=settings.app_version)

origins = [o.strip() for o in (settings.cors_origins or "").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_correlation_middleware(app)
register_exception_handlers(app)

@app.get("/health")
@app.get("/api/health")
def health():
    return {"status": "ok"}

prefix = f"/{settings.api_prefix.strip('/')}" if settings.api_prefix.strip("/") else ""
app.include_router(auth_router, prefix=prefix)
app.include_router(users_router, prefix=prefix)
app.include_router(todos_router, prefix=prefix)

@app.on_event("startup")
def _startup():
    # a missing signing secret stops the process here
    require_jwt_secret(settings)
    configure_logging(settings.log_level)
    if settings.create_schema_on_startup:
        Base.metadata.create_all(bind=engine)
    if settings.seed_on_startup:
        s = SessionLocal()
        try:
            seed(s)
        finally:
            s.close()
    log.info("application started, api under %s", prefix or "/")
