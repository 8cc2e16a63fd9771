import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import crud
from .config import settings
from .db import Base, SessionLocal, engine
from .routers import health, projects, quick_add, tasks, views

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with SessionLocal() as db:
        inbox = await crud.ensure_default_project(db)
    logger.info("default project %r has id %s", inbox.name, inbox.id)
    yield


app = FastAPI(title="Quick Add - Task Service", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(quick_add.router, prefix="/quick-add", tags=["quick-add"])
app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
app.include_router(projects.router, prefix="/projects", tags=["projects"])
app.include_router(views.router, prefix="/views", tags=["views"])


@app.get("/")
def root():
    return {"ok": True, "service": "quickadd", "version": "0.1.0"}
