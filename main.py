import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, get_settings

# Configure logging
logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

from api.errors import register_exception_handlers
from api.routes import admin, auth, client, employee, public
from application.locks import KeyedLocks
from application.services import AccountService
from domain.clock import Clock, SystemClock
from domain.repositories import EntityStore
from infrastructure.repositories.in_memory_repositories import InMemoryEntityStore
from infrastructure.repositories.sqlalchemy_repositories import SqlAlchemyEntityStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> EntityStore:
    """Pick the storage backend named by HOTEL_STORAGE_BACKEND"""
    if settings.STORAGE_BACKEND == "memory":
        return InMemoryEntityStore()
    if settings.STORAGE_BACKEND == "sqlalchemy":
        return SqlAlchemyEntityStore.from_url(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    raise ValueError(f"Unknown storage backend: {settings.STORAGE_BACKEND}")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[EntityStore] = None,
    clock: Optional[Clock] = None
) -> FastAPI:
    settings = settings or get_settings()
    store = store or build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: create tables and make sure the admin login exists
        await store.initialize()
        await AccountService(store).seed_admin(settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        logger.info("%s started with %s storage", settings.APP_NAME, settings.STORAGE_BACKEND)
        yield
        await store.close()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Hotel back office: rooms, guests, billing, cleaning staff and occupancy reports",
        version=settings.APP_VERSION,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.store = store
    app.state.clock = clock or SystemClock()
    app.state.locks = KeyedLocks()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(public.router)
    app.include_router(auth.router)
    app.include_router(admin.router)
    app.include_router(client.router)
    app.include_router(employee.router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
