import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tirefleet.config import settings
from tirefleet.database import Database
from tirefleet.routers import (
    backup,
    dashboard,
    imports,
    sync,
    system,
    tires,
    transactions,
    vehicles,
)
from tirefleet.services.data_service import DataService
from tirefleet.services.import_service import ImportService
from tirefleet.sync.events import ChangeNotifier
from tirefleet.sync.hub import SyncHub

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def create_app(database_url: str | None = None) -> FastAPI:
    """Build the application. The store is opened in the lifespan and closed on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        url = database_url or settings.DATABASE_URL
        if url == f"sqlite+aiosqlite:///{settings.DB_PATH}":
            settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
        db = Database(url, echo=settings.DEBUG)
        await db.init()

        notifier = ChangeNotifier()
        data = DataService(db, notifier)
        await data.prime_ids()
        hub = SyncHub(data, notifier)

        app.state.db = db
        app.state.data = data
        app.state.hub = hub
        app.state.importer = ImportService(data, hub)

        status = await data.check_connection()
        if not status.connected:
            logger.warning("Store degraded at startup: %s", status.error.value)
        yield
        # Shutdown
        hub.close()
        await db.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register all routers under /api/v1
    app.include_router(tires.router, prefix=API_PREFIX)
    app.include_router(transactions.router, prefix=API_PREFIX)
    app.include_router(vehicles.router, prefix=API_PREFIX)
    app.include_router(imports.router, prefix=API_PREFIX)
    app.include_router(backup.router, prefix=API_PREFIX)
    app.include_router(sync.router, prefix=API_PREFIX)
    app.include_router(system.router, prefix=API_PREFIX)
    app.include_router(dashboard.router, prefix=API_PREFIX)

    @app.get("/health")
    async def health_check() -> dict:
        return {"status": "ok", "version": settings.APP_VERSION}

    return app


app = create_app()
