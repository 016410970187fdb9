from __future__ import annotations

import contextlib
import logging

from fastapi import FastAPI

from dotenv import load_dotenv

from ptdb import DocumentDB, StoreError
from ptdb.settings import get_settings

logger = logging.getLogger(__name__)


def create_app(db_path: str | None = None, sync_interval: int | None = None) -> FastAPI:
    load_dotenv("local.env")

    from endpoints.records_endpoints import router as records_router
    from endpoints.records_endpoints import store_error_handler

    settings = get_settings()

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        db = DocumentDB(db_path or settings.db_path, sync_interval=sync_interval, settings=settings)
        await db.load()
        app.state.db = db
        try:
            yield
        finally:
            await db.close()

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.add_exception_handler(StoreError, store_error_handler)
    app.include_router(records_router)

    return app


app = create_app()
