# storefront/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from storefront.api import register_routers
from storefront.data.database import Base, engine
from storefront.utils.logging import get_logger

# import every model before create_all
import storefront.data.models  # noqa: F401

logger = get_logger(__name__)


def init_db(bind=None) -> None:
    bind = bind or engine
    logger.info(f"Models registered in Base.metadata: {sorted(Base.metadata.tables.keys())}")

    try:
        Base.metadata.create_all(bind=bind)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise

    logger.info("Database tables ready")


@asynccontextmanager
async def create_tables_on_startup(app: FastAPI):
    init_db()
    yield


def create_app(create_tables: bool = True) -> FastAPI:
    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=create_tables_on_startup if create_tables else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routers(app)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
