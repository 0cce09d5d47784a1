# storefront/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .DB import Database
from .errors import install_exception_handlers
from .logger import setup_logging
from .routers import auth, health, products, users
from .services.sessions import RevocableSessions
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Storefront API starting up...")

    if settings.SECRET_KEY == 'change-me':
        logger.warning("SECRET_KEY is the development default; set it before deploying")

    db = Database(settings.DATABASE_URL, settings.DB_CONNECT_TIMEOUT)
    db.connect()
    app.state.db = db
    try:
        if settings.SESSION_BACKEND == 'revocable':
            with db.session() as session:
                purged = RevocableSessions(settings, session).purge_expired()
            logger.info(f"Session table ready ({purged} expired revocations purged)")

        yield
    finally:
        logger.info("Storefront API shutting down...")
        db.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description='Account authentication and product catalog API.',
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # credentials cannot be combined with a wildcard origin
        allow_credentials='*' not in origins,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    install_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(auth.router)
    app.include_router(products.router)

    @app.get('/')
    def read_root():
        return {'message': 'E-commerce API running'}

    return app


app = create_app()


if __name__ == '__main__':
    import os

    import uvicorn
    uvicorn.run(app, host='0.0.0.0', port=int(os.getenv('PORT', 8000)))
