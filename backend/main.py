import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Configure root logger to show INFO for our application modules
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
# Suppress noisy third-party loggers
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("multipart").setLevel(logging.WARNING)

from iskolar.core.config import settings
from iskolar.core.database import engine, Base
from iskolar.core.errors import register_exception_handlers
from iskolar.core.security import get_token_issuer
from iskolar.api import auth, health, onboarding, profile, scholarship
from iskolar.services.storage import UPLOAD_ROUTE

# Import all models so Base.metadata knows about them
from iskolar.models import user, profile as profile_model, scholarship as scholarship_model  # noqa: F401

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    # Fails fast with ConfigurationError when JWT_SECRET is missing
    get_token_issuer()

    # Ensure data directories exist
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    if engine.url.get_backend_name() == "sqlite" and engine.url.database:
        Path(engine.url.database).parent.mkdir(parents=True, exist_ok=True)

    # Create all tables
    Base.metadata.create_all(bind=engine)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
    )

    _cors_origins = ["*"] if settings.is_development else [settings.FRONTEND_URL]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Routes
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(onboarding.router)
    app.include_router(profile.router)
    app.include_router(scholarship.router)

    app.mount(UPLOAD_ROUTE, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    logger.info("%s %s started (%s)", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5000)
