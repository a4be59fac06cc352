import inspect
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from controllers.image_controller import health as health_report
from routes.image_route import router as image_router
from services.catalog.catalog_service import CatalogService
from services.credential_gate import BcryptCredentialGate
from services.image_storage import PUBLIC_URL_PREFIX, ImageStorage
from services.openai.label_detection import OpenAILabelSource
from utils.app_settings import AppSettings, get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the upload directory and image storage
      - the OpenAI async client used for label detection
      - the in-memory image catalog (empty on every startup)
    and attach them to `app.state`.
    """
    app_settings: AppSettings = app.state.settings
    storage = ImageStorage(app_settings.upload_dir, public_dir=app_settings.public_dir)
    storage.ensure_directory()
    app.state.storage = storage

    # Initialize OpenAI async client
    openai_api_key = os.getenv("OPENAI_API_KEY")
    if not openai_api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is not set")

    try:
        openai_client = AsyncOpenAI()
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc

    app.state.openai_client = openai_client

    app.state.catalog = CatalogService(
        OpenAILabelSource(openai_client, model=app_settings.openai_model, max_labels=app_settings.label_max_count),
        BcryptCredentialGate(rounds=app_settings.password_hash_rounds),
        storage,
        prune_empty_keywords=app_settings.prune_empty_keywords,
    )
    LOGGER.info("Image catalog ready; uploads stored under %s", app_settings.upload_dir)

    try:
        yield
    finally:
        # Gracefully close the OpenAI client if it exposes a close/aclose method.
        client = getattr(app.state, "openai_client", None)
        if client is not None:
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    result = aclose()
                    if inspect.isawaitable(result):
                        await result
                except Exception as exc:
                    LOGGER.warning("Error while closing OpenAI client: %s", exc)


def create_app(app_settings: Optional[AppSettings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Uses the module-level settings unless `app_settings` is given.
    """
    app = FastAPI(lifespan=lifespan)
    app.state.settings = app_settings or settings

    # Uploads are served from the public directory, which may be created later by the lifespan.
    app.mount(
        PUBLIC_URL_PREFIX,
        StaticFiles(directory=app.state.settings.public_dir, check_dir=False),
        name="public",
    )

    @app.get("/", include_in_schema=False)
    async def welcome():
        return PlainTextResponse("Welcome to the image repository!")

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check reporting catalog size and OpenAI client presence.
        """
        return health_report(request)

    # Register application routers
    app.include_router(image_router)

    return app


app = create_app()
