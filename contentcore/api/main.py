import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from contentcore import __version__
from contentcore.api.deps import get_rules, get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules on startup (fail-fast)
    get_rules()
    logger.info("Rules loaded from %s", settings.rules_path)

    yield


app = FastAPI(
    title="contentcore API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- Routers ---
from contentcore.api.routes import content, designs  # noqa: E402

app.include_router(content.router, prefix="/api", tags=["Content"])
app.include_router(designs.router, prefix="/api/designs", tags=["Designs"])


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}
