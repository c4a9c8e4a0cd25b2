import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.routers import posts
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Blog API", description="Markdown posts with tiered access")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.CONTENT_MODE == "snapshot":
        logger.info(f"Serving posts from snapshot {settings.SNAPSHOT_PATH}")
    else:
        logger.info(f"Serving posts live from {settings.posts_root}")
    yield


app.router.lifespan_context = lifespan

app.include_router(posts.router)


@app.get("/")
async def root():
    return {"message": "Blog API is running"}
