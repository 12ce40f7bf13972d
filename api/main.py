import json
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from articles import router as articles_router
from comments import router as comments_router
from core import db
from core.errors import register_exception_handlers
from core.log import configure_logging
from topics import router as topics_router
from users import router as users_router

configure_logging()

ENDPOINTS_FILE = Path(__file__).resolve().parent / "core" / "endpoints.json"
ENDPOINTS = json.loads(ENDPOINTS_FILE.read_text(encoding="utf-8"))

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def cors_allow_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(topics_router.router, tags=["topics"])
app.include_router(articles_router.router, tags=["articles"])
app.include_router(comments_router.router, tags=["comments"])
app.include_router(users_router.router, tags=["users"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"msg": "Welcome to the API! Visit /api for documentation"}


@app.get("/api")
def api_description() -> dict:
    return {"endpoints": ENDPOINTS}
