from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assistant import router as assistant_router
from auth import router as auth_router
from backup import router as backup_router
from categories import router as categories_router
from core import config, db
from core.log import configure_logging
from entries import router as entries_router
from profiles import router as profiles_router
from stats import router as stats_router

API_PREFIX = "/api"

configure_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="brainstack-api", lifespan=lifespan)

# Allow the web client's dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router.router, prefix=API_PREFIX, tags=["auth"])
app.include_router(entries_router.router, prefix=API_PREFIX, tags=["entries"])
app.include_router(categories_router.router, prefix=API_PREFIX, tags=["categories"])
app.include_router(profiles_router.router, prefix=API_PREFIX, tags=["profile"])
app.include_router(stats_router.router, prefix=API_PREFIX, tags=["stats"])
app.include_router(backup_router.router, prefix=API_PREFIX, tags=["backup"])
app.include_router(assistant_router.router, prefix=API_PREFIX, tags=["assistant"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
