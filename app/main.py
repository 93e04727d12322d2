from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.db import engine, Base
from app.models.grid_data import GridData  # noqa: F401
from app.models.grid_news import GridNews  # noqa: F401
from app.utils.config import CORS_ORIGINS
from app.utils.logging import configure_root_logger
from app.routes.grid_data import router as grid_data_router
from app.routes.grid_news import router as grid_news_router

configure_root_logger()

app = FastAPI(title="Grid Pulse ingest")

# Invoked by the scheduler and the dashboard from anywhere
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/health")
async def health():
    return {"status": "ok"}

app.include_router(grid_data_router)
app.include_router(grid_news_router)

@app.on_event("startup")
async def on_startup():
    # Create tables (dev-only)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
