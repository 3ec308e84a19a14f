"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fund_tracker.models.database import init_db
from fund_tracker.api.deps import get_store
from fund_tracker.api.auth_routes import router as auth_router
from fund_tracker.api.fund import router as fund_router
from fund_tracker.api.portfolio_routes import router as portfolio_router
from fund_tracker.api.search import router as search_router
from fund_tracker.tasks.scheduler import start_scheduler, stop_scheduler


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    start_scheduler(get_store())
    yield
    stop_scheduler()


app = FastAPI(title="Family Fund Tracker", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(search_router)
app.include_router(fund_router)
app.include_router(portfolio_router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
