"""
FastAPI main application for the backtest report engine.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers import evaluation

app = FastAPI(
    title="Backtest Report API",
    version="1.0.0",
    description="Performance and risk reports for completed strategy backtests",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",  # Development frontend
        "http://localhost:8080",
    ],
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Accept", "Origin"],
)

app.include_router(evaluation.router, prefix="/api/evaluation", tags=["evaluation"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint returning API information."""
    return {"message": "Backtest Report API", "version": "1.0.0", "status": "running"}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
