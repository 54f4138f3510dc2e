"""
Wedding Planner - FastAPI Backend
Main application entry point
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import uvicorn

from wedding_planner.core.config import settings
from wedding_planner.core.db import engine, Base
from wedding_planner.api import routes_admin, routes_budget, routes_guest, routes_planning, routes_public, routes_vendors, ws
from wedding_planner.services.repositories import use_firestore
from wedding_planner.utils.responses import register_error_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if use_firestore():
        logger.info("Using Firestore; skipping SQL table creation")
    else:
        Base.metadata.create_all(bind=engine)
        logger.info(f"SQL tables ready on {engine.url.render_as_string(hide_password=True)}")
    yield
    logger.info("Wedding planner shutting down")

app = FastAPI(
    title="Wedding Planner",
    description="Guests, RSVPs, seating, budget, vendors and guest contributions with live updates",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Photos, contracts and receipts when stored locally
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

app.include_router(routes_public.router, tags=["public"])
app.include_router(routes_guest.router, prefix="/guest", tags=["guest"])
app.include_router(routes_admin.router, prefix="/admin", tags=["admin"])
app.include_router(routes_budget.router, prefix="/admin/budget", tags=["budget"])
app.include_router(routes_vendors.router, prefix="/admin/vendors", tags=["vendors"])
app.include_router(routes_planning.router, prefix="/admin", tags=["planning"])
app.include_router(ws.router, prefix="/ws", tags=["websocket"])

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=True
    )
