"""FastAPI application serving workflow storage and the AI workflow flows."""

import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server import workflow_db
from server.assistant_routes import router as assistant_router
from server.db import init_all
from server.workflow_routes import router as workflow_router

load_dotenv()

API_VERSION = "0.1.0"


def _cors_origins() -> list[str]:
    # comma-separated; "*" only for local development
    return [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_all()
    yield


def create_app() -> FastAPI:
    """Build the service with the workflow store and AI routes under ``/api``."""
    service = FastAPI(
        title="FiCX Workflow API",
        description="Reference service for workflow persistence and AI workflow editing",
        version=API_VERSION,
        lifespan=lifespan,
    )
    service.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    service.include_router(workflow_router, prefix="/api")
    service.include_router(assistant_router, prefix="/api")

    @service.get("/")
    def health() -> dict:
        """Liveness plus the stored workflow count per status."""
        return {
            "status": "ok",
            "version": API_VERSION,
            "workflows": workflow_db.count_by_status(),
        }

    return service


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))
