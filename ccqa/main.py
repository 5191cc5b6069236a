"""CCQA FastAPI application serving the Q&A report over HTTP."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ccqa import config
from ccqa.routers.qa import qa_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("ccqa")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    logger.info("CCQA starting up (projects dir: %s)", config.PROJECTS_DIR)
    yield
    logger.info("CCQA shutting down")


app = FastAPI(
    title="CCQA API",
    description="Q&A interactions reconstructed from Claude Code session transcripts",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        config.FRONTEND_ORIGIN,
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(qa_router)


@app.get("/api/health")
def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "projectsDir": str(config.PROJECTS_DIR),
        "projectsDirExists": config.PROJECTS_DIR.is_dir(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("ccqa.main:app", host=config.HOST, port=config.PORT)
