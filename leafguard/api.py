from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from leafguard.config import settings
from leafguard.core.errors import (
    AnalysisCancelled,
    AnalysisFailed,
    AnalysisTimeout,
    DecodeError,
    UploadTooLarge,
    ValidationError,
)
from leafguard.leafguard_agent import LeafGuardAgent
from leafguard.services.analyzer import Upload

logger = logging.getLogger(__name__)

app = FastAPI(
    title="LeafGuard API",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

agent: LeafGuardAgent | None = None


@app.on_event("startup")
def startup_event():
    global agent
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    logger.info("🌱 Initializing LeafGuard...")
    agent = LeafGuardAgent(settings=settings)
    logger.info("✅ LeafGuard ready")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/analyze")
async def analyze_leaf(
    image: UploadFile = File(...),
    seed: str | None = Form(None),
):
    if agent is None:
        raise HTTPException(status_code=500, detail="Agent not initialized")

    limit = agent.settings.max_upload_bytes
    if image.size is not None and image.size > limit:
        raise HTTPException(status_code=413, detail="File too large")

    # read one byte past the limit so oversized bodies are caught without buffering them whole
    try:
        data = await asyncio.wait_for(image.read(limit + 1), timeout=agent.settings.request_timeout_s)
    except asyncio.TimeoutError as e:
        raise HTTPException(status_code=504, detail="Timed out reading upload") from e

    upload = Upload(
        data=data,
        filename=image.filename or "upload.jpg",
        content_type=image.content_type or "application/octet-stream",
        declared_size=image.size,
    )

    try:
        # the filename doubles as the jitter seed unless the client pins one
        return await agent.analyze_async(upload, seed=seed if seed is not None else upload.filename)
    except UploadTooLarge as e:
        raise HTTPException(status_code=413, detail=str(e)) from e
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except AnalysisTimeout as e:
        logger.error("Analysis timed out for %s: %s", upload.filename, e)
        raise HTTPException(status_code=504, detail="Analysis timed out. Please try again.") from e
    except AnalysisFailed as e:
        if isinstance(e.__cause__, DecodeError):
            raise HTTPException(status_code=422, detail=str(e)) from e
        logger.error("Analysis failed for %s: %s", upload.filename, e)
        raise HTTPException(status_code=500, detail="Analysis failed. Please try again.") from e
    except AnalysisCancelled as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    finally:
        await image.close()
