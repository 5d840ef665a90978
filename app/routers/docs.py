# =============================================================================
# app/routers/docs.py - Static API Description
# =============================================================================
# Serves the hand-maintained swagger.json verbatim. FastAPI's generated
# interactive docs stay available at /docs.
# =============================================================================

import json
import logging
from pathlib import Path

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from app.config import settings
from app.cors import preflight_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/swagger", include_in_schema=False)
async def get_swagger():
    """
    Return the static OpenAPI document.

    The file is re-read on every call and must be valid JSON; otherwise
    a fixed 500 body is returned.
    """
    path = Path(settings.API_DOCS_PATH)
    try:
        content = path.read_text(encoding="utf-8")
        json.loads(content)
    except (OSError, ValueError) as e:
        logger.error(f"Error reading API documentation from {path}: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to load API documentation"},
        )

    return Response(content=content, media_type="application/json")


@router.options("/swagger", include_in_schema=False)
async def swagger_options():
    return preflight_response("GET, OPTIONS")
