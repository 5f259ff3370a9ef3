"""Screen reconstruction API endpoints.

Exposes the engine over HTTP:
- POST /api/v1/screens/process: build a descriptor from a posted document
- POST /api/v1/screens/from-figma: fetch from Figma, build, attach assets
- GET  /api/v1/screens/health

Errors always surface as a single structured ``detail`` object
``{"error": kind, "message": ...}``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from screenmap import config
from screenmap.engine import (
    InvalidDocumentError,
    ScreenMapError,
    ScreenResult,
    UnresolvedReferenceError,
    attach_assets_to_result,
    build_screen,
    build_transformers,
)
from screenmap.integrations.figma_client import (
    FigmaClient,
    FigmaClientError,
    extract_file_key,
    extract_node_id,
)

logger = logging.getLogger("screenmap.routes.screens")

router = APIRouter(prefix="/api/v1/screens", tags=["screens"])

# Built once, shared by every request
TRANSFORMERS = build_transformers()


# --- Schemas ---


class ScreenBounds(BaseModel):
    x: float = 0
    y: float = 0
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class ProcessRequest(BaseModel):
    """Request for POST /api/v1/screens/process."""

    document: Dict[str, Any] = Field(
        ..., description="Figma node, files response or nodes response JSON"
    )
    screen_bounds: Optional[ScreenBounds] = Field(
        None, description="Override for the screen frame (defaults to the root box)"
    )
    node_id: Optional[str] = Field(None, description="Sub-node to use as screen root")
    source_id: Optional[str] = Field(None, description="Echoed as sourceId")


class FigmaProcessRequest(BaseModel):
    """Request for POST /api/v1/screens/from-figma."""

    figma_url: str = Field(
        ...,
        description=(
            "Figma URL, e.g. https://www.figma.com/design/{fileKey}/{name}?node-id={nodeId}"
        ),
    )
    include_assets: bool = Field(
        default=False, description="Download image assets for image-bearing nodes"
    )


class ScreenResponse(BaseModel):
    version: str
    timestamp: str
    sourceId: Optional[str] = None
    componentsCount: int
    screen: Dict[str, Any]


# --- Helpers ---


def _error(status_code: int, exc: Exception) -> HTTPException:
    if isinstance(exc, ScreenMapError):
        detail = exc.to_dict()
    else:
        detail = {"error": "figma_client_error", "message": str(exc)}
    return HTTPException(status_code=status_code, detail=detail)


def _run_engine(document: Any, **kwargs) -> ScreenResult:
    try:
        result = build_screen(document, transformers=TRANSFORMERS, **kwargs)
    except UnresolvedReferenceError as e:
        raise _error(404, e) from e
    except InvalidDocumentError as e:
        raise _error(422, e) from e
    return result


# --- Endpoints ---


@router.get("/health")
async def health() -> Dict[str, Any]:
    return {"status": "ok", "figma_configured": bool(config.FIGMA_TOKEN)}


@router.post("/process", response_model=ScreenResponse)
async def process_document(request: ProcessRequest) -> Dict[str, Any]:
    """Build a screen descriptor from a posted document tree."""
    result = _run_engine(
        request.document,
        screen_bounds=request.screen_bounds.model_dump() if request.screen_bounds else None,
        node_id=request.node_id,
        source_id=request.source_id,
    )
    logger.info(
        f"process_document: source={result.source_id}, components={result.components_count}"
    )
    return result.to_dict()


@router.post("/from-figma", response_model=ScreenResponse)
async def process_figma(request: FigmaProcessRequest) -> Dict[str, Any]:
    """Fetch a Figma file (or node) and build its screen descriptor."""
    if not config.FIGMA_TOKEN:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "figma_not_configured",
                "message": "FIGMA_TOKEN not configured on the server",
            },
        )

    try:
        file_key = extract_file_key(request.figma_url)
    except FigmaClientError as e:
        raise _error(400, e) from e
    node_id = extract_node_id(request.figma_url)

    client = FigmaClient(token=config.FIGMA_TOKEN)
    try:
        try:
            payload = await client.fetch_document(file_key, node_id)
        except FigmaClientError as e:
            logger.warning(f"process_figma: fetch failed for {file_key}: {e}")
            raise _error(502, e) from e

        result = _run_engine(payload, node_id=node_id, source_id=file_key)

        if request.include_assets:
            asset_ids = list(dict.fromkeys(
                nid for c in result.screen.ordered_elements for nid in c.asset_node_ids
            ))
            try:
                await client.prefetch_image_urls(file_key, asset_ids)
            except FigmaClientError as e:
                # Per-asset lookups in download_asset still get their chance
                logger.warning(f"process_figma: image prefetch failed: {e}")
            result = await attach_assets_to_result(
                result, client.download_asset, file_key
            )
    finally:
        await client.close()

    logger.info(
        f"process_figma: file={file_key}, node={node_id}, "
        f"components={result.components_count}"
    )
    return result.to_dict()
