"""Figma REST API client for the screen reconstruction engine.

Fetches document trees and renders image assets from Figma files using
Personal Access Token (PAT) authentication. Acts as the engine's
document-fetch and asset collaborators.

Environment:
    FIGMA_TOKEN: Figma Personal Access Token (required)

Usage:
    client = FigmaClient()
    payload = await client.fetch_document("6kGd851qaAX4TiL44vpIrO", "16650:538")
    path = await client.download_asset("16650:539", "6kGd851qaAX4TiL44vpIrO")
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, unquote, urlparse

import httpx

from screenmap import config, settings

logger = logging.getLogger("screenmap.integrations.figma")

FIGMA_API_BASE = "https://api.figma.com"

_FILE_KEY_RE = re.compile(r"figma\.com/(?:design|file|proto)/([a-zA-Z0-9]+)")


class FigmaClientError(Exception):
    """Raised when a Figma API call fails."""


def extract_file_key(figma_url: str) -> str:
    """Extract the file key from a Figma design/file/proto URL."""
    match = _FILE_KEY_RE.search(figma_url or "")
    if not match:
        raise FigmaClientError(f"Unrecognized Figma URL: {figma_url}")
    return match.group(1)


def extract_node_id(figma_url: str) -> Optional[str]:
    """Extract ``node-id`` from a Figma URL, converted to API form ("1-2" → "1:2")."""
    query = parse_qs(urlparse(figma_url or "").query)
    values = query.get("node-id")
    if not values or not values[0]:
        return None
    return unquote(values[0]).replace("-", ":")


def safe_asset_name(node_id: str) -> str:
    return re.sub(r"[^a-zA-Z0-9_-]", "_", node_id)


class FigmaClient:
    """Async Figma REST API client.

    Args:
        token: Figma PAT. Falls back to ``config.FIGMA_TOKEN``.
        timeout: HTTP request timeout in seconds.
        assets_dir: Directory for downloaded assets.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        assets_dir: Optional[str] = None,
    ):
        self._token = token or config.FIGMA_TOKEN
        if not self._token:
            raise FigmaClientError(
                "Figma token not configured. Set FIGMA_TOKEN environment variable "
                "or pass token= to FigmaClient()."
            )
        self._client: Optional[httpx.AsyncClient] = None
        self._timeout = timeout if timeout is not None else settings.FIGMA_HTTP_TIMEOUT
        self._assets_dir = assets_dir or config.ASSETS_DIR
        self._image_urls: Dict[str, Dict[str, Optional[str]]] = {}

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=FIGMA_API_BASE,
                headers={"X-FIGMA-TOKEN": self._token},
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=5, max_keepalive_connections=3),
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FigmaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get(self, path: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        """Make a GET request to the Figma API."""
        client = await self._get_client()
        try:
            resp = await client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise FigmaClientError(f"Figma API timeout: {path}") from e
        except httpx.ConnectError as e:
            raise FigmaClientError(f"Figma API connection error: {path}") from e

        if resp.status_code == 403:
            raise FigmaClientError(
                "Figma API returned 403 Forbidden. Check that FIGMA_TOKEN is valid "
                "and has file_content:read scope."
            )
        if resp.status_code == 404:
            raise FigmaClientError(f"Figma resource not found: {path}")
        if resp.status_code == 429:
            raise FigmaClientError("Figma API rate limit exceeded. Retry later.")
        if resp.status_code != 200:
            raise FigmaClientError(
                f"Figma API error {resp.status_code}: {resp.text[:200]}"
            )

        return resp.json()

    # ------------------------------------------------------------------
    # Core API methods
    # ------------------------------------------------------------------

    async def get_file(self, file_key: str) -> Dict[str, Any]:
        """Fetch a whole Figma file. GET /v1/files/:key"""
        data = await self._get(f"/v1/files/{file_key}")
        logger.info(f"get_file: file={file_key}, name={data.get('name')!r}")
        return data

    async def get_file_nodes(
        self,
        file_key: str,
        node_ids: List[str],
    ) -> Dict[str, Any]:
        """Fetch specific nodes from a Figma file.

        GET /v1/files/:key/nodes?ids=...
        """
        ids_param = ",".join(node_ids)
        data = await self._get(f"/v1/files/{file_key}/nodes", params={"ids": ids_param})
        logger.info(
            f"get_file_nodes: file={file_key}, requested={len(node_ids)}, "
            f"returned={len(data.get('nodes') or {})}"
        )
        return data

    async def fetch_document(
        self,
        file_key: str,
        node_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Fetch a file, or just one node subtree when ``node_id`` is given."""
        if node_id:
            return await self.get_file_nodes(file_key, [node_id])
        return await self.get_file(file_key)

    async def get_node_images(
        self,
        file_key: str,
        node_ids: List[str],
        fmt: Optional[str] = None,
        scale: Optional[int] = None,
    ) -> Dict[str, Optional[str]]:
        """Render node images via Figma's image export API.

        GET /v1/images/:key?ids=...&format=png&scale=2
        """
        params: Dict[str, str] = {
            "ids": ",".join(node_ids),
            "format": fmt or settings.ASSET_IMAGE_FORMAT,
            "scale": str(scale or settings.ASSET_IMAGE_SCALE),
        }
        data = await self._get(f"/v1/images/{file_key}", params=params)

        if data.get("err"):
            raise FigmaClientError(f"Figma image render error: {data['err']}")

        images = data.get("images") or {}
        logger.info(
            f"get_node_images: file={file_key}, requested={len(node_ids)}, "
            f"rendered={sum(1 for v in images.values() if v)}"
        )
        return images

    async def prefetch_image_urls(self, file_key: str, node_ids: List[str]) -> None:
        """Render URLs for many nodes in one call, cached for ``download_asset``."""
        if not node_ids:
            return
        images = await self.get_node_images(file_key, node_ids)
        self._image_urls.setdefault(file_key, {}).update(images)

    # ------------------------------------------------------------------
    # Asset download
    # ------------------------------------------------------------------

    async def download_asset(self, node_id: str, file_key: str) -> Optional[str]:
        """Download one node render to ``{assets_dir}/{safe_id}.{fmt}``.

        Signature matches the engine's asset collaborator. Returns the local
        path, or None when Figma has no render for the node.
        """
        url = self._image_urls.get(file_key, {}).get(node_id)
        if url is None:
            images = await self.get_node_images(file_key, [node_id])
            url = images.get(node_id)
        if not url:
            logger.warning(f"download_asset: No image URL for node {node_id}")
            return None

        fmt = settings.ASSET_IMAGE_FORMAT
        os.makedirs(self._assets_dir, exist_ok=True)
        filepath = os.path.join(self._assets_dir, f"{safe_asset_name(node_id)}.{fmt}")

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as dl_client:
                img_resp = await dl_client.get(url)
        except httpx.HTTPError as e:
            raise FigmaClientError(f"Asset download failed for {node_id}: {e}") from e

        if img_resp.status_code != 200:
            logger.warning(
                f"download_asset: Failed to download {node_id}: HTTP {img_resp.status_code}"
            )
            return None

        with open(filepath, "wb") as f:
            f.write(img_resp.content)
        logger.info(f"download_asset: {node_id} → {filepath} ({len(img_resp.content)} bytes)")
        return filepath
