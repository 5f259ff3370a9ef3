"""Asset enrichment for already-built screen descriptors.

Image-bearing nodes found during normalization are fetched through an
asset collaborator ``fetch_asset(node_id, document_id) -> path | None``
with bounded parallelism. Results are merged into a new descriptor only
after normalization and grouping are complete; a failed fetch just omits
that asset.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Awaitable, Callable, Dict, Optional, Tuple

from screenmap import settings

from .assembler import ScreenDescriptor, ScreenResult
from .geometry import NormalizedComponent

logger = logging.getLogger("screenmap.engine.assets")

AssetFetcher = Callable[[str, str], Awaitable[Optional[str]]]


async def _fetch_one(
    fetch_asset: AssetFetcher,
    node_id: str,
    document_id: str,
    semaphore: asyncio.Semaphore,
) -> Tuple[str, Optional[str]]:
    async with semaphore:
        try:
            path = await fetch_asset(node_id, document_id)
        except Exception as e:
            logger.warning(f"attach_assets: fetch failed for {node_id}: {e}")
            return node_id, None
    if not path:
        logger.warning(f"attach_assets: no asset returned for {node_id}")
    return node_id, path


async def attach_assets(
    descriptor: ScreenDescriptor,
    fetch_asset: AssetFetcher,
    document_id: str,
    concurrency: Optional[int] = None,
) -> ScreenDescriptor:
    """Fetch assets for every component and return an enriched copy.

    Never raises for fetch failures; components whose assets all failed are
    returned unchanged.
    """
    if concurrency is None:
        concurrency = settings.ASSET_FETCH_CONCURRENCY
    node_ids = list(dict.fromkeys(
        node_id
        for component in descriptor.ordered_elements
        for node_id in component.asset_node_ids
    ))
    if not node_ids:
        return descriptor

    semaphore = asyncio.Semaphore(max(concurrency, 1))
    results = await asyncio.gather(*(
        _fetch_one(fetch_asset, node_id, document_id, semaphore)
        for node_id in node_ids
    ))
    paths: Dict[str, str] = {node_id: path for node_id, path in results if path}
    logger.info(
        f"attach_assets: document={document_id}, requested={len(node_ids)}, "
        f"fetched={len(paths)}"
    )

    updated: Dict[str, NormalizedComponent] = {}
    for component in descriptor.ordered_elements:
        assets = {nid: paths[nid] for nid in component.asset_node_ids if nid in paths}
        if assets:
            updated[component.id] = replace(component, assets=assets)
    return descriptor.with_components(updated)


async def attach_assets_to_result(
    result: ScreenResult,
    fetch_asset: AssetFetcher,
    document_id: str,
    concurrency: Optional[int] = None,
) -> ScreenResult:
    screen = await attach_assets(result.screen, fetch_asset, document_id, concurrency)
    return replace(result, screen=screen)
