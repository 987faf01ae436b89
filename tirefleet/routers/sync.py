"""Collection snapshots and live change feeds."""

import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from tirefleet.dependencies import get_sync_hub
from tirefleet.schemas.common import ApiResponse
from tirefleet.sync.events import Collection
from tirefleet.sync.hub import SyncHub
from tirefleet.sync.mirror import Snapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sync", tags=["sync"])


def _dump(snapshot: Snapshot) -> list[dict]:
    return [record.model_dump(mode="json", by_alias=True) for record in snapshot]


@router.get("/{collection}")
async def get_snapshot(
    collection: Collection,
    hub: SyncHub = Depends(get_sync_hub),
) -> ApiResponse[list[dict]]:
    return ApiResponse.ok(_dump(await hub.fetch_all(collection)))


@router.post("/{collection}/refresh")
async def refresh_collection(
    collection: Collection,
    hub: SyncHub = Depends(get_sync_hub),
) -> ApiResponse[dict]:
    """Force a reload and push it to every live subscriber."""
    snapshot = await hub.refresh(collection)
    return ApiResponse.ok({"collection": collection.value, "count": len(snapshot)})


@router.websocket("/ws/{collection}")
async def stream_collection(websocket: WebSocket, collection: Collection) -> None:
    """Send the full collection on connect and again after every change."""
    hub: SyncHub = websocket.app.state.hub
    await websocket.accept()
    queue: asyncio.Queue[Snapshot] = asyncio.Queue()

    unsubscribe = await hub.subscribe(collection, queue.put_nowait)
    try:
        while True:
            snapshot = await queue.get()
            await websocket.send_json({"collection": collection.value, "items": _dump(snapshot)})
    except WebSocketDisconnect:
        logger.debug("Subscriber for %s disconnected", collection.value)
    finally:
        unsubscribe()
