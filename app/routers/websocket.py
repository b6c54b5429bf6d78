# app/routers/websocket.py
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
import json
import logging

from app.dependencies import get_leaderboard_service
from app.leaderboard import LeaderboardService
from app.sequencer import ClickSequencer, Symbol
from app.storage.base import StorageError

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_PLAYER_NAME_LENGTH = 50


async def send_json(websocket: WebSocket, payload: dict) -> None:
    await websocket.send_text(json.dumps(payload))


async def send_error(websocket: WebSocket, message: str) -> None:
    await send_json(websocket, {"type": "error", "message": message})


async def handle_submit(
    websocket: WebSocket, player_name: str, sequencer: ClickSequencer, country, service: LeaderboardService
) -> None:
    if country is not None and (not isinstance(country, str) or len(country) != 2):
        await send_error(websocket, "country must be a 2-letter code")
        return
    try:
        entry = await service.submit_score(player_name, sequencer.score, country)
    except StorageError:
        logger.exception(f"Score submission failed for '{player_name}'")
        await send_error(websocket, "Internal server error")
        return
    await send_json(websocket, {"type": "submitted", "entry": entry.model_dump(mode="json")})


# --- Play session: one sequencer per connection, gone on disconnect ---
@router.websocket("/ws/play/{player_name}")
async def play_session(
    websocket: WebSocket,
    player_name: str,
    service: LeaderboardService = Depends(get_leaderboard_service),
):
    await websocket.accept()
    if not 1 <= len(player_name) <= MAX_PLAYER_NAME_LENGTH:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    sequencer = ClickSequencer()
    logger.info(f"Play session opened for: {player_name}")

    try:
        await send_json(websocket, {"type": "connected", "state": sequencer.snapshot()})
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await send_error(websocket, "Messages must be JSON")
                continue
            if not isinstance(message, dict):
                await send_error(websocket, "Messages must be JSON objects")
                continue

            msg_type = message.get("type")
            if msg_type == "click":
                try:
                    symbol = Symbol.parse(message.get("symbol"))
                except ValueError as e:
                    await send_error(websocket, str(e))
                    continue
                completed = sequencer.click(symbol)
                await send_json(websocket, {"type": "state", "completed": completed, "state": sequencer.snapshot()})
            elif msg_type == "submit":
                await handle_submit(websocket, player_name, sequencer, message.get("country"), service)
            elif msg_type == "reset":
                sequencer.reset()
                await send_json(websocket, {"type": "state", "completed": False, "state": sequencer.snapshot()})
            else:
                await send_error(websocket, f"Unknown message type: {msg_type!r}")

    except WebSocketDisconnect:
        logger.info(f"Play session closed for: {player_name} (score {sequencer.score})")
