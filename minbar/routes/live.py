import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel

from minbar.config import settings
from minbar.database import get_async_conn
from minbar.engine import (
    InvalidSession,
    OutOfRange,
    Session,
    SessionAlreadyActive,
    SessionHost,
    ViewMode,
    render_state,
)
from minbar.services.segments import segments_for_khutbah

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])

# The one live session this process can run, plus the displays watching it.
# "websockets": [WebSocket], "khutbah_id": int | None,
# "outbox": asyncio.Queue while a broadcast consumer is running
_host = SessionHost()
_live: dict[str, Any] = {"websockets": [], "khutbah_id": None}

# Broadcast consumer tasks; held so they are not garbage collected early
_pending: set[asyncio.Task] = set()


# ------------------------------------------------------------------
# Request bodies
# ------------------------------------------------------------------


class LiveStart(BaseModel):
    khutbah_id: int | None = None


class JumpRequest(BaseModel):
    index: int


class ViewModeRequest(BaseModel):
    mode: ViewMode | None = None


class KeyEvent(BaseModel):
    key: str


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def get_host() -> SessionHost:
    return _host


def shutdown() -> None:
    """End any live session.  Called from the app lifespan on shutdown."""
    _host.exit()


def _state(session: Session) -> dict:
    return render_state(session, settings.low_time_threshold_seconds)


def _require_session() -> Session:
    session = _host.session
    if session is None:
        raise HTTPException(status_code=400, detail="No live session.")
    return session


def _command_result(session: Session, changed: bool) -> dict:
    return {"changed": changed, "state": _state(session)}


# ==================================================================
# REST endpoints
# ==================================================================


@router.post("/api/live/start")
async def start_live(body: LiveStart) -> dict:
    """Enter live delivery for a khutbah (or the sample script)."""
    if _host.is_active:
        raise HTTPException(status_code=409, detail="A live session is already running.")

    conn = await get_async_conn()
    try:
        if body.khutbah_id is not None:
            row = await conn.execute(
                "SELECT id FROM khutbahs WHERE id = ?", (body.khutbah_id,)
            )
            if not await row.fetchone():
                raise HTTPException(
                    status_code=404, detail=f"Khutbah {body.khutbah_id} not found"
                )
        segments = await segments_for_khutbah(conn, body.khutbah_id)
    finally:
        await conn.close()

    try:
        session = _host.start(segments)
    except SessionAlreadyActive:
        raise HTTPException(status_code=409, detail="A live session is already running.")
    except InvalidSession as e:
        raise HTTPException(status_code=400, detail=str(e))

    _live["khutbah_id"] = body.khutbah_id
    return {"khutbah_id": body.khutbah_id, "state": _state(session)}


@router.get("/api/live")
async def get_live() -> dict:
    session = _host.session
    if session is None:
        raise HTTPException(status_code=404, detail="No live session.")
    return {"khutbah_id": _live["khutbah_id"], "state": _state(session)}


@router.post("/api/live/exit")
async def exit_live() -> dict:
    """End the session.  Nothing about its progress is kept."""
    _require_session()
    _host.exit()
    khutbah_id = _live["khutbah_id"]
    _live["khutbah_id"] = None
    return {"khutbah_id": khutbah_id, "status": "ended"}


@router.post("/api/live/next")
async def next_segment() -> dict:
    session = _require_session()
    return _command_result(session, session.go_next())


@router.post("/api/live/previous")
async def previous_segment() -> dict:
    session = _require_session()
    return _command_result(session, session.go_previous())


@router.post("/api/live/jump")
async def jump_to_segment(body: JumpRequest) -> dict:
    session = _require_session()
    try:
        changed = session.jump_to(body.index)
    except OutOfRange as e:
        logger.info("Rejected jump: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    return _command_result(session, changed)


@router.post("/api/live/play")
async def play() -> dict:
    session = _require_session()
    return _command_result(session, session.play())


@router.post("/api/live/pause")
async def pause() -> dict:
    session = _require_session()
    return _command_result(session, session.pause())


@router.post("/api/live/toggle")
async def toggle_play() -> dict:
    session = _require_session()
    return _command_result(session, session.toggle_play())


@router.post("/api/live/view-mode")
async def set_view_mode(body: ViewModeRequest) -> dict:
    """Switch between cards and teleprompter.  Toggles when no mode is given."""
    session = _require_session()
    if body.mode is None:
        changed = session.toggle_view_mode()
    else:
        changed = session.set_view_mode(body.mode)
    return _command_result(session, changed)


@router.post("/api/live/keys")
async def press_key(body: KeyEvent) -> dict:
    """Feed a keyboard event (``KeyboardEvent.key``) to the input router."""
    session = _require_session()
    handled = _host.handle_key(body.key)
    return {"handled": handled, "state": _state(session)}


# ==================================================================
# WebSocket endpoint
# ==================================================================


@router.websocket("/ws/live")
async def live_socket(websocket: WebSocket) -> None:
    """Render stream for the live session; also accepts key presses."""
    await websocket.accept()
    _live["websockets"].append(websocket)

    try:
        session = _host.session
        if session is not None:
            await websocket.send_json({"type": "live_state", "state": _state(session)})
        else:
            await websocket.send_json({"type": "idle"})

        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                continue  # keep-alive pings are plain text
            if isinstance(message, dict) and message.get("type") == "key":
                _host.handle_key(str(message.get("key", "")))
    except WebSocketDisconnect:
        pass
    finally:
        if websocket in _live["websockets"]:
            _live["websockets"].remove(websocket)


# ==================================================================
# Host callbacks (run on the event loop)
# ==================================================================


async def _send_to_all(message: dict) -> None:
    """Broadcast a JSON message to all connected WebSocket clients."""
    for ws in list(_live["websockets"]):
        try:
            await ws.send_json(message)
        except Exception:
            pass  # client may have already disconnected


async def _drain(queue: asyncio.Queue) -> None:
    """Send queued messages one at a time, in order, until ``None`` arrives."""
    while True:
        message = await queue.get()
        if message is None:
            return
        await _send_to_all(message)


def _outbox() -> asyncio.Queue:
    """The broadcast queue for this session, created on first use."""
    queue = _live.get("outbox")
    if queue is None:
        queue = asyncio.Queue()
        _live["outbox"] = queue
        task = asyncio.get_running_loop().create_task(_drain(queue))
        _pending.add(task)
        task.add_done_callback(_pending.discard)
    return queue


def _schedule_broadcast(message: dict) -> None:
    if not _live["websockets"]:
        return
    _outbox().put_nowait(message)


def _close_outbox() -> None:
    queue = _live.pop("outbox", None)
    if queue is not None:
        queue.put_nowait(None)


def _on_render(session: Session) -> None:
    # Snapshot now; the send happens after the current call returns
    _schedule_broadcast({"type": "live_state", "state": _state(session)})


def _on_exit(session: Session) -> None:
    _schedule_broadcast({"type": "session_ended"})
    _close_outbox()


_host.on_render(_on_render)
_host.on_exit(_on_exit)
