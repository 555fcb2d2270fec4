"""
/timer — current break timer status, explicit resets, mode changes and a
WebSocket status stream.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Request, WebSocket, WebSocketDisconnect

from ...api.schemas import ModeRequest, TimerStatusOut
from ...categories import UnknownBreakCategory

router = APIRouter(prefix="/timer", tags=["timer"])


def _get_commands(request: Request):
    return request.app.state.commands


@router.get("", response_model=TimerStatusOut)
def get_timer_state(commands=Depends(_get_commands)):
    """Return the current timer snapshot."""
    return TimerStatusOut.from_status(commands.get_status())


@router.post("/reset/{category}", response_model=TimerStatusOut)
def reset_break(category: str, commands=Depends(_get_commands)):
    """Zero the active-time accumulator for a micro or rest break."""
    try:
        status = commands.reset_break(category)
    except UnknownBreakCategory as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return TimerStatusOut.from_status(status)


@router.post("/rest-break", response_model=TimerStatusOut)
def take_rest_break_now(commands=Depends(_get_commands)):
    """Make the rest break overdue immediately."""
    return TimerStatusOut.from_status(commands.trigger_rest_break())


@router.put("/mode", response_model=TimerStatusOut)
def set_mode(req: ModeRequest, commands=Depends(_get_commands)):
    commands.set_mode(req.mode)
    return TimerStatusOut.from_status(commands.get_status())


@router.websocket("/ws")
async def timer_websocket(websocket: WebSocket):
    """
    WebSocket stream — pushes the timer status once per tick interval until
    the client disconnects. Incoming client messages are ignored.
    """
    commands = websocket.app.state.commands
    interval_s = websocket.app.state.tick_interval_ms / 1000.0
    await websocket.accept()
    try:
        while True:
            status = TimerStatusOut.from_status(commands.get_status())
            await websocket.send_json(status.model_dump(mode="json"))
            try:
                message = await asyncio.wait_for(websocket.receive(), timeout=interval_s)
            except asyncio.TimeoutError:
                continue
            if message["type"] == "websocket.disconnect":
                break
    except WebSocketDisconnect:
        pass
