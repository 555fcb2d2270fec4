"""
/overlay — visibility of the break overlay, polled by the display client.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...api.schemas import OverlayStateOut

router = APIRouter(prefix="/overlay", tags=["overlay"])


def _get_driver(request: Request):
    return request.app.state.driver


@router.get("", response_model=OverlayStateOut)
def get_overlay(driver=Depends(_get_driver)):
    state = driver.overlay.state()
    return OverlayStateOut(
        visible=state.visible,
        reason=state.reason,
        visible_seconds=state.visible_seconds(),
    )
