"""
/settings — read and replace the break configuration.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...api.schemas import BreakConfigModel, SettingsOut
from ...settings import DEFAULTS

router = APIRouter(prefix="/settings", tags=["settings"])


def _get_commands(request: Request):
    return request.app.state.commands


@router.get("", response_model=SettingsOut)
def read_settings(commands=Depends(_get_commands)):
    """Return the active configuration with the defaults for reference."""
    return SettingsOut(
        settings=BreakConfigModel.from_config(commands.get_config()),
        defaults=DEFAULTS,
    )


@router.put("", response_model=SettingsOut)
def write_settings(body: BreakConfigModel, commands=Depends(_get_commands)):
    """Replace the whole configuration; persists to data/settings.json."""
    cfg = commands.set_config(body.to_config())
    return SettingsOut(settings=BreakConfigModel.from_config(cfg))
