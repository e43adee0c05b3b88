from fastapi import APIRouter, Depends

from portfolio.config import Settings
from portfolio.dependencies import get_app_settings
from portfolio.schemas import ActionResult, ThemeUpdate
from portfolio.services.theme import read_appearance, save_appearance

router = APIRouter(prefix="/api", tags=["theme"])


@router.get("/theme")
def get_theme(settings: Settings = Depends(get_app_settings)):
    return {"appearance": read_appearance(settings.theme_path)}


@router.post("/theme", response_model=ActionResult)
def update_theme(data: ThemeUpdate, settings: Settings = Depends(get_app_settings)):
    # Non-critical: a file problem is logged, not reported to the visitor
    save_appearance(settings.theme_path, data.appearance)
    return ActionResult(success=True, message="Theme updated successfully")
