"""
Route handlers for model listing and the model selection control.
"""
from typing import Optional

from fastapi import APIRouter, status
from fastapi.responses import HTMLResponse, JSONResponse

from config import Config
from models.api_models import ModelSelection
from services.model_select import deepseek_model_select
from utils.model_catalog import models_for

router = APIRouter()


def _bind_default_deepseek_model(model: str) -> None:
    Config.DEEPSEEK_MODEL = model


@router.get("/list")
async def list_models(provider: str = "openai"):
    """List the catalog models for a provider, sorted."""
    if provider not in Config.PROVIDERS:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "unknown_provider", "message": f"Unknown provider: {provider}"}
        )
    return {"provider": provider, "models": models_for(provider)}


@router.get("/models/deepseek")
async def deepseek_model_control(model: Optional[str] = None):
    """Describe the DeepSeek model select control, bound to the configured model."""
    return deepseek_model_select(model or Config.DEEPSEEK_MODEL).to_dict()


@router.get("/models/deepseek/select", response_class=HTMLResponse)
async def render_deepseek_model_control(model: Optional[str] = None):
    """Render the DeepSeek model select control as an HTML fragment."""
    return deepseek_model_select(model or Config.DEEPSEEK_MODEL).render()


@router.post("/models/deepseek/select")
async def select_deepseek_model(selection: ModelSelection):
    """Apply a selection from the control and make it the default DeepSeek model."""
    control = deepseek_model_select(Config.DEEPSEEK_MODEL, on_change=_bind_default_deepseek_model)
    try:
        chosen = control.select(selection.model)
    except ValueError as e:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "unknown_model", "message": str(e)}
        )
    return {"model": chosen}
