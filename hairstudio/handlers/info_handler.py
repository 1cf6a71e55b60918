"""Read-only endpoints: option catalog and environment diagnostics."""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from hairstudio.config import get_settings
from hairstudio.models import EnvCheckResponse, KeyReport, OptionsCatalog
from hairstudio.models.options import HAIR_COLORS, Gender, hair_styles_for

router = APIRouter(prefix="/api")


def _key_report(value: str | None, *, reveal_edges: bool) -> KeyReport:
    if not value:
        return KeyReport(present=False, length=0)
    if not reveal_edges:
        return KeyReport(present=True, length=len(value))
    return KeyReport(present=True, length=len(value), first_char=value[0], last_char=value[-1])


@router.get("/options", response_model=OptionsCatalog, response_model_by_alias=True)
async def options(gender: Gender = "female"):
    return OptionsCatalog(gender=gender, hair_styles=hair_styles_for(gender), hair_colors=HAIR_COLORS)


@router.get("/check-env", response_model=EnvCheckResponse, response_model_by_alias=True)
async def check_env():
    """Report whether API keys are configured without exposing them."""
    settings = get_settings()
    return EnvCheckResponse(
        timestamp=datetime.now(timezone.utc),
        environment={
            "ENVIRONMENT": settings.environment,
            "GEMINI_API_KEY": _key_report(settings.gemini_api_key, reveal_edges=True),
            "NEXT_PUBLIC_GEMINI_API_KEY": _key_report(settings.next_public_gemini_api_key, reveal_edges=False),
        },
    )
