"""Agency Portal — Integration Settings & Meta Token Routes."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from app.connectors.meta.client import MetaClient
from app.core.logging import get_logger
from app.database import get_session
from app.models.account_models import AppSettings, SETTINGS_KEY

logger = get_logger("api.meta")

router = APIRouter(tags=["Settings"])


class SettingsUpdate(BaseModel):
    meta_ads_token: Optional[str] = None
    google_ads_key: Optional[str] = None


class SettingsView(BaseModel):
    meta_ads_token: str = ""
    has_meta_token: bool = False
    google_ads_key: Optional[str] = None


class TokenValidationRequest(BaseModel):
    token: Optional[str] = None
    """Token to check. Defaults to the stored agency token."""


class TokenValidationResponse(BaseModel):
    valid: bool
    message: str


def _mask_token(token: str) -> str:
    """Mask all but the last four characters for display."""
    if len(token) <= 4:
        return "*" * len(token)
    return f"{'*' * 8}{token[-4:]}"


def _settings_record(session: Session) -> AppSettings:
    return session.get(AppSettings, SETTINGS_KEY) or AppSettings(id=SETTINGS_KEY)


@router.get("/settings", response_model=SettingsView)
async def get_settings(session: Session = Depends(get_session)):
    record = _settings_record(session)
    return SettingsView(
        meta_ads_token=_mask_token(record.meta_ads_token) if record.meta_ads_token else "",
        has_meta_token=bool(record.meta_ads_token),
        google_ads_key=record.google_ads_key,
    )


@router.put("/settings", response_model=SettingsView)
async def save_settings(
    request: SettingsUpdate, session: Session = Depends(get_session)
):
    """Merge the given fields into the settings record."""
    record = _settings_record(session)
    for key, value in request.model_dump(exclude_unset=True).items():
        if key == "meta_ads_token":
            value = (value or "").strip()
        setattr(record, key, value)
    record.updated_at = datetime.now(timezone.utc)
    session.add(record)
    session.commit()
    logger.info("Integration settings saved")
    return await get_settings(session)


@router.post("/meta/validate-token", response_model=TokenValidationResponse)
async def validate_token(
    request: TokenValidationRequest, session: Session = Depends(get_session)
):
    """Check a Meta access token against the identity endpoint."""
    token = (request.token or _settings_record(session).meta_ads_token).strip()
    if not token:
        return TokenValidationResponse(valid=False, message="No token configured.")
    async with MetaClient(token) as client:
        result = await client.validate_token()
    return TokenValidationResponse(valid=result["valid"], message=result["message"])
