"""Agency Portal — Client & Sync Routes."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from app.core.errors import (
    ConfigurationMissing,
    NotFound,
    PortalError,
    TransportFailure,
    UpstreamRejected,
)
from app.core.logging import get_logger
from app.database import get_session
from app.models.account_models import ClientAccount, UserRole
from app.models.campaign_models import DatePreset, SyncResult
from app.sync.pipeline import load_credentials, run_sync

logger = get_logger("api.sync")

router = APIRouter(tags=["Sync"])


def portal_http_error(e: PortalError) -> HTTPException:
    """Translate a portal error into the HTTP response the dashboard shows."""
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ConfigurationMissing):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, UpstreamRejected):
        return HTTPException(status_code=502, detail=f"Meta API error: {e}")
    if isinstance(e, TransportFailure):
        return HTTPException(status_code=503, detail=f"Meta API unreachable: {e}")
    return HTTPException(status_code=500, detail=str(e))


@router.get("/clients", response_model=List[ClientAccount])
async def list_clients(session: Session = Depends(get_session)):
    """Client accounts, for the client selector."""
    return session.exec(
        select(ClientAccount)
        .where(ClientAccount.role == UserRole.CLIENT)
        .order_by(ClientAccount.name)
    ).all()


@router.post("/clients/{client_id}/sync", response_model=SyncResult)
async def sync_client(
    client_id: str,
    date_preset: DatePreset = Query(DatePreset.MAXIMUM),
    session: Session = Depends(get_session),
):
    """Pull the client's Meta campaigns for the window and reconcile the store."""
    try:
        credentials = load_credentials(session)
        return await run_sync(session, client_id, credentials, date_preset)
    except PortalError as e:
        logger.error(
            f"Sync failed: {e}",
            extra={"client_id": client_id, "date_preset": date_preset.value},
        )
        raise portal_http_error(e)
