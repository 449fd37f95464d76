"""Agency Portal — Campaign Routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from app.core.errors import PurgeInterrupted
from app.core.logging import get_logger
from app.database import get_session
from app.models.campaign_models import Campaign, CampaignCreate, PurgeResult
from app.sync.purge import purge_campaigns

logger = get_logger("api.campaigns")

router = APIRouter(prefix="/campaigns", tags=["Campaigns"])


def list_campaigns_for(session: Session, client_id: Optional[str]) -> List[Campaign]:
    """All campaigns, or one client's campaigns. 'all' means every client."""
    query = select(Campaign).order_by(Campaign.id)
    if client_id and client_id != "all":
        query = query.where(Campaign.client_id == client_id)
    return list(session.exec(query).all())


@router.get("", response_model=List[Campaign])
async def list_campaigns(
    client_id: Optional[str] = Query(None, description="Client id, or 'all'"),
    session: Session = Depends(get_session),
):
    return list_campaigns_for(session, client_id)


@router.post("", response_model=Campaign, status_code=201)
async def add_campaign(
    request: CampaignCreate,
    session: Session = Depends(get_session),
):
    """Create a manually authored campaign (never reconciled)."""
    campaign = Campaign(**request.model_dump(), external_id=None)
    session.add(campaign)
    session.commit()
    session.refresh(campaign)
    return campaign


@router.delete("", response_model=PurgeResult)
async def purge_all_campaigns(
    batch_size: Optional[int] = Query(None, ge=1, le=500),
    session: Session = Depends(get_session),
):
    """Delete every campaign of every client in bounded batches."""
    try:
        return await purge_campaigns(session, batch_size=batch_size)
    except PurgeInterrupted as e:
        raise HTTPException(
            status_code=500,
            detail={"message": str(e), "deleted": e.deleted, "batches": e.batches},
        )
