"""Agency Portal — AI Campaign Analysis Routes."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from app.ai.prompts import AnalysisMode, campaign_digest
from app.ai.registry import ProviderUnavailable, select_provider
from app.api.campaign_routes import list_campaigns_for
from app.core.logging import get_logger
from app.database import get_session
from app.models.campaign_models import Campaign, CampaignStatus

logger = get_logger("api.ai")

router = APIRouter(prefix="/insights", tags=["AI"])


class AnalysisRequest(BaseModel):
    """Request body for POST /insights/generate."""

    client_id: Optional[str] = None
    mode: AnalysisMode = AnalysisMode.PERFORMANCE
    status_filter: Literal["ALL", "ACTIVE"] = "ACTIVE"
    campaign_ids: List[int] = []
    provider: str = "auto"


class AnalysisResponse(BaseModel):
    status: str
    provider_used: str
    campaign_count: int
    html: str


def filter_campaigns(
    campaigns: List[Campaign], status_filter: str, campaign_ids: List[int]
) -> List[Campaign]:
    """Apply the dashboard's status filter and campaign selection."""
    result = campaigns
    if status_filter == "ACTIVE":
        result = [c for c in result if c.status == CampaignStatus.ACTIVE]
    if campaign_ids:
        wanted = set(campaign_ids)
        result = [c for c in result if c.id in wanted]
    return result


@router.post("/generate", response_model=AnalysisResponse)
async def generate_analysis(
    request: AnalysisRequest,
    session: Session = Depends(get_session),
):
    """Generate an HTML analysis of the filtered campaign list."""
    campaigns = filter_campaigns(
        list_campaigns_for(session, request.client_id),
        request.status_filter,
        request.campaign_ids,
    )
    try:
        provider_name, provider = select_provider(request.provider)
    except ProviderUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        html = await provider.generate_analysis(campaign_digest(campaigns), request.mode)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"AI generation failed: {str(e)}")

    return AnalysisResponse(
        status="success",
        provider_used=provider_name,
        campaign_count=len(campaigns),
        html=html,
    )
