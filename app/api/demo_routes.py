"""Agency Portal — Demo Data Routes."""

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.database import get_session
from app.services.demo_data import reset_demo_data, seed_demo_data

router = APIRouter(prefix="/demo", tags=["Demo"])


@router.post("/seed")
async def seed(session: Session = Depends(get_session)):
    """Create demo campaigns and tasks if the store has no campaigns."""
    count = seed_demo_data(session)
    if not count:
        return {"status": "skipped", "message": "Store already contains campaigns."}
    return {"status": "success", "message": f"Demo data created for {count} clients."}


@router.post("/reset")
async def reset(session: Session = Depends(get_session)):
    """Replace all campaigns and tasks with the demo set."""
    count = await reset_demo_data(session)
    return {"status": "success", "message": f"Demo data reset for {count} clients."}
