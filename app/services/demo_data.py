"""Agency Portal — Demo Data.

Populates the portal with example campaigns and tasks for every client so
the dashboard has something to show before the first Meta sync.
"""

from typing import Dict, List

from sqlalchemy import delete, func
from sqlmodel import Session, select

from app.core.logging import get_logger
from app.models.account_models import ClientAccount, UserRole
from app.models.campaign_models import Campaign, CampaignStatus
from app.models.task_models import Task, TaskPriority, TaskStatus
from app.sync.purge import purge_campaigns

logger = get_logger("services.demo")

DEMO_CLIENT_ID = "demo-client-1"

DEMO_CAMPAIGNS: List[Dict] = [
    {"name": "Verão 2024 - Conversão", "status": CampaignStatus.ACTIVE, "spend": 12500, "impressions": 450000, "clicks": 8500, "ctr": 1.89, "cpc": 1.47, "roas": 4.2, "conversations": 1240, "leads": 50},
    {"name": "Branding Institucional", "status": CampaignStatus.ACTIVE, "spend": 4200, "impressions": 800000, "clicks": 3200, "ctr": 0.4, "cpc": 1.31, "roas": 1.5, "conversations": 80, "leads": 10},
    {"name": "Promoção Flash Weekend", "status": CampaignStatus.PAUSED, "spend": 1500, "impressions": 120000, "clicks": 4000, "ctr": 3.33, "cpc": 0.37, "roas": 8.5, "conversations": 850, "leads": 20},
    {"name": "Remarketing Carrinho", "status": CampaignStatus.ACTIVE, "spend": 3100, "impressions": 90000, "clicks": 2100, "ctr": 2.33, "cpc": 1.48, "roas": 6.1, "conversations": 400, "leads": 150},
    {"name": "Lead Gen - Ebook", "status": CampaignStatus.COMPLETED, "spend": 5000, "impressions": 200000, "clicks": 5000, "ctr": 2.5, "cpc": 1.00, "roas": 2.1, "conversations": 50, "leads": 2100},
]

DEMO_TASKS: List[Dict] = [
    {"title": "Criar criativos Campanha Black Friday", "assignee": "Ana Designer", "status": TaskStatus.IN_PROGRESS, "priority": TaskPriority.HIGH, "due_date": "2024-05-20", "tags": ["Design", "Meta"]},
    {"title": "Configurar Pixel Conversão Site", "assignee": "Dev Team", "status": TaskStatus.TODO, "priority": TaskPriority.HIGH, "due_date": "2024-05-22", "tags": ["Tech", "Tracking"]},
    {"title": "Aprovar Copy Institucional", "assignee": "Carlos Copy", "status": TaskStatus.REVIEW, "priority": TaskPriority.MEDIUM, "due_date": "2024-05-18", "tags": ["Copywriting"]},
    {"title": "Relatório Mensal Abril", "assignee": "Luiza Account", "status": TaskStatus.DONE, "priority": TaskPriority.MEDIUM, "due_date": "2024-05-05", "tags": ["Relatório"]},
    {"title": "Planejamento Q3", "assignee": "João Strat", "status": TaskStatus.TODO, "priority": TaskPriority.LOW, "due_date": "2024-06-01", "tags": ["Strategy"]},
]


def _clients(session: Session) -> List[ClientAccount]:
    clients = session.exec(
        select(ClientAccount).where(ClientAccount.role == UserRole.CLIENT)
    ).all()
    if clients:
        return list(clients)
    demo = ClientAccount(
        id=DEMO_CLIENT_ID,
        name="Empresa Modelo Ltda",
        email="cliente@example.com",
        role=UserRole.CLIENT,
        company_name="Empresa Modelo Ltda",
    )
    session.add(demo)
    session.commit()
    session.refresh(demo)
    return [demo]


def _populate(session: Session) -> int:
    clients = _clients(session)
    for client in clients:
        for data in DEMO_CAMPAIGNS:
            session.add(Campaign(client_id=client.id, **data))
        for data in DEMO_TASKS:
            session.add(Task(client_id=client.id, **data))
    session.commit()
    return len(clients)


async def reset_demo_data(session: Session) -> int:
    """Drop all campaigns and tasks, then recreate the demo set per client.

    Campaigns go through the batched purge.
    """
    await purge_campaigns(session)
    session.exec(delete(Task))  # type: ignore
    session.commit()
    count = _populate(session)
    logger.info(f"Demo data reset for {count} clients", extra={"count": count})
    return count


def seed_demo_data(session: Session) -> int:
    """Create demo data only when there are no campaigns yet. Returns clients seeded."""
    existing = session.exec(select(func.count()).select_from(Campaign)).one()
    if existing:
        logger.info("Campaigns already present, skipping demo seed")
        return 0
    count = _populate(session)
    logger.info(f"Demo data seeded for {count} clients", extra={"count": count})
    return count
