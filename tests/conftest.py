"""Shared fixtures: in-memory database, API client and Meta payload builders."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SCHEDULER_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("PURGE_PAUSE_SECONDS", "0")

from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.database import get_session
from app.models.account_models import AppSettings, ClientAccount, SETTINGS_KEY, UserRole


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client_account(session) -> ClientAccount:
    account = ClientAccount(
        id="client-1",
        name="Hotel Sea Angels",
        email="contato@seaangels.example",
        role=UserRole.CLIENT,
        company_name="Sea Angels",
        ad_account_id=" 123456789 ",
    )
    session.add(account)
    session.commit()
    session.refresh(account)
    return account


@pytest.fixture
def agency_token(session) -> str:
    session.add(AppSettings(id=SETTINGS_KEY, meta_ads_token="EAAB-test-token"))
    session.commit()
    return "EAAB-test-token"


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
def api(session):
    from app.main import app

    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# Meta Payload Builders
# ============================================================================


def meta_campaign(
    campaign_id: str,
    name: str,
    status: str = "ACTIVE",
    objective: str = "OUTCOME_TRAFFIC",
    spend: Any = "0",
    impressions: Any = "0",
    clicks: Any = "0",
    ctr: Any = "0",
    cpc: Any = "0",
    actions: Optional[List[Dict[str, str]]] = None,
    action_values: Optional[List[Dict[str, str]]] = None,
    link_clicks: Any = None,
) -> Dict[str, Any]:
    """One row of the /campaigns response with nested insights."""
    insight: Dict[str, Any] = {
        "spend": spend,
        "impressions": impressions,
        "clicks": clicks,
        "ctr": ctr,
        "cpc": cpc,
    }
    if actions is not None:
        insight["actions"] = actions
    if action_values is not None:
        insight["action_values"] = action_values
    if link_clicks is not None:
        insight["inline_link_clicks"] = link_clicks
    return {
        "id": campaign_id,
        "name": name,
        "status": status,
        "effective_status": status,
        "objective": objective,
        "insights": {"data": [insight]},
    }


class FakeMeta:
    """Routes Graph API requests to canned responses for httpx.MockTransport."""

    def __init__(
        self,
        campaigns: Optional[List[Dict[str, Any]]] = None,
        age_gender: Optional[List[Dict[str, Any]]] = None,
        platform: Optional[List[Dict[str, Any]]] = None,
    ):
        self.campaigns = campaigns or []
        self.age_gender = age_gender or []
        self.platform = platform or []
        self.requests: List[httpx.Request] = []
        self.overrides: Dict[str, Any] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        breakdowns = request.url.params.get("breakdowns", "")
        if path.endswith("/campaigns"):
            key = "campaigns"
        elif breakdowns == "age,gender":
            key = "age_gender"
        elif breakdowns == "publisher_platform":
            key = "platform"
        elif path.endswith("/me"):
            key = "me"
        else:
            return httpx.Response(404, json={"error": {"message": "unknown path"}})

        override = self.overrides.get(key)
        if isinstance(override, Exception):
            raise override
        if isinstance(override, httpx.Response):
            return override
        if key == "me":
            return httpx.Response(200, json={"id": "42", "name": "Agency Bot"})
        return httpx.Response(200, json={"data": getattr(self, key)})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_meta() -> FakeMeta:
    return FakeMeta()
