"""API route tests using FastAPI's TestClient."""

from app.core.errors import TransportFailure, UpstreamRejected
from app.models.campaign_models import Campaign, CampaignStatus, SyncResult
from app.models.task_models import TaskStatus


def test_health(api):
    response = api.get("/health")
    assert response.status_code == 200
    assert response.json()["service"] == "agency-portal"


# ── Clients & sync ──


def test_list_clients(api, client_account):
    response = api.get("/clients")
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == ["client-1"]


def test_sync_without_token_is_bad_request(api, client_account):
    response = api.post("/clients/client-1/sync")
    assert response.status_code == 400
    assert "token" in response.json()["detail"]


def test_sync_unknown_client(api, agency_token):
    response = api.post("/clients/nobody/sync")
    assert response.status_code == 404


def test_sync_rejects_unknown_window(api, client_account, agency_token):
    response = api.post("/clients/client-1/sync", params={"date_preset": "last_90y"})
    assert response.status_code == 422


def test_sync_surfaces_vendor_message(api, client_account, agency_token, monkeypatch):
    async def rejected(*args, **kwargs):
        raise UpstreamRejected("(#17) User request limit reached", error_code=17)

    monkeypatch.setattr("app.api.sync_routes.run_sync", rejected)
    response = api.post("/clients/client-1/sync")
    assert response.status_code == 502
    assert response.json()["detail"] == "Meta API error: (#17) User request limit reached"


def test_sync_network_failure(api, client_account, agency_token, monkeypatch):
    async def unreachable(*args, **kwargs):
        raise TransportFailure("timed out")

    monkeypatch.setattr("app.api.sync_routes.run_sync", unreachable)
    assert api.post("/clients/client-1/sync").status_code == 503


def test_sync_passes_window_and_token(api, client_account, agency_token, monkeypatch):
    calls = {}

    async def fake_sync(session, client_id, credentials, date_preset):
        calls.update(client_id=client_id, token=credentials.meta_access_token, preset=date_preset)
        return SyncResult(
            client_id=client_id,
            account_id="act_123456789",
            date_preset=date_preset.value,
            message=f"Sync complete for period: {date_preset.value}.",
        )

    monkeypatch.setattr("app.api.sync_routes.run_sync", fake_sync)
    response = api.post("/clients/client-1/sync", params={"date_preset": "last_30d"})

    assert response.status_code == 200
    assert response.json()["message"] == "Sync complete for period: last_30d."
    assert calls["token"] == agency_token
    assert calls["preset"].value == "last_30d"


# ── Campaigns ──


def test_manual_campaign_roundtrip(api, session, client_account):
    created = api.post(
        "/campaigns",
        json={"client_id": "client-1", "name": "Panfletagem", "spend": 250, "leads": 4},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["external_id"] is None
    assert body["status"] == CampaignStatus.ACTIVE.value

    listed = api.get("/campaigns", params={"client_id": "client-1"}).json()
    assert [c["name"] for c in listed] == ["Panfletagem"]


def test_campaign_filter_all(api, session):
    session.add(Campaign(client_id="client-1", name="A"))
    session.add(Campaign(client_id="client-2", name="B"))
    session.commit()

    assert len(api.get("/campaigns", params={"client_id": "all"}).json()) == 2
    assert len(api.get("/campaigns", params={"client_id": "client-2"}).json()) == 1


def test_purge_endpoint(api, session):
    session.add_all(Campaign(client_id="client-1", name=f"C{i}") for i in range(7))
    session.commit()

    response = api.delete("/campaigns", params={"batch_size": 3})
    assert response.status_code == 200
    assert response.json() == {"deleted": 7, "batches": 3}
    assert api.get("/campaigns").json() == []


def test_purge_rejects_oversized_batch(api):
    assert api.delete("/campaigns", params={"batch_size": 501}).status_code == 422


# ── Tasks ──


def test_task_board_flow(api, client_account):
    created = api.post(
        "/tasks",
        json={"client_id": "client-1", "title": "Aprovar criativos", "tags": ["Design"]},
    )
    assert created.status_code == 201
    task = created.json()
    assert task["status"] == TaskStatus.TODO.value
    assert task["tags"] == ["Design"]

    moved = api.post(f"/tasks/{task['id']}/move", params={"direction": "next"})
    assert moved.json()["status"] == TaskStatus.IN_PROGRESS.value

    back = api.post(f"/tasks/{task['id']}/move", params={"direction": "prev"})
    assert back.json()["status"] == TaskStatus.TODO.value

    done = api.patch(f"/tasks/{task['id']}/status", json={"status": TaskStatus.DONE.value})
    assert done.json()["status"] == TaskStatus.DONE.value

    listed = api.get("/tasks", params={"client_id": "client-1"}).json()
    assert len(listed) == 1


def test_unknown_task(api):
    assert api.post("/tasks/999/move", params={"direction": "next"}).status_code == 404


def test_bad_direction(api, client_account):
    task = api.post("/tasks", json={"title": "X"}).json()
    assert api.post(f"/tasks/{task['id']}/move", params={"direction": "up"}).status_code == 422


# ── Settings ──


def test_settings_mask_token(api, agency_token):
    body = api.get("/settings").json()
    assert body["has_meta_token"] is True
    assert body["meta_ads_token"] == "********oken"


def test_settings_update_merges(api):
    response = api.put("/settings", json={"meta_ads_token": "  EAAB-new-value  "})
    assert response.status_code == 200
    assert response.json()["meta_ads_token"] == "********alue"

    api.put("/settings", json={"google_ads_key": "g-key"})
    body = api.get("/settings").json()
    assert body["has_meta_token"] is True
    assert body["google_ads_key"] == "g-key"


def test_validate_without_token(api):
    response = api.post("/meta/validate-token", json={})
    assert response.json() == {"valid": False, "message": "No token configured."}


# ── AI analysis ──


class FakeProvider:
    def __init__(self):
        self.digest = None

    async def generate_analysis(self, digest, mode):
        self.digest = digest
        return f"<p><b>Diagnosis ({mode.value}):</b></p>"


def test_generate_analysis_filters_active(api, session, monkeypatch):
    session.add(Campaign(client_id="client-1", name="Live", spend=100, conversations=20))
    session.add(Campaign(client_id="client-1", name="Old", status=CampaignStatus.PAUSED))
    session.commit()
    provider = FakeProvider()
    monkeypatch.setattr(
        "app.api.ai_routes.select_provider", lambda name: ("claude", provider)
    )

    response = api.post(
        "/insights/generate", json={"client_id": "client-1", "mode": "WHATSAPP"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["campaign_count"] == 1
    assert body["provider_used"] == "claude"
    assert "WHATSAPP" in body["html"]
    assert provider.digest[0]["costPerConversation"] == 5.0


def test_generate_analysis_without_provider(api, monkeypatch):
    from app.ai.registry import ProviderUnavailable

    def unavailable(name):
        raise ProviderUnavailable("No AI provider configured.")

    monkeypatch.setattr("app.api.ai_routes.select_provider", unavailable)
    assert api.post("/insights/generate", json={}).status_code == 503


# ── Demo data ──


def test_demo_seed_then_skip(api):
    first = api.post("/demo/seed").json()
    assert first["status"] == "success"
    assert len(api.get("/campaigns").json()) == 5
    assert len(api.get("/tasks").json()) == 5

    second = api.post("/demo/seed").json()
    assert second["status"] == "skipped"


def test_demo_reset_replaces_data(api, session, client_account):
    session.add(Campaign(client_id="client-1", name="Real campaign"))
    session.commit()

    response = api.post("/demo/reset")
    assert response.json()["status"] == "success"
    names = {c["name"] for c in api.get("/campaigns").json()}
    assert "Real campaign" not in names
    assert len(names) == 5
