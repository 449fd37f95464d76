"""Tests for the campaign reconciler and the ghost policies."""

from sqlmodel import select

from app.models.campaign_models import (
    Campaign,
    CampaignSnapshot,
    CampaignStatus,
    DatePreset,
)
from app.sync.reconciler import load_synced_campaigns, reconcile_campaigns


def snapshot(external_id: str, **overrides) -> CampaignSnapshot:
    values = dict(
        external_id=external_id,
        name=f"Campaign {external_id}",
        status=CampaignStatus.ACTIVE,
        spend=100.0,
        impressions=5000,
        clicks=120,
        ctr=2.4,
        cpc=0.83,
        roas=3.0,
        conversations=12,
        leads=3,
    )
    values.update(overrides)
    return CampaignSnapshot(**values)


def stored_campaigns(session, client_id="client-1"):
    return session.exec(
        select(Campaign).where(Campaign.client_id == client_id).order_by(Campaign.id)
    ).all()


def state(campaign: Campaign) -> dict:
    return {key: getattr(campaign, key) for key in Campaign.model_fields}


class TestUpsert:
    def test_first_sync_creates_rows(self, session, client_account):
        stats = reconcile_campaigns(
            session, "client-1", [snapshot("1"), snapshot("2")], DatePreset.MAXIMUM
        )
        assert stats.created == 2
        assert stats.updated == 0
        rows = stored_campaigns(session)
        assert [r.external_id for r in rows] == ["1", "2"]
        assert rows[0].spend == 100.0
        assert rows[0].conversations == 12

    def test_resync_updates_in_place(self, session, client_account):
        reconcile_campaigns(session, "client-1", [snapshot("1")], DatePreset.MAXIMUM)
        stats = reconcile_campaigns(
            session, "client-1", [snapshot("1", spend=250.0, name="Renamed")], DatePreset.MAXIMUM
        )
        rows = stored_campaigns(session)
        assert stats.updated == 1
        assert stats.created == 0
        assert len(rows) == 1
        assert rows[0].spend == 250.0
        assert rows[0].name == "Renamed"

    def test_identical_resync_is_idempotent(self, session, client_account):
        snaps = [snapshot("1", age_breakdown={"18-24": 10.0})]
        reconcile_campaigns(session, "client-1", snaps, DatePreset.LAST_7D)
        first_state = state(stored_campaigns(session)[0])

        stats = reconcile_campaigns(session, "client-1", snaps, DatePreset.LAST_7D)
        rows = stored_campaigns(session)
        assert stats.updated == 0
        assert len(rows) == 1
        assert state(rows[0]) == first_state

    def test_unchanged_campaigns_are_not_committed(self, session, client_account, monkeypatch):
        snaps = [snapshot("1"), snapshot("2")]
        reconcile_campaigns(session, "client-1", snaps, DatePreset.MAXIMUM)
        commits = []
        real_commit = session.commit

        def counting_commit():
            commits.append(1)
            real_commit()

        monkeypatch.setattr(session, "commit", counting_commit)
        stats = reconcile_campaigns(
            session, "client-1", [snapshot("1"), snapshot("2", spend=5.0)], DatePreset.MAXIMUM
        )

        assert stats.updated == 1
        assert len(commits) == 1

    def test_duplicate_upstream_ids_produce_one_row(self, session, client_account):
        reconcile_campaigns(
            session,
            "client-1",
            [snapshot("1", spend=10.0), snapshot("1", spend=20.0)],
            DatePreset.MAXIMUM,
        )
        rows = stored_campaigns(session)
        assert len(rows) == 1
        assert rows[0].spend == 20.0

    def test_breakdowns_are_stored(self, session, client_account):
        reconcile_campaigns(
            session,
            "client-1",
            [snapshot("1", platform_breakdown={"instagram": 60.0, "facebook": 40.0})],
            DatePreset.MAXIMUM,
        )
        assert stored_campaigns(session)[0].platform_breakdown == {
            "instagram": 60.0,
            "facebook": 40.0,
        }


class TestGhostPolicy:
    def _seed(self, session):
        reconcile_campaigns(
            session,
            "client-1",
            [snapshot("1"), snapshot("2"), snapshot("3", status=CampaignStatus.PAUSED, spend=0.0)],
            DatePreset.MAXIMUM,
        )

    def test_all_time_pauses_active_ghosts(self, session, client_account):
        self._seed(session)
        stats = reconcile_campaigns(session, "client-1", [snapshot("1")], DatePreset.MAXIMUM)
        by_id = {c.external_id: c for c in stored_campaigns(session)}

        assert stats.paused == 1
        assert stats.zeroed == 0
        assert by_id["2"].status == CampaignStatus.PAUSED
        assert by_id["2"].spend == 100.0
        assert by_id["2"].conversations == 12
        assert by_id["3"].status == CampaignStatus.PAUSED

    def test_bounded_window_zeroes_ghost_metrics(self, session, client_account):
        self._seed(session)
        stats = reconcile_campaigns(session, "client-1", [snapshot("1")], DatePreset.LAST_7D)
        by_id = {c.external_id: c for c in stored_campaigns(session)}

        assert stats.zeroed == 1
        assert stats.paused == 0
        ghost = by_id["2"]
        assert ghost.status == CampaignStatus.ACTIVE
        for metric in ("spend", "impressions", "clicks", "ctr", "cpc", "roas", "conversations", "leads"):
            assert getattr(ghost, metric) == 0
        # already idle: nothing to reset
        assert by_id["3"].status == CampaignStatus.PAUSED

    def test_empty_bounded_window_zeroes_everything_with_activity(self, session, client_account):
        self._seed(session)
        stats = reconcile_campaigns(session, "client-1", [], DatePreset.YESTERDAY)
        assert stats.zeroed == 2
        assert all(c.spend == 0 for c in stored_campaigns(session))

    def test_manual_campaigns_are_never_touched(self, session, client_account):
        manual = Campaign(client_id="client-1", name="Offline flyer", spend=300.0)
        session.add(manual)
        session.commit()

        reconcile_campaigns(session, "client-1", [], DatePreset.LAST_30D)
        reconcile_campaigns(session, "client-1", [], DatePreset.MAXIMUM)

        session.refresh(manual)
        assert manual.spend == 300.0
        assert manual.status == CampaignStatus.ACTIVE
        assert "Offline flyer" not in {
            c.name for c in load_synced_campaigns(session, "client-1").values()
        }

    def test_other_clients_are_not_reconciled(self, session, client_account):
        session.add(
            Campaign(client_id="client-2", external_id="9", name="Other", spend=50.0)
        )
        session.commit()

        reconcile_campaigns(session, "client-1", [snapshot("1")], DatePreset.LAST_7D)

        other = stored_campaigns(session, "client-2")[0]
        assert other.spend == 50.0
