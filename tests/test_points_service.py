"""Points coordinator and ledger-backed totals."""

import pytest
from sqlalchemy.exc import OperationalError

from roomly.errors import StoreError, ValidationError
from roomly.models.point_log import PointLog
from roomly.services.points_ledger_service import (
    apply_community_delta,
    ledger_total_for_community,
    ledger_total_for_user,
    list_point_logs,
    reconcile_all,
)
from roomly.services.points_service import POINT_ACTIONS, award_points, list_point_actions, resolve_points

from conftest import NOW


class TestResolvePoints:
    def test_catalog_defaults(self):
        assert resolve_points("PROFILE_PHOTO") == 20
        assert resolve_points("UPLOAD_AREA_PHOTO") == 15
        assert resolve_points("COMMENT") == 5
        assert resolve_points("BUG_REPORT") == 25
        assert resolve_points("RESERVATION_COMPLETED") == 10
        assert resolve_points("LIKE_RECEIVED") == 2

    def test_unknown_action(self):
        with pytest.raises(ValidationError):
            resolve_points("FREE_MONEY")

    def test_reservation_reward_can_be_overridden(self):
        assert resolve_points("RESERVATION_COMPLETED", 50) == 50

    def test_negative_override_rejected(self):
        with pytest.raises(ValidationError):
            resolve_points("RESERVATION_COMPLETED", -5)

    def test_fixed_actions_reject_other_amounts(self):
        assert resolve_points("COMMENT", 5) == 5
        with pytest.raises(ValidationError):
            resolve_points("COMMENT", 500)

    def test_listing_matches_catalog(self):
        listed = {a["action"]: a["points"] for a in list_point_actions()}
        assert listed == {k: v[0] for k, v in POINT_ACTIONS.items()}


class TestAwardPoints:
    def test_award_updates_ledger_and_both_totals(self, db, resident, community):
        result = award_points(
            db, user_id=resident.id, community_id=community.id, action="BUG_REPORT", now=NOW
        )

        assert result.user_updated is True
        assert result.community_updated is True
        assert result.log.points == 25
        assert result.log.action == "BUG_REPORT"
        assert result.log.description == "Bug reported"
        assert result.log.created_at == NOW

        db.refresh(resident)
        db.refresh(community)
        assert resident.points == 25
        assert community.total_points == 25

    def test_n_awards_add_up(self, db, resident, community):
        actions = ["COMMENT", "COMMENT", "PROFILE_PHOTO", "LIKE_RECEIVED", "UPLOAD_AREA_PHOTO"]
        before = db.query(PointLog).count()

        for action in actions:
            award_points(db, user_id=resident.id, community_id=community.id, action=action)

        expected = sum(POINT_ACTIONS[a][0] for a in actions)
        db.refresh(resident)
        db.refresh(community)
        assert resident.points == expected
        assert community.total_points == expected
        assert db.query(PointLog).count() == before + len(actions)
        assert ledger_total_for_user(db, resident.id) == expected
        assert ledger_total_for_community(db, community.id) == expected

    def test_totals_are_per_community(self, db, make_user, community):
        from roomly.models.community import Community

        other = Community(name="Torre Sur", total_points=0)
        db.add(other)
        db.commit()
        a = make_user(community)
        b = make_user(other)

        award_points(db, user_id=a.id, community_id=community.id, action="COMMENT")
        award_points(db, user_id=b.id, community_id=other.id, action="BUG_REPORT")

        db.refresh(community)
        db.refresh(other)
        assert community.total_points == 5
        assert other.total_points == 25

    def test_no_community_only_touches_user(self, db, make_user):
        loner = make_user(None)
        result = award_points(db, user_id=loner.id, community_id=None, action="COMMENT")

        assert result.user_updated is True
        assert result.community_updated is False
        db.refresh(loner)
        assert loner.points == 5

    def test_custom_description(self, db, resident, community):
        result = award_points(
            db,
            user_id=resident.id,
            community_id=community.id,
            action="RESERVATION_COMPLETED",
            points=30,
            description="Reservation at Pool",
        )
        assert result.log.description == "Reservation at Pool"
        assert result.log.points == 30

    def test_ledger_failure_touches_nothing(self, db, resident, community, monkeypatch):
        def failing_commit():
            raise OperationalError("INSERT INTO point_logs", {}, Exception("store down"))

        monkeypatch.setattr(db, "commit", failing_commit)
        with pytest.raises(StoreError):
            award_points(db, user_id=resident.id, community_id=community.id, action="COMMENT")
        monkeypatch.undo()

        db.refresh(resident)
        db.refresh(community)
        assert resident.points == 0
        assert community.total_points == 0
        assert db.query(PointLog).count() == 0

    def test_missing_community_row_leaves_ledger_authoritative(self, db, resident):
        import uuid

        ghost = uuid.uuid4()
        result = award_points(db, user_id=resident.id, community_id=ghost, action="COMMENT")

        assert result.user_updated is True
        assert result.community_updated is False
        assert ledger_total_for_community(db, ghost) == 5


class TestLedgerReads:
    def test_history_newest_first_and_paged(self, db, resident, community):
        from datetime import timedelta

        for i, action in enumerate(["COMMENT", "BUG_REPORT", "PROFILE_PHOTO"]):
            award_points(
                db,
                user_id=resident.id,
                community_id=community.id,
                action=action,
                now=NOW + timedelta(minutes=i),
            )

        logs = list_point_logs(db, resident.id)
        assert [log.action for log in logs] == ["PROFILE_PHOTO", "BUG_REPORT", "COMMENT"]
        assert [log.action for log in list_point_logs(db, resident.id, limit=1, offset=1)] == ["BUG_REPORT"]

    def test_limit_is_clamped(self, db, resident, community):
        award_points(db, user_id=resident.id, community_id=community.id, action="COMMENT")
        assert len(list_point_logs(db, resident.id, limit=0)) == 1


class TestReconcile:
    def test_drifted_totals_are_rebuilt_from_ledger(self, db, resident, community):
        award_points(db, user_id=resident.id, community_id=community.id, action="BUG_REPORT")
        award_points(db, user_id=resident.id, community_id=community.id, action="COMMENT")

        # simulate a crash between saga steps
        resident.points = 999
        community.total_points = 1
        db.commit()

        stats = reconcile_all(db)
        db.commit()

        db.refresh(resident)
        db.refresh(community)
        assert resident.points == 30
        assert community.total_points == 30
        assert stats["usersFixed"] == 1
        assert stats["communitiesFixed"] == 1

    def test_consistent_totals_are_left_alone(self, db, resident, community):
        award_points(db, user_id=resident.id, community_id=community.id, action="COMMENT")

        stats = reconcile_all(db)
        assert stats["usersFixed"] == 0
        assert stats["communitiesFixed"] == 0

    def test_reconcile_scoped_to_community(self, db, make_user, community):
        from roomly.models.community import Community

        other = Community(name="Torre Sur", total_points=7)
        db.add(other)
        db.commit()
        community.total_points = 3
        db.commit()

        stats = reconcile_all(db, community_id=community.id)
        db.commit()

        db.refresh(community)
        db.refresh(other)
        assert stats["communities"] == 1
        assert community.total_points == 0
        assert other.total_points == 7

    def test_apply_delta_reports_missing_row(self, db):
        import uuid

        assert apply_community_delta(db, uuid.uuid4(), 5) is False
