"""Users, communities, amenities and analytics around the booking core."""

import uuid
from datetime import timedelta

import pytest

from roomly.errors import ConflictError, NotFoundError, StoreError, ValidationError
from roomly.models.point_log import PointLog
from roomly.services import user_service
from roomly.services.amenity_service import (
    create_amenity,
    delete_amenity,
    list_amenities,
    seed_default_amenities,
    update_amenity,
)
from roomly.services.analytics_service import get_analytics
from roomly.services.community_service import create_community, list_communities
from roomly.services.reservation_service import create_reservation, grade_reservation
from roomly.services.user_service import (
    create_user_profile,
    get_user_by_email,
    list_community_users,
    set_user_status,
    update_user_profile,
    upload_avatar,
)

from conftest import NOW


class TestUsers:
    def test_create_profile(self, db):
        user = create_user_profile(db, email=" Vecina@Example.com ", name="Vecina")
        assert user.email == "vecina@example.com"
        assert user.role == "RESIDENT"
        assert user.points == 0
        assert get_user_by_email(db, "VECINA@example.com").id == user.id

    def test_duplicate_email(self, db):
        create_user_profile(db, email="a@example.com", name="A")
        with pytest.raises(ConflictError):
            create_user_profile(db, email="a@example.com", name="A again")

    def test_invalid_email(self, db):
        with pytest.raises(ValidationError):
            create_user_profile(db, email="not-an-email", name="A")

    def test_update_ignores_protected_fields(self, db, resident):
        update_user_profile(db, resident, {"name": "Renamed", "points": 10_000, "role": "ADMIN"})
        assert resident.name == "Renamed"
        assert resident.points == 0
        assert resident.role == "RESIDENT"

    def test_status_toggle_hides_from_members(self, db, resident, community):
        set_user_status(db, resident.id, "INACTIVE")
        assert list_community_users(db, community.id) == []

        with pytest.raises(ValidationError):
            set_user_status(db, resident.id, "BANNED")

    def test_avatar_upload_awards_profile_photo(self, db, resident, storage):
        upload_avatar(db, storage, resident, b"jpegbytes", extension=".png")

        assert resident.avatar_url == f"https://cdn.test/avatars/{resident.id}/avatar.png"
        assert resident.points == 20
        assert db.query(PointLog).filter(PointLog.action == "PROFILE_PHOTO").count() == 1

    def test_avatar_upload_outside_community_awards_nothing(self, db, make_user, storage):
        loner = make_user(None)
        upload_avatar(db, storage, loner, b"jpegbytes")

        assert loner.avatar_url is not None
        assert db.query(PointLog).count() == 0

    def test_empty_avatar(self, db, resident, storage):
        with pytest.raises(ValidationError):
            upload_avatar(db, storage, resident, b"")

    def test_award_failure_keeps_the_avatar(self, db, resident, storage, monkeypatch):
        def boom(*args, **kwargs):
            raise StoreError("Could not record points")

        monkeypatch.setattr(user_service, "award_points", boom)
        upload_avatar(db, storage, resident, b"jpegbytes")

        db.refresh(resident)
        assert resident.avatar_url == f"https://cdn.test/avatars/{resident.id}/avatar.jpg"
        assert resident.points == 0


class TestCommunities:
    def test_creator_becomes_admin(self, db, make_user):
        founder = make_user(None)
        c = create_community(db, founder, {"name": "Torre Oeste", "total_floors": 12})

        db.refresh(founder)
        assert founder.role == "ADMIN"
        assert founder.community_id == c.id
        assert c.admin_email == founder.email
        assert c.total_points == 0

    def test_listing_sorted_by_name(self, db, make_user, community):
        create_community(db, make_user(None), {"name": "Alfa"})
        assert [c.name for c in list_communities(db)] == ["Alfa", "Torre Norte"]

    def test_name_required(self, db, make_user):
        with pytest.raises(ValidationError):
            create_community(db, make_user(None), {"name": " "})


class TestAmenities:
    def test_create_normalises_tags(self, db, community):
        a = create_amenity(db, community.id, {"name": "Spa", "amenity_type": "spa", "category": "pool"})
        assert a.amenity_type == "SPA"
        assert a.category == "POOL"
        assert a.points_reward == 10

    def test_validation(self, db, community):
        with pytest.raises(ValidationError):
            create_amenity(db, community.id, {"name": ""})
        with pytest.raises(ValidationError):
            create_amenity(db, community.id, {"name": "Gym", "capacity": 0})
        with pytest.raises(ValidationError):
            create_amenity(db, community.id, {"name": "Gym", "points_reward": -1})

    def test_restricted_type_defaults_the_category(self, db, community):
        a = create_amenity(db, community.id, {"name": "Rooftop", "amenity_type": "pool", "category": None})
        assert a.category == "POOL"

        b = create_amenity(db, community.id, {"name": "Courts", "amenity_type": "COURT", "category": None})
        assert b.category is None

    def test_created_pool_is_rate_limited(self, db, resident, community):
        rooftop = create_amenity(db, community.id, {"name": "Rooftop", "amenity_type": "POOL"})
        create_reservation(
            db, user_id=resident.id, amenity_id=rooftop.id, day=NOW.date(), time_slot="10:00-11:00", now=NOW
        )

        later = NOW + timedelta(days=3)
        with pytest.raises(ConflictError):
            create_reservation(
                db, user_id=resident.id, amenity_id=rooftop.id, day=later.date(), time_slot="10:00-11:00", now=later
            )

    def test_update(self, db, gym):
        updated = update_amenity(db, gym.id, {"points_reward": 40, "category": None})
        assert updated.points_reward == 40
        assert updated.category is None

    def test_delete_blocked_by_reservations(self, db, resident, gym):
        create_reservation(db, user_id=resident.id, amenity_id=gym.id, day=NOW.date(), time_slot="08:00-09:00", now=NOW)
        with pytest.raises(ConflictError):
            delete_amenity(db, gym.id)

    def test_delete(self, db, community, gym):
        delete_amenity(db, gym.id)
        assert list_amenities(db, community.id) == []
        with pytest.raises(NotFoundError):
            delete_amenity(db, uuid.uuid4())

    def test_seed_is_idempotent(self, db, community):
        first = seed_default_amenities(db, community.id)
        second = seed_default_amenities(db, community.id)

        assert len(first) == 5
        assert second == []
        pool = [a for a in list_amenities(db, community.id) if a.name == "Pool"][0]
        assert pool.category == "POOL"


class TestAnalytics:
    def test_counts(self, db, make_user, community, gym, pool):
        a = make_user(community)
        b = make_user(community)
        r1 = create_reservation(db, user_id=a.id, amenity_id=gym.id, day=NOW.date(), time_slot="08:00-09:00", now=NOW)
        r2 = create_reservation(db, user_id=b.id, amenity_id=gym.id, day=NOW.date(), time_slot="09:00-10:00", now=NOW)
        create_reservation(db, user_id=a.id, amenity_id=pool.id, day=NOW.date(), time_slot="10:00-11:00", now=NOW)
        grade_reservation(db, r1.id, "FULFILLED")
        grade_reservation(db, r2.id, "UNFULFILLED")

        stats = get_analytics(db, community.id)

        assert stats["totalReservations"] == 3
        assert stats["completedReservations"] == 1
        assert stats["auditedReservations"] == 2
        assert stats["occupancyRate"] == 33
        assert stats["totalUsers"] == 2
        assert stats["totalPosts"] == 0
        assert stats["byAmenity"] == {"Gym": 2, "Pool": 1}

    def test_empty(self, db, community):
        stats = get_analytics(db, community.id)
        assert stats["totalReservations"] == 0
        assert stats["occupancyRate"] == 0
        assert stats["byAmenity"] == {}
