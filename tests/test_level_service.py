"""Level derivation is pure; leaderboards read the cached totals."""

from roomly.services.level_service import (
    LEVELS,
    community_leaderboard,
    level_for_points,
    next_level,
    user_leaderboard,
)


class TestLevelForPoints:
    def test_zero_is_base_tier(self):
        assert level_for_points(0)["key"] == "NEW_NEIGHBOR"

    def test_thresholds_are_inclusive(self):
        assert level_for_points(50)["key"] == "ACTIVE_NEIGHBOR"
        assert level_for_points(200)["key"] == "COMMUNITY_LEADER"
        assert level_for_points(500)["key"] == "LEGEND"

    def test_just_below_threshold(self):
        assert level_for_points(49)["key"] == "NEW_NEIGHBOR"
        assert level_for_points(199)["key"] == "ACTIVE_NEIGHBOR"
        assert level_for_points(499)["key"] == "COMMUNITY_LEADER"

    def test_each_threshold_steps_up_one_rank(self):
        ranks = [level_for_points(p)["rank"] for p in (0, 50, 200, 500)]
        assert ranks == [0, 1, 2, 3]

    def test_none_and_negative_are_base_tier(self):
        assert level_for_points(None)["key"] == "NEW_NEIGHBOR"
        assert level_for_points(-10)["key"] == "NEW_NEIGHBOR"

    def test_returned_tier_is_a_copy(self):
        level_for_points(0)["name"] = "changed"
        assert LEVELS[-1]["name"] == "New Neighbor"


class TestNextLevel:
    def test_points_needed(self):
        nxt = next_level(30)
        assert nxt["key"] == "ACTIVE_NEIGHBOR"
        assert nxt["points_needed"] == 20

    def test_top_tier_has_no_next(self):
        assert next_level(10_000) is None


class TestLeaderboards:
    def test_communities_rank_by_raw_total(self, db, community):
        from roomly.models.community import Community

        db.add_all([Community(name="Torre Sur", total_points=900), Community(name="Torre Este", total_points=10)])
        community.total_points = 100
        db.commit()

        names = [c.name for c in community_leaderboard(db)]
        assert names == ["Torre Sur", "Torre Norte", "Torre Este"]

    def test_users_ranked_with_levels_and_inactive_hidden(self, db, make_user, community):
        make_user(community, points=10, name="Ana")
        make_user(community, points=600, name="Bruno")
        make_user(community, points=999, name="Carla", status="INACTIVE")
        make_user(None, points=5000, name="Outsider")

        board = user_leaderboard(db, community.id)
        assert [e["name"] for e in board] == ["Bruno", "Ana"]
        assert [e["position"] for e in board] == [1, 2]
        assert board[0]["level"]["key"] == "LEGEND"
        assert board[1]["level"]["key"] == "NEW_NEIGHBOR"
