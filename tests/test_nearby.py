import uuid

import pytest

from tourguide.domain.models import Attraction, Coordinate
from tourguide.domain.user import User
from tourguide.recommender.nearby import nearest_attractions, rank_by_distance


class CountingPoints:
    def __init__(self):
        self.calls = []

    def get_attraction_reward_points(self, attraction_id, user_id):
        self.calls.append(attraction_id)
        return 7


def _attraction(name: str, lat: float, lon: float) -> Attraction:
    return Attraction(id=uuid.uuid4(), name=name, location=Coordinate(latitude=lat, longitude=lon))


def _user() -> User:
    return User(uuid.uuid4(), "jon", "000", "jon@tourGuide.com")


ORIGIN = Coordinate(latitude=0.0, longitude=0.0)


def test_attractions_are_sorted_nearest_first():
    a = _attraction("A", 0.0, 3.0)
    b = _attraction("B", 0.0, 1.0)
    c = _attraction("C", 0.0, 2.0)

    out = nearest_attractions(ORIGIN, _user(), attractions=[a, b, c], points=CountingPoints(), k=5)

    assert [n.name for n in out] == ["B", "C", "A"]
    assert out[0].distance_miles < out[1].distance_miles < out[2].distance_miles
    assert out[0].user_lat == 0.0 and out[0].user_lon == 0.0
    assert (out[0].attraction_lat, out[0].attraction_lon) == (0.0, 1.0)


def test_returns_at_most_k():
    attractions = [_attraction(f"Spot {i}", 0.0, float(i)) for i in range(26)]

    out = nearest_attractions(ORIGIN, _user(), attractions=attractions, points=CountingPoints(), k=5)

    assert [n.name for n in out] == [f"Spot {i}" for i in range(5)]


def test_small_catalog_returns_everything():
    attractions = [_attraction("A", 1.0, 1.0), _attraction("B", 2.0, 2.0)]
    out = nearest_attractions(ORIGIN, _user(), attractions=attractions, points=CountingPoints(), k=5)
    assert len(out) == 2


def test_ties_keep_catalog_order():
    attractions = [
        _attraction("North", 1.0, 0.0),
        _attraction("East", 0.0, 1.0),
        _attraction("South", -1.0, 0.0),
        _attraction("West", 0.0, -1.0),
    ]

    ranked = rank_by_distance(ORIGIN, attractions)

    assert [a.name for a, _ in ranked] == ["North", "East", "South", "West"]
    assert ranked[0][1] == pytest.approx(ranked[3][1])


def test_points_are_reported_for_attractions_far_outside_the_reward_buffer():
    far = _attraction("Far", 40.0, 40.0)
    points = CountingPoints()

    out = nearest_attractions(ORIGIN, _user(), attractions=[far], points=points, k=5)

    assert out[0].distance_miles > 1000
    assert out[0].reward_points == 7
    assert points.calls == [far.id]


def test_does_not_mutate_user():
    user = _user()
    nearest_attractions(ORIGIN, user, attractions=[_attraction("A", 0.0, 0.0)], points=CountingPoints())

    assert user.visited_locations == ()
    assert len(user.rewards) == 0


def test_non_positive_k_returns_nothing():
    points = CountingPoints()
    assert nearest_attractions(ORIGIN, _user(), attractions=[_attraction("A", 0, 0)], points=points, k=0) == []
    assert points.calls == []
