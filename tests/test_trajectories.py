import pytest

from balloonwatch.models.tracks import Point
from balloonwatch.services.trajectories import (
    build_track_set,
    build_trajectories,
    dedupe_and_sort,
    derive_kinematics,
    format_age,
)

T = 1_700_000_000


def test_dedupe_and_sort_keeps_first_occurrence():
    points = [
        Point(lat=3.0, lon=0.0, timestamp=T + 7200),
        Point(lat=1.0, lon=0.0, timestamp=T),
        Point(lat=2.0, lon=0.0, timestamp=T + 3600),
        Point(lat=9.0, lon=9.0, timestamp=T),
    ]

    kept = dedupe_and_sort(points)

    assert [p.timestamp for p in kept] == [T, T + 3600, T + 7200]
    assert kept[0].lat == 1.0


def test_build_trajectories_is_idempotent():
    grouped = {
        "a": [Point(lat=0, lon=0, timestamp=5), Point(lat=0, lon=1, timestamp=1), Point(lat=1, lon=1, timestamp=5)],
        "b": [],
    }

    once = build_trajectories(grouped)
    twice = build_trajectories(once)

    assert once == twice
    assert list(once) == ["a", "b"]
    timestamps = [p.timestamp for p in once["a"]]
    assert timestamps == sorted(set(timestamps))


def test_kinematics_for_one_degree_east_in_an_hour():
    points = [Point(lat=0.0, lon=0.0, timestamp=T), Point(lat=0.0, lon=1.0, timestamp=T + 3600)]

    kin = derive_kinematics(points, now=T + 3600)

    assert kin.drift_kmh == pytest.approx(111.2, abs=0.1)
    assert kin.heading_deg == pytest.approx(90.0)
    assert kin.gap_km == pytest.approx(111.2, abs=0.1)
    assert kin.gap is False
    assert kin.age_sec == 0
    assert kin.stale is False


def test_kinematics_for_stationary_object():
    points = [Point(lat=5.0, lon=5.0, timestamp=T), Point(lat=5.0, lon=5.0, timestamp=T + 3600)]

    kin = derive_kinematics(points, now=T + 3600)

    assert kin.drift_kmh == 0.0
    assert kin.heading_deg == 0.0


def test_kinematics_guards_zero_elapsed_time():
    # timestamps are unique after building, but the guard keeps direct callers safe
    points = [Point(lat=0.0, lon=0.0, timestamp=T), Point(lat=0.0, lon=0.001, timestamp=T)]

    kin = derive_kinematics(points, now=T)

    assert kin.drift_kmh > 0


def test_kinematics_staleness_and_gap():
    points = [Point(lat=0.0, lon=0.0, timestamp=T), Point(lat=0.0, lon=5.0, timestamp=T + 3600)]

    kin = derive_kinematics(points, now=T + 3600 + 3601, stale_after_sec=3600, gap_km_threshold=300)

    assert kin.age_sec == 3601
    assert kin.stale is True
    assert kin.gap_km == pytest.approx(556.0, abs=1.0)
    assert kin.gap is True


def test_kinematics_age_never_negative():
    kin = derive_kinematics([Point(lat=0.0, lon=0.0, timestamp=T + 500)], now=T)

    assert kin.age_sec == 0
    assert kin.drift_kmh is None
    assert kin.heading_deg is None
    assert kin.gap_km == 0.0
    assert kin.gap is False


def test_kinematics_empty_history():
    kin = derive_kinematics([], now=T)

    assert kin.age_sec is None
    assert kin.stale is False
    assert kin.drift_kmh is None
    assert kin.gap is False


@pytest.mark.parametrize(
    "age,label",
    [
        (None, "—"),
        (0, "0s"),
        (0.5, "1s"),
        (2.5, "3s"),
        (89, "89s"),
        (90, "2m"),
        (150, "3m"),
        (210, "4m"),
        (3600, "60m"),
        (5400, "1.5h"),
        (36000, "10.0h"),
    ],
)
def test_format_age(age, label):
    assert format_age(age) == label


def test_build_track_set_preserves_order_and_flags():
    trajectories = {
        "z": [Point(lat=0.0, lon=0.0, timestamp=T)],
        "a": [Point(lat=0.0, lon=0.0, timestamp=T), Point(lat=0.0, lon=1.0, timestamp=T + 3600)],
    }

    tracks = build_track_set(trajectories, now=T + 7200)

    assert [t.id for t in tracks] == ["z", "a"]
    assert tracks[0].stale is True
    assert tracks[0].age_label == "2.0h"
    assert tracks[1].drift_kmh == pytest.approx(111.2, abs=0.1)
    assert tracks[1].risk is None
    assert tracks[1].wind700 is None
