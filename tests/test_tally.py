import pytest

from profilescore.config.settings import (
    CO2_PER_GALLON,
    CYCLING_MET,
    METERS_TO_MILES,
    SECONDS_TO_HOURS,
    WALKING_MET,
    Rates,
)
from profilescore.scoring.tally import street_edge_distance_for_mode, tally, unique_modes


def _transit_leg(mode: str, *, wait: float, ride: float, walk_time: float, walk_distance: float, n_trips=None):
    leg = {
        "mode": mode,
        "waitStats": {"avg": wait},
        "rideStats": {"avg": ride},
        "walkTime": walk_time,
        "walkDistance": walk_distance,
    }
    if n_trips is not None:
        leg["segmentPatterns"] = [{"nTrips": n_trips}, {"nTrips": 99}]
    return leg


def test_street_edge_distance_defaults_to_walk_until_a_mode_is_declared():
    edges = [
        {"distance": 120},
        {"mode": "CAR", "distance": 3000},
        {"distance": 500},
        {"mode": "WALK", "distance": 80},
    ]

    assert street_edge_distance_for_mode(edges, "walk") == 200
    assert street_edge_distance_for_mode(edges, "car") == 3500
    assert street_edge_distance_for_mode(edges, "bicycle") == 0
    assert street_edge_distance_for_mode([], "walk") == 0


def test_unique_modes_keeps_first_seen_order():
    assert unique_modes(["walk", "bus", "walk", "subway", "bus"]) == ["walk", "bus", "subway"]


def test_walk_only_access_leg():
    rates = Rates()
    o = {"access": [{"mode": "WALK", "time": 360, "streetEdges": [{"distance": 500}]}]}

    out = tally(o, rates)

    assert out is o
    assert o["modes"] == ["walk"]
    assert o["time"] == 360
    assert o["walkDistance"] == 500
    assert o["transfers"] == 0
    assert o["cost"] == 0
    assert o["carCost"] == 0
    assert o["emissions"] == 0
    assert o["trips"] is None
    expected = WALKING_MET * 75 * (500 / 1.4) * SECONDS_TO_HOURS
    assert o["walkCalories"] == pytest.approx(expected)
    assert o["bikeCalories"] == 0
    assert o["calories"] == pytest.approx(expected)


def test_bicycle_rent_adds_walk_mode_and_splits_distances():
    rates = Rates()
    o = {
        "access": [
            {
                "mode": "BICYCLE_RENT",
                "time": 600,
                "streetEdges": [{"mode": "bicycle", "distance": 1000}, {"mode": "walk", "distance": 100}],
            }
        ]
    }

    tally(o, rates)

    assert o["modes"] == ["bicycle_rent", "walk"]
    assert o["bikeDistance"] == 1000
    assert o["walkDistance"] == 100
    bike = CYCLING_MET * 75 * (1000 / 4.1) * SECONDS_TO_HOURS
    walk = WALKING_MET * 75 * (100 / 1.4) * SECONDS_TO_HOURS
    assert o["bikeCalories"] == pytest.approx(bike)
    assert o["walkCalories"] == pytest.approx(walk)
    assert o["calories"] == pytest.approx(bike + walk)


def test_transit_legs_fares_and_trips():
    rates = Rates()
    o = {
        "access": [{"mode": "walk", "time": 300, "streetEdges": [{"distance": 400}]}],
        "egress": [{"mode": "walk", "time": 120, "streetEdges": [{"distance": 150}]}],
        "transit": [
            _transit_leg("BUS", wait=200, ride=900, walk_time=60, walk_distance=80, n_trips=4),
            _transit_leg("SUBWAY", wait=100, ride=600, walk_time=30, walk_distance=40, n_trips=6),
        ],
        "fares": [{"peak": 2.5}, {"peak": 0}, None, {"offPeak": 1.0}, {"peak": 1.75}],
    }

    tally(o, rates)

    assert o["modes"] == ["walk", "bus", "subway"]
    assert o["transfers"] == 1
    assert o["trips"] == 4
    assert o["timeInTransit"] == 1800
    assert o["time"] == 300 + 120 + (60 + 1100) + (30 + 700)
    assert o["walkDistance"] == 400 + 150 + 80 + 40
    assert o["transitCost"] == pytest.approx(4.25)
    assert o["cost"] == pytest.approx(4.25)
    assert o["emissions"] == pytest.approx(2 * rates.co2PerTransitTrip)


def test_transit_leg_without_segment_patterns_counts_zero_trips():
    o = {
        "access": [{"mode": "walk", "time": 60, "streetEdges": []}],
        "transit": [
            _transit_leg("bus", wait=1, ride=2, walk_time=0, walk_distance=0, n_trips=5),
            _transit_leg("tram", wait=1, ride=2, walk_time=0, walk_distance=0),
        ],
    }

    tally(o, Rates())

    assert o["trips"] == 0
    assert o["transfers"] == 1
    assert o["cost"] == 0


def test_car_emissions_override_transit_emissions():
    rates = Rates()
    o = {
        "access": [
            {"mode": "CAR", "time": 900, "streetEdges": [{"distance": 200}, {"mode": "CAR", "distance": 5000}]}
        ],
        "transit": [_transit_leg("rail", wait=300, ride=1200, walk_time=0, walk_distance=0, n_trips=2)],
        "fares": [{"peak": 3.0}],
    }

    tally(o, rates)

    assert o["modes"] == ["car", "rail"]
    assert o["driveDistance"] == 5000
    assert o["walkDistance"] == 0
    assert o["emissions"] == 5000 / rates.mpg * CO2_PER_GALLON
    car_cost = rates.mileageRate * (5000 * METERS_TO_MILES) + rates.carParkingCost
    assert o["carCost"] == pytest.approx(car_cost)
    assert o["cost"] == pytest.approx(3.0 + car_cost)


def test_absent_sections_contribute_nothing():
    o = {"access": [{"mode": "walk", "time": 0}], "egress": [], "transit": None, "fares": None}

    tally(o, Rates())

    # No street edges: the leg's mode is not recorded either.
    assert o["modes"] == []
    assert o["time"] == 0
    assert o["transfers"] == 0
    assert o["calories"] == 0


def test_unrecognized_street_mode_is_recorded_without_distance():
    o = {"access": [{"mode": "KISS_AND_RIDE", "time": 100, "streetEdges": [{"distance": 900}]}]}

    tally(o, Rates())

    assert o["modes"] == ["kiss_and_ride"]
    assert o["walkDistance"] == 0
    assert o["driveDistance"] == 0
    assert o["time"] == 100


def test_retally_resets_accumulators():
    rates = Rates()
    o = {
        "access": [{"mode": "walk", "time": 300, "streetEdges": [{"distance": 400}]}],
        "transit": [_transit_leg("bus", wait=60, ride=600, walk_time=10, walk_distance=20, n_trips=3)],
        "fares": [{"peak": 2.0}],
    }

    first = dict(tally(o, rates))
    second = tally(o, rates)

    for key in ("time", "walkDistance", "cost", "emissions", "calories", "modes", "transfers"):
        assert second[key] == first[key]


def test_missing_transit_stats_propagates():
    o = {"transit": [{"mode": "bus", "rideStats": {"avg": 1}, "walkTime": 0, "walkDistance": 0}]}

    with pytest.raises(KeyError):
        tally(o, Rates())


def test_custom_rates_change_calories():
    o = {"access": [{"mode": "walk", "time": 0, "streetEdges": [{"distance": 1400}]}]}

    tally(o, Rates(walkSpeed=1.0, weight=100))

    assert o["walkCalories"] == pytest.approx(WALKING_MET * 100 * 1400 * SECONDS_TO_HOURS)
