"""
Tally stage.

Walks one option's access leg, transit legs and egress leg and annotates the record
in place with distances (meters), time (the units the profiler reports, seconds),
transfers, cost, CO2 emissions (kg) and calories burned.

Later steps read fields set by earlier ones, so the order in `tally` matters:
calories need the accumulated distances and the car step overwrites emissions.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from profilescore.config.settings import (
    CO2_PER_GALLON,
    CYCLING_MET,
    METERS_TO_MILES,
    SECONDS_TO_HOURS,
    WALKING_MET,
    Rates,
)
from profilescore.domain.models import BIKE_MODES, Option
from profilescore.scoring.factors import calories_burned

logger = logging.getLogger(__name__)


def street_edge_distance_for_mode(street_edges: Iterable[dict[str, Any]], mode: str) -> float:
    """Sum the distance of edges travelled in `mode`.

    An edge with a `mode` switches the current sub-mode for itself and every following
    edge; until one does, the leg is walking.
    """
    current_mode = "walk"
    distance = 0.0
    for edge in street_edges:
        if edge.get("mode"):
            current_mode = edge["mode"].lower()
        if current_mode == mode:
            distance += edge["distance"]
    return distance


def add_street_edges(o: Option, mode: str, street_edges: list[dict[str, Any]] | None) -> None:
    """Record a street leg's mode and add its distances to the matching accumulators."""
    if street_edges is None:
        return
    o["modes"].append(mode)

    if mode == "car":
        o["driveDistance"] += street_edge_distance_for_mode(street_edges, "car")
    elif mode == "bicycle":
        o["bikeDistance"] += street_edge_distance_for_mode(street_edges, "bicycle")
    elif mode == "bicycle_rent":
        # Rental legs include walking to and from the docks.
        o["modes"].append("walk")
        o["bikeDistance"] += street_edge_distance_for_mode(street_edges, "bicycle")
        o["walkDistance"] += street_edge_distance_for_mode(street_edges, "walk")
    elif mode == "walk":
        o["walkDistance"] += street_edge_distance_for_mode(street_edges, "walk")
    else:
        logger.debug("No distance accumulator for street mode %r", mode)


def unique_modes(modes: Iterable[str]) -> list[str]:
    """De-duplicate modes, keeping first-seen order."""
    return list(dict.fromkeys(modes))


def _reset(o: Option) -> None:
    o["bikeCalories"] = 0
    o["calories"] = 0
    o["carCost"] = 0
    o["cost"] = 0
    o["emissions"] = 0
    o["modes"] = []
    o["time"] = 0
    o["timeInTransit"] = 0
    o["transfers"] = 0
    o["transitCost"] = 0
    o["trips"] = None
    o["walkCalories"] = 0

    o["bikeDistance"] = 0
    o["driveDistance"] = 0
    o["walkDistance"] = 0


def _tally_street_leg(o: Option, legs: list[dict[str, Any]] | None) -> None:
    # Only the first alternative is read; splitting alternatives is the driver's job.
    if not legs:
        return
    leg = legs[0]
    add_street_edges(o, leg["mode"].lower(), leg.get("streetEdges"))
    o["time"] += leg.get("time", 0)


def _tally_transit(o: Option, rates: Rates) -> None:
    transit = o.get("transit")
    if not transit:
        return

    o["transfers"] = len(transit) - 1
    trips = float("inf")

    for segment in transit:
        o["modes"].append(segment["mode"].lower())

        patterns = segment.get("segmentPatterns")
        segment_trips = patterns[0]["nTrips"] if patterns else 0
        trips = min(trips, segment_trips)

        time_in_transit = segment["waitStats"]["avg"] + segment["rideStats"]["avg"]
        o["timeInTransit"] += time_in_transit
        o["time"] += segment["walkTime"] + time_in_transit
        o["walkDistance"] += segment["walkDistance"]

        # Flat per-passenger-trip emissions, not distance based.
        o["emissions"] += rates.co2PerTransitTrip

    o["trips"] = trips

    for fare in o.get("fares") or []:
        if fare and fare.get("peak"):
            o["transitCost"] += fare["peak"]

    o["cost"] += o["transitCost"]


def tally(o: Option, rates: Rates) -> Option:
    """Reset and recompute every tallied field of `o`; returns the same record."""
    _reset(o)

    _tally_street_leg(o, o.get("access"))
    _tally_street_leg(o, o.get("egress"))
    _tally_transit(o, rates)

    modes = o["modes"]

    if "walk" in modes:
        hours = (o["walkDistance"] / rates.walkSpeed) * SECONDS_TO_HOURS
        o["walkCalories"] = calories_burned(WALKING_MET, rates.weight, hours)

    if any(m in modes for m in BIKE_MODES):
        hours = (o["bikeDistance"] / rates.bikeSpeed) * SECONDS_TO_HOURS
        o["bikeCalories"] = calories_burned(CYCLING_MET, rates.weight, hours)

    if "car" in modes:
        o["carCost"] = rates.mileageRate * (o["driveDistance"] * METERS_TO_MILES) + rates.carParkingCost
        o["cost"] += o["carCost"]
        # Replaces the transit contribution: car emissions are per vehicle distance.
        o["emissions"] = o["driveDistance"] / rates.mpg * CO2_PER_GALLON

    o["modes"] = unique_modes(modes)
    o["calories"] = o["bikeCalories"] + o["walkCalories"]
    return o
