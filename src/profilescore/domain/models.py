"""
Domain models.

Itinerary options are plain JSON-like dicts as returned by the OpenTripPlanner
profiler (`access`, `transit`, `egress`, `fares`, camelCase keys). The tally stage
annotates them in place, so they are not wrapped in Pydantic models; the types
below only describe the records and the API payloads around them.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

# Raw OTP profile option in, the same record annotated with tallies and `score` out.
Option = dict[str, Any]

BIKE_MODES: tuple[str, ...] = ("bicycle", "bicycle_rent")

LogType = Literal["silly", "debug", "verbose", "info", "warn", "error"]


class ScoreTerm(BaseModel):
    """One additive contribution to an option's score (minutes-equivalent)."""

    name: Literal["time", "carParking", "co2", "bikeParking", "transfer", "cost", "calories"]
    quantity: float
    minutes: float


class ScoreBreakdown(BaseModel):
    """Explainable score: the terms sum to `total`."""

    total: float
    terms: list[ScoreTerm] = Field(default_factory=list)


class ScoreRequest(BaseModel):
    """Request payload for `POST /api/score`."""

    options: list[dict[str, Any]]
    factors: dict[str, float] | None = None
    rates: dict[str, float] | None = None
    count_bike_calories_per_mode: bool | None = None
    expand: bool = True


class ScoreResponse(BaseModel):
    results: list[dict[str, Any]]
    meta: dict[str, Any] = Field(default_factory=dict)


class LogReport(BaseModel):
    """Payload posted to `/log` by `HttpLogReporter`."""

    text: str
    type: LogType
