"""
API routes.

Endpoints:
- POST `/api/score`: score and rank itinerary options.
- GET  `/api/defaults`: configured time factors and rates.
- POST `/log`: receives saved records from `HttpLogReporter` and re-emits them locally.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, HTTPException

from profilescore.config.overrides import apply_scoring_overrides
from profilescore.config.settings import get_settings
from profilescore.core.log import STDLIB_LEVELS
from profilescore.domain.models import LogReport, ScoreRequest, ScoreResponse
from profilescore.scoring.profile_score import ProfileScore

logger = logging.getLogger(__name__)
report_logger = logging.getLogger("profilescore.reported")

router = APIRouter()


@router.get("/api/defaults")
def get_defaults() -> dict:
    """Return the configured scoring defaults."""
    scoring = get_settings().scoring
    return {
        "factors": scoring.factors.model_dump(),
        "rates": scoring.rates.model_dump(),
        "count_bike_calories_per_mode": scoring.count_bike_calories_per_mode,
    }


@router.post("/api/score", response_model=ScoreResponse)
def post_score(req: ScoreRequest) -> ScoreResponse:
    t0 = time.monotonic()

    overrides: dict = {}
    if req.factors:
        overrides["factors"] = req.factors
    if req.rates:
        overrides["rates"] = req.rates
    if req.count_bike_calories_per_mode is not None:
        overrides["count_bike_calories_per_mode"] = req.count_bike_calories_per_mode

    try:
        scoring = apply_scoring_overrides(get_settings().scoring, overrides)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    scorer = ProfileScore(
        count_bike_calories_per_mode=scoring.count_bike_calories_per_mode,
        base_factors=scoring.factors,
        base_rates=scoring.rates,
    )

    try:
        if req.expand:
            results = scorer.process_options(req.options)
        else:
            results = [scorer.process_option(o) for o in req.options]
    except (KeyError, TypeError) as exc:
        logger.warning("Malformed itinerary option: %r", exc)
        raise HTTPException(status_code=422, detail=f"Malformed itinerary option: missing or invalid {exc}") from exc

    return ScoreResponse(
        results=results,
        meta={"count": len(results), "ms": int((time.monotonic() - t0) * 1000)},
    )


@router.post("/log", status_code=204)
def post_log(report: LogReport) -> None:
    report_logger.log(STDLIB_LEVELS[report.type], report.text)
