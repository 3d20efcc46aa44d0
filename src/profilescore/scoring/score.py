"""
Score stage.

Reduces a tallied option to one minutes-equivalent number; lower is better.
Each quantity is converted to minutes with `apply_factor` and added to the travel time.
"""

from __future__ import annotations

from profilescore.config.settings import TimeFactors
from profilescore.domain.models import BIKE_MODES, Option, ScoreBreakdown, ScoreTerm
from profilescore.scoring.factors import apply_factor


def score_breakdown(
    o: Option, factors: TimeFactors, *, count_bike_calories_per_mode: bool = True
) -> ScoreBreakdown:
    """Explainable score for a tallied option.

    `count_bike_calories_per_mode=True` credits bike calories for every bike mode
    present, so an option with both `bicycle` and `bicycle_rent` counts them twice.
    Pass False to credit them once.

    `o["time"]` is in seconds, as the profiler reports leg and transit times, so the
    time term is `time / 60` and every other term is already in minutes.
    """
    terms = [ScoreTerm(name="time", quantity=o["time"], minutes=o["time"] / 60)]
    total_calories = 0.0
    bike_calories_counted = False

    for mode in o["modes"]:
        if mode == "car":
            terms.append(ScoreTerm(name="carParking", quantity=1, minutes=apply_factor(1, factors.carParking)))
            terms.append(
                ScoreTerm(name="co2", quantity=o["emissions"], minutes=apply_factor(o["emissions"], factors.co2))
            )
        elif mode in BIKE_MODES:
            terms.append(
                ScoreTerm(name="bikeParking", quantity=1, minutes=apply_factor(1, factors.bikeParking))
            )
            if count_bike_calories_per_mode or not bike_calories_counted:
                total_calories += o["bikeCalories"]
                bike_calories_counted = True
        elif mode == "walk":
            total_calories += o["walkCalories"]

    terms.append(
        ScoreTerm(name="transfer", quantity=o["transfers"], minutes=apply_factor(o["transfers"], factors.transfer))
    )
    terms.append(ScoreTerm(name="cost", quantity=o["cost"], minutes=apply_factor(o["cost"], factors.cost)))
    terms.append(
        ScoreTerm(name="calories", quantity=total_calories, minutes=apply_factor(total_calories, factors.calories))
    )

    total = 0.0
    for term in terms:
        total += term.minutes
    return ScoreBreakdown(total=total, terms=terms)


def score(o: Option, factors: TimeFactors, *, count_bike_calories_per_mode: bool = True) -> float:
    """Weighted score of a tallied option."""
    return score_breakdown(o, factors, count_bike_calories_per_mode=count_bike_calories_per_mode).total
