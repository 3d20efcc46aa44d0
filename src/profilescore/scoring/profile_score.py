"""
Process and score OpenTripPlanner profile responses.

`ProfileScore` ties the pipeline together:
- `tally` annotates an option with distances, time, cost, emissions and calories,
- `score` reduces the tallies to one minutes-equivalent number,
- `process_options` expands every access x egress alternative and ranks the results.

Example:
    scorer = ProfileScore(factors={"cost": 2}, rates={"weight": 68})
    ranked = scorer.process_options(profile["options"])
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from profilescore.config.settings import (
    Rates,
    Settings,
    TimeFactors,
    merge_rates,
    merge_time_factors,
)
from profilescore.core.clone import clone
from profilescore.domain.models import Option, ScoreBreakdown
from profilescore.scoring.score import score as score_option
from profilescore.scoring.score import score_breakdown
from profilescore.scoring.tally import tally as tally_option

logger = logging.getLogger(__name__)


class ProfileScore:
    """Scorer holding the (immutable) time factors and rates."""

    def __init__(
        self,
        factors: Mapping[str, Any] | None = None,
        rates: Mapping[str, Any] | None = None,
        *,
        count_bike_calories_per_mode: bool = True,
        base_factors: TimeFactors | None = None,
        base_rates: Rates | None = None,
    ):
        self.factors = merge_time_factors(base_factors or TimeFactors(), factors)
        self.rates = merge_rates(base_rates or Rates(), rates)
        self.count_bike_calories_per_mode = count_bike_calories_per_mode

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        factors: Mapping[str, Any] | None = None,
        rates: Mapping[str, Any] | None = None,
    ) -> "ProfileScore":
        """Build a scorer from configured defaults, with optional per-call overrides on top."""
        scoring = settings.scoring
        return cls(
            factors,
            rates,
            count_bike_calories_per_mode=scoring.count_bike_calories_per_mode,
            base_factors=scoring.factors,
            base_rates=scoring.rates,
        )

    def tally(self, o: Option) -> Option:
        return tally_option(o, self.rates)

    def score(self, o: Option) -> float:
        return score_option(o, self.factors, count_bike_calories_per_mode=self.count_bike_calories_per_mode)

    def explain(self, o: Option) -> ScoreBreakdown:
        """Per-term breakdown of an already tallied option."""
        return score_breakdown(o, self.factors, count_bike_calories_per_mode=self.count_bike_calories_per_mode)

    def process_option(self, o: Option) -> Option:
        """Tally and score one option in place, using only its first access/egress alternative."""
        o = self.tally(o)
        o["score"] = self.score(o)
        return o

    def process_options(self, options: Iterable[Option]) -> list[Option]:
        """Split options by access and egress alternative, score each, and sort ascending by score.

        Options without access alternatives are dropped. The input records are never mutated.
        """
        processed: list[Option] = []

        for o in options:
            access = o.get("access")
            if not access:
                continue
            egress = o.get("egress")

            for a in access:
                if egress:
                    for e in egress:
                        opt = clone(o)
                        opt["access"] = [clone(a)]
                        opt["egress"] = [clone(e)]
                        processed.append(self.process_option(opt))
                else:
                    opt = clone(o)
                    opt["access"] = [clone(a)]
                    processed.append(self.process_option(opt))

        # list.sort is stable, so ties keep their expansion order.
        processed.sort(key=lambda p: p["score"])
        logger.debug("Scored %d itineraries", len(processed))
        return processed
