"""
Per-call scoring overrides (safe subset).

The CLI and API can send `factors` / `rates` overrides to tune the scorer for a single
run. This module:
- validates the override payload against a whitelist,
- merges the safe subset onto the current scoring settings,
- re-validates with Pydantic to ensure types/ranges remain correct.
"""

from __future__ import annotations

from typing import Any, Mapping

from profilescore.config.settings import Rates, ScoringSettings, TimeFactors

# A value of True means "allow this key"; a nested dict means "only allow the listed keys".
ALLOWED_SCORING_OVERRIDES_TREE: dict[str, Any] = {
    "factors": {name: True for name in TimeFactors.model_fields},
    "rates": {name: True for name in Rates.model_fields},
    "count_bike_calories_per_mode": True,
}


def _filter_overrides(
    overrides: Mapping[str, Any],
    *,
    allowed_tree: Mapping[str, Any],
    path: tuple[str, ...] = (),
) -> dict[str, Any]:
    filtered: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in allowed_tree:
            dotted_path = ".".join((*path, key))
            raise ValueError(f"scoring overrides contain a disallowed key: '{dotted_path}'")

        allowed = allowed_tree[key]
        if allowed is True:
            filtered[key] = value
            continue

        if not isinstance(value, Mapping):
            dotted_path = ".".join((*path, key))
            raise ValueError(f"scoring overrides key '{dotted_path}' must be a mapping")

        filtered[key] = _filter_overrides(value, allowed_tree=allowed, path=(*path, key))
    return filtered


def apply_scoring_overrides(
    scoring: ScoringSettings, overrides: Mapping[str, Any] | None
) -> ScoringSettings:
    """Return a new `ScoringSettings` with whitelisted overrides applied.

    The merge is shallow per section: each factor/rate key replaces the default
    value of the same key, unspecified keys keep their current values.
    """
    if not overrides:
        return scoring

    safe = _filter_overrides(overrides, allowed_tree=ALLOWED_SCORING_OVERRIDES_TREE)

    payload = scoring.model_dump(mode="python")
    for section in ("factors", "rates"):
        if section in safe:
            payload[section] = {**payload[section], **safe[section]}
    if "count_bike_calories_per_mode" in safe:
        payload["count_bike_calories_per_mode"] = safe["count_bike_calories_per_mode"]

    return ScoringSettings.model_validate(payload)
