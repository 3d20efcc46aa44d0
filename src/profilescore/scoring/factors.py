"""
Shared scoring helpers.

- `apply_factor`: convert a quantity into minutes with a numeric weight or a function
- `calories_burned`: MET-based energy expenditure
"""

from __future__ import annotations

from profilescore.config.settings import Factor


def apply_factor(value: float, factor: Factor) -> float:
    """Return `factor(value)` for a callable factor, else `factor * value`."""
    if callable(factor):
        return factor(value)
    return factor * value


def calories_burned(met: float, kg: float, hours: float) -> float:
    """Energy expenditure in kcal: MET x body mass (kg) x duration (hours)."""
    return met * kg * hours
