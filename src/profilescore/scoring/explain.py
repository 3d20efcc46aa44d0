"""
Small explainability formatting helpers.

Used by the CLI to print compact summaries of scored options.
"""

from __future__ import annotations

from profilescore.domain.models import Option, ScoreBreakdown


def one_line_summary(o: Option) -> str:
    """Render a compact single-line summary for a scored option."""
    modes = "+".join(o.get("modes") or []) or "-"
    return (
        f"score={o['score']:.2f} modes={modes} time={o['time'] / 60:.1f}min "
        f"cost=${o['cost']:.2f} co2={o['emissions']:.2f}kg cal={o['calories']:.0f} transfers={o['transfers']}"
    )


def breakdown_lines(breakdown: ScoreBreakdown) -> list[str]:
    """One line per score term, skipping terms that contribute nothing."""
    return [f"{t.name}: {t.minutes:+.2f} ({t.quantity:g})" for t in breakdown.terms if t.minutes]
