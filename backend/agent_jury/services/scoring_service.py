import math

from agent_jury.models.evaluation import Verdict

# Weights in percent; risk is inverted so that a safer idea scores higher
FEASIBILITY_WEIGHT = 45
INNOVATION_WEIGHT = 35
RISK_WEIGHT = 20

SHIP_THRESHOLD = 70
ITERATE_THRESHOLD = 50


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's rounding)."""
    return int(math.floor(value + 0.5))


def clamp_score(value) -> int:
    """
    Coerce a model-provided score into an integer in [0, 100].

    Numbers and numeric strings are clamped and rounded; anything else
    (None, booleans, NaN, lists, free text) counts as 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        # JSON integers can exceed the float range
        return max(0, min(100, value))
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    return round_half_up(max(0.0, min(100.0, number)))


def compute_final_score(feasibility: int, innovation: int, risk: int) -> int:
    """
    Weighted final score: f*0.45 + i*0.35 + (100 - r)*0.20, rounded half up.

    Computed on integer percentages so the result does not depend on
    floating point representation of the weights.
    """
    total = (
        feasibility * FEASIBILITY_WEIGHT
        + innovation * INNOVATION_WEIGHT
        + (100 - risk) * RISK_WEIGHT
    )
    return (total + 50) // 100


def derive_verdict(score: int) -> Verdict:
    if score >= SHIP_THRESHOLD:
        return Verdict.SHIP_MVP
    if score >= ITERATE_THRESHOLD:
        return Verdict.ITERATE_FIRST
    return Verdict.REJECT


def score_label(score: int) -> str:
    """Short label shown next to a single agent's score."""
    if score >= 80:
        return "Excellent"
    if score >= 65:
        return "Good"
    if score >= 45:
        return "Fair"
    return "Risky"
