from __future__ import annotations

import math
from enum import Enum

from .config import DEFAULT_SCORING_CONFIG


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius: float = DEFAULT_SCORING_CONFIG.earth_radius_m,
) -> float:
    """Great-circle distance in meters between two lat/lon points."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    # Rounding can push a just past 1 for antipodal points.
    if a > 1.0:
        a = 1.0
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius * c


class DietaryRule(Enum):
    """Hard-coded dietary conflicts, keyed by restriction label."""

    VEGETARIAN_EXCLUDES_MEAT = "vegetarian"
    HALAL_REQUIRES_HALAL_LABEL = "halal"

    @classmethod
    def for_restriction(cls, restriction: str) -> DietaryRule | None:
        try:
            return cls(restriction.strip().lower())
        except ValueError:
            return None

    def conflicts_with(self, cuisine: str) -> bool:
        cuisine_lower = cuisine.lower()
        if self is DietaryRule.VEGETARIAN_EXCLUDES_MEAT:
            return "meat" in cuisine_lower
        return "halal" not in cuisine_lower


def has_dietary_conflict(dietary_restrictions: list[str], stall_cuisine: str) -> bool:
    for restriction in dietary_restrictions:
        rule = DietaryRule.for_restriction(restriction)
        if rule is not None and rule.conflicts_with(stall_cuisine):
            return True
    return False


def preference_score(
    user_cuisines: list[str],
    stall_cuisine: str,
    dietary_restrictions: list[str],
) -> float:
    """
    Score how well a stall's cuisine fits the user.

    0 on a dietary conflict, 1.0 for a preferred cuisine, 0.3 otherwise.
    """
    if has_dietary_conflict(dietary_restrictions, stall_cuisine):
        return 0.0

    stall_lower = stall_cuisine.lower()
    if any(c.lower() == stall_lower for c in user_cuisines):
        return 1.0
    return 0.3


def normalize_proximity(distance_m: float, max_distance: float) -> float:
    """Linear decay from 1 at the stall to 0 at ``max_distance``."""
    if distance_m >= max_distance:
        return 0.0
    return 1 - distance_m / max_distance


def normalize_queue_time(wait_minutes: float, max_wait: float) -> float:
    if wait_minutes >= max_wait:
        return 0.0
    return 1 - wait_minutes / max_wait


def normalize_rating(
    rating: str | float | int | None,
    neutral: float = DEFAULT_SCORING_CONFIG.neutral_score,
) -> float:
    """Map a 0-5 rating to 0-1. Unparseable values score ``neutral``."""
    try:
        value = float(rating)
    except (TypeError, ValueError):
        return neutral
    if math.isnan(value):
        return neutral
    return min(value / 5.0, 1.0)
