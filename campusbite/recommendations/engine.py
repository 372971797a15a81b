from __future__ import annotations

import logging

from .config import DEFAULT_SCORING_CONFIG, ScoringConfig
from .models import (
    CampusBlock,
    Canteen,
    Confidence,
    ScoreBreakdown,
    ScoredStall,
    Stall,
    User,
    UserPreferences,
)
from .scoring import (
    haversine_distance,
    normalize_proximity,
    normalize_queue_time,
    normalize_rating,
    preference_score,
)

logger = logging.getLogger(__name__)


def _confidence(
    preferences: UserPreferences | None,
    user_block: CampusBlock | None,
    cuisine_types: list[str],
) -> Confidence:
    if user_block is None:
        return Confidence.low
    if preferences is None or not cuisine_types:
        return Confidence.medium
    return Confidence.high


def _nearest_blocks(blocks: list[CampusBlock]) -> dict[str, CampusBlock]:
    """Map canteen id -> the first block naming it as nearest canteen."""
    by_canteen: dict[str, CampusBlock] = {}
    for block in blocks:
        if block.nearest_canteen_id and block.nearest_canteen_id not in by_canteen:
            by_canteen[block.nearest_canteen_id] = block
    return by_canteen


def _stall_distance(
    user_block: CampusBlock | None,
    canteen_block: CampusBlock | None,
    config: ScoringConfig,
) -> float | None:
    if user_block is None or canteen_block is None:
        return None
    if not (user_block.has_coordinates and canteen_block.has_coordinates):
        return None
    return haversine_distance(
        user_block.latitude,
        user_block.longitude,
        canteen_block.latitude,
        canteen_block.longitude,
        radius=config.earth_radius_m,
    )


def calculate_recommendations(
    user: User,
    preferences: UserPreferences | None,
    user_block: CampusBlock | None,
    stalls: list[Stall],
    canteens: list[Canteen],
    blocks: list[CampusBlock],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> list[ScoredStall]:
    """
    Rank stalls for one user, best first.

    Stalls over the user's queue or walking limits are dropped before
    scoring; whatever scores at or below ``config.min_score`` is dropped
    after. Equal scores keep their input order.
    """
    # --- Effective preferences (field by field) ---
    if preferences is not None:
        cuisine_types = list(preferences.cuisine_types or [])
        dietary_restrictions = list(preferences.dietary_restrictions or [])
        max_queue_time = preferences.max_queue_time or config.default_max_queue_time
        max_walking_distance = (
            preferences.max_walking_distance or config.default_max_walking_distance
        )
    else:
        cuisine_types = []
        dietary_restrictions = []
        max_queue_time = config.default_max_queue_time
        max_walking_distance = config.default_max_walking_distance

    confidence = _confidence(preferences, user_block, cuisine_types)

    canteen_by_id = {c.id: c for c in canteens}
    block_by_canteen = _nearest_blocks(blocks)

    # --- Distances + hard filters ---
    candidates: list[tuple[Stall, Canteen, float | None]] = []
    for stall in stalls:
        canteen = canteen_by_id.get(stall.canteen_id)
        if canteen is None:
            logger.warning(
                "Skipping stall %s: canteen %s not found", stall.id, stall.canteen_id
            )
            continue

        distance = _stall_distance(user_block, block_by_canteen.get(canteen.id), config)

        if stall.estimated_wait_time > max_queue_time:
            continue
        if distance is not None and distance > max_walking_distance:
            continue

        candidates.append((stall, canteen, distance))

    # --- Scoring ---
    scored: list[ScoredStall] = []
    for stall, canteen, distance in candidates:
        if distance is not None:
            proximity = normalize_proximity(distance, max_walking_distance)
        else:
            proximity = config.neutral_score

        if cuisine_types:
            preference = preference_score(
                cuisine_types, stall.cuisine_type, dietary_restrictions
            )
        else:
            preference = config.neutral_score

        queue = normalize_queue_time(stall.estimated_wait_time, max_queue_time)

        raw_rating = stall.rating if stall.rating not in (None, "") else config.default_rating_text
        rating = normalize_rating(raw_rating, neutral=config.neutral_score)

        total = (
            preference * config.preference_weight
            + proximity * config.proximity_weight
            + queue * config.queue_weight
            + rating * config.rating_weight
        )
        if total <= config.min_score:
            continue

        scored.append(ScoredStall(
            stall=stall,
            canteen=canteen,
            distance=distance,
            score=total,
            breakdown=ScoreBreakdown(
                preference_score=preference,
                proximity_score=proximity,
                queue_score=queue,
                rating_score=rating,
            ),
            confidence=confidence,
        ))

    logger.debug(
        "User %s: %d stalls, %d passed hard filters, %d returned (confidence=%s)",
        user.id, len(stalls), len(candidates), len(scored), confidence.value,
    )

    # sorted() is stable, so ties stay in input order.
    return sorted(scored, key=lambda s: -s.score)
