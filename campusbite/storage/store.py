from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path
from typing import Any

import pandas as pd

from ..recommendations.models import (
    CampusBlock,
    Canteen,
    RatingOut,
    Stall,
    User,
    UserPreferences,
)
from .config import DEFAULT_STORE_CONFIG, StoreConfig

logger = logging.getLogger(__name__)

_config: StoreConfig = DEFAULT_STORE_CONFIG
_state: dict[str, dict[str, Any]] | None = None


def _read_records(path: Path) -> list[dict[str, Any]]:
    # Read everything as text; empty cells become None and pydantic coerces the rest.
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    return [
        {k: (v.strip() or None) for k, v in row.items()}
        for row in df.to_dict(orient="records")
    ]


def _seed_demo_user(state: dict[str, dict[str, Any]], config: StoreConfig) -> None:
    first_block = next(iter(state["blocks"].values()), None)
    user = User(
        id="user-1",
        username=config.demo_username,
        full_name="Demo User",
        current_block_id=first_block.id if first_block else None,
    )
    state["users"][user.id] = user
    state["preferences"][user.id] = UserPreferences(
        user_id=user.id,
        cuisine_types=["Chinese", "Western", "Japanese"],
        dietary_restrictions=[],
        max_queue_time=30,
        max_walking_distance=500,
        prefer_low_cost=True,
        avoid_peak_hours=True,
    )


def _load(config: StoreConfig) -> dict[str, dict[str, Any]]:
    canteens = [Canteen(**r) for r in _read_records(config.canteens_path)]
    stalls = [Stall(**r) for r in _read_records(config.stalls_path)]
    blocks = [CampusBlock(**r) for r in _read_records(config.blocks_path)]

    # dicts keep insertion order, so listings follow the seed files
    state: dict[str, dict[str, Any]] = {
        "canteens": {c.id: c for c in canteens},
        "stalls": {s.id: s for s in stalls},
        "blocks": {b.id: b for b in blocks},
        "users": {},
        "preferences": {},
        "ratings": {},
    }
    _seed_demo_user(state, config)

    logger.info(
        "Loaded %d canteens, %d stalls, %d campus blocks from %s",
        len(canteens), len(stalls), len(blocks), config.seed_dir,
    )
    return state


def _get_state() -> dict[str, dict[str, Any]]:
    global _state
    if _state is None:
        _state = _load(_config)
    return _state


def reset_store(config: StoreConfig | None = None) -> None:
    """Drop all in-memory state; the next access reloads the seeds."""
    global _state, _config
    _state = None
    if config is not None:
        _config = config


# ── Canteens / stalls / blocks ───────────────────────────────────────────


def list_canteens() -> list[Canteen]:
    return list(_get_state()["canteens"].values())


def get_canteen(canteen_id: str) -> Canteen | None:
    return _get_state()["canteens"].get(canteen_id)


def list_stalls() -> list[Stall]:
    return list(_get_state()["stalls"].values())


def list_stalls_by_canteen(canteen_id: str) -> list[Stall]:
    return [s for s in list_stalls() if s.canteen_id == canteen_id]


def get_stall(stall_id: str) -> Stall | None:
    return _get_state()["stalls"].get(stall_id)


def update_stall_queue(
    stall_id: str, current_queue: int, estimated_wait_time: int,
) -> Stall | None:
    stalls = _get_state()["stalls"]
    stall = stalls.get(stall_id)
    if stall is None:
        return None
    stalls[stall_id] = stall.model_copy(update={
        "current_queue": current_queue,
        "estimated_wait_time": estimated_wait_time,
    })
    return stalls[stall_id]


def list_campus_blocks() -> list[CampusBlock]:
    return list(_get_state()["blocks"].values())


def get_campus_block(block_id: str) -> CampusBlock | None:
    return _get_state()["blocks"].get(block_id)


# ── Users / preferences ──────────────────────────────────────────────────


def get_user(user_id: str) -> User | None:
    return _get_state()["users"].get(user_id)


def get_user_by_username(username: str) -> User | None:
    for user in _get_state()["users"].values():
        if user.username == username:
            return user
    return None


def update_user_location(user_id: str, block_id: str | None) -> User | None:
    users = _get_state()["users"]
    user = users.get(user_id)
    if user is None:
        return None
    users[user_id] = user.model_copy(update={"current_block_id": block_id})
    return users[user_id]


def get_user_preferences(user_id: str) -> UserPreferences | None:
    return _get_state()["preferences"].get(user_id)


def update_user_preferences(
    user_id: str, changes: dict[str, Any],
) -> UserPreferences | None:
    """Merge ``changes`` into the user's preferences, creating them if absent."""
    state = _get_state()
    if user_id not in state["users"]:
        return None
    existing = state["preferences"].get(user_id)
    base = existing.model_dump() if existing else {"user_id": user_id}
    merged = UserPreferences.model_validate({**base, **changes, "user_id": user_id})
    state["preferences"][user_id] = merged
    return merged


# ── Ratings ──────────────────────────────────────────────────────────────


def get_ratings(stall_id: str) -> list[RatingOut]:
    return list(_get_state()["ratings"].get(stall_id, []))


def create_rating(stall_id: str, rating: int, review: str | None = None) -> RatingOut | None:
    """Store a stall rating and refresh the stall's average and review count."""
    state = _get_state()
    stall = state["stalls"].get(stall_id)
    if stall is None:
        return None

    record = RatingOut(
        id=str(uuid.uuid4()),
        stall_id=stall_id,
        rating=rating,
        review=review,
        created_at=time.time(),
    )
    stall_ratings = state["ratings"].setdefault(stall_id, [])
    stall_ratings.append(record)

    avg = sum(r.rating for r in stall_ratings) / len(stall_ratings)
    state["stalls"][stall_id] = stall.model_copy(update={
        "rating": f"{avg:.2f}",
        "review_count": len(stall_ratings),
    })
    return record
