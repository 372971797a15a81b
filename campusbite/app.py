from __future__ import annotations

import logging
import time

from fastapi import FastAPI, HTTPException

from .analytics.aggregator import compute_analytics
from .analytics.store import get_event_totals, get_events, record_event
from .recommendations.engine import calculate_recommendations
from .recommendations.models import (
    CampusBlock,
    Canteen,
    LocationUpdateRequest,
    PreferencesUpdateRequest,
    QueueUpdateRequest,
    RatingOut,
    RatingRequest,
    ScoredStall,
    Stall,
    User,
    UserPreferences,
)
from .storage import store

logger = logging.getLogger(__name__)

app = FastAPI(title="Campus Canteen Queue API", version="1.0.0")


def _require_user(user_id: str) -> User:
    user = store.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/canteens", response_model=list[Canteen])
def canteens() -> list[Canteen]:
    return store.list_canteens()


@app.get("/api/canteens/{canteen_id}/stalls", response_model=list[Stall])
def canteen_stalls(canteen_id: str) -> list[Stall]:
    if store.get_canteen(canteen_id) is None:
        raise HTTPException(status_code=404, detail="Canteen not found")
    return store.list_stalls_by_canteen(canteen_id)


@app.get("/api/stalls", response_model=list[Stall])
def stalls() -> list[Stall]:
    return store.list_stalls()


@app.get("/api/campus-blocks", response_model=list[CampusBlock])
def campus_blocks() -> list[CampusBlock]:
    return store.list_campus_blocks()


@app.patch("/api/stalls/{stall_id}/queue", response_model=Stall)
def update_queue(stall_id: str, body: QueueUpdateRequest) -> Stall:
    stall = store.update_stall_queue(
        stall_id, body.current_queue, body.estimated_wait_time,
    )
    if stall is None:
        raise HTTPException(status_code=404, detail="Stall not found")
    return stall


@app.post("/api/ratings", response_model=RatingOut)
def rate_stall(body: RatingRequest) -> RatingOut:
    rating = store.create_rating(body.stall_id, body.rating, body.review)
    if rating is None:
        raise HTTPException(status_code=404, detail="Stall not found")
    return rating


@app.get("/api/stalls/{stall_id}/ratings", response_model=list[RatingOut])
def stall_ratings(stall_id: str) -> list[RatingOut]:
    if store.get_stall(stall_id) is None:
        raise HTTPException(status_code=404, detail="Stall not found")
    return store.get_ratings(stall_id)


# ── User endpoints ───────────────────────────────────────────────────────


@app.get("/api/users/{user_id}", response_model=User)
def get_user(user_id: str) -> User:
    return _require_user(user_id)


@app.get("/api/users/by-username/{username}", response_model=User)
def get_user_by_username(username: str) -> User:
    user = store.get_user_by_username(username)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@app.patch("/api/users/{user_id}/location", response_model=User)
def update_location(user_id: str, body: LocationUpdateRequest) -> User:
    _require_user(user_id)
    if store.get_campus_block(body.block_id) is None:
        raise HTTPException(status_code=404, detail="Campus block not found")
    return store.update_user_location(user_id, body.block_id)


@app.patch("/api/users/{user_id}/preferences", response_model=UserPreferences)
def update_preferences(user_id: str, body: PreferencesUpdateRequest) -> UserPreferences:
    _require_user(user_id)
    return store.update_user_preferences(
        user_id, body.model_dump(exclude_unset=True, exclude_none=True),
    )


@app.get("/api/recommendations/{user_id}", response_model=list[ScoredStall])
def recommendations(user_id: str) -> list[ScoredStall]:
    start_time = time.time()
    user = _require_user(user_id)

    try:
        preferences = store.get_user_preferences(user.id)
        user_block = (
            store.get_campus_block(user.current_block_id)
            if user.current_block_id
            else None
        )
        stalls = store.list_stalls()

        results = calculate_recommendations(
            user,
            preferences,
            user_block,
            stalls,
            store.list_canteens(),
            store.list_campus_blocks(),
        )
    except Exception:
        logger.exception("Failed to calculate recommendations for user %s", user_id)
        raise HTTPException(
            status_code=500, detail="Failed to calculate recommendations",
        )

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    distances = [r.distance for r in results if r.distance is not None]
    record_event("recommendation", {
        "user_id": user.id,
        "confidence": results[0].confidence.value if results else None,
        "total_stalls": len(stalls),
        "results_returned": len(results),
        "dropped_stalls": len(stalls) - len(results),
        "unknown_distance": len(results) - len(distances),
        "avg_distance_m": round(sum(distances) / len(distances), 1) if distances else None,
        "top_stall_id": results[0].stall.id if results else None,
        "top_score": round(results[0].score, 4) if results else None,
        "response_time_ms": elapsed_ms,
    })

    return results


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/analytics")
def analytics(since: float | None = None) -> dict:
    report = compute_analytics(get_events(since=since))
    report["event_totals"] = get_event_totals()
    return report
