from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Canteen(BaseModel):
    id: str
    name: str
    location: str
    total_stalls: int = 0


class Stall(BaseModel):
    id: str
    canteen_id: str
    name: str
    cuisine_type: str
    current_queue: int = 0
    estimated_wait_time: int = Field(default=0, description="Estimated wait in minutes")
    rating: str | float | None = Field(
        default=None, description='Average rating on a 0-5 scale, e.g. "4.25"'
    )
    review_count: int = 0


class CampusBlock(BaseModel):
    id: str
    name: str
    short_name: str
    latitude: float | None = None
    longitude: float | None = None
    nearest_canteen_id: str | None = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class User(BaseModel):
    id: str
    username: str
    full_name: str
    current_block_id: str | None = None


class UserPreferences(BaseModel):
    user_id: str
    cuisine_types: list[str] | None = Field(
        default=None, description='Preferred cuisines, e.g. ["Chinese", "Western"]'
    )
    dietary_restrictions: list[str] | None = Field(
        default=None, description='e.g. ["vegetarian", "halal", "no-pork"]'
    )
    spice_level: str | None = None
    price_range: str | None = None
    max_queue_time: int = Field(default=30, ge=0)
    # Stored default; the scorer falls back to its own 1000 m when unset.
    max_walking_distance: int = Field(default=500, ge=0)
    prefer_low_cost: bool = False
    avoid_peak_hours: bool = False


class Confidence(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    preference_score: float
    proximity_score: float
    queue_score: float
    rating_score: float


class ScoredStall(BaseModel):
    model_config = ConfigDict(frozen=True)

    stall: Stall
    canteen: Canteen
    distance: float | None = None
    score: float
    breakdown: ScoreBreakdown
    confidence: Confidence


# ── Request bodies ───────────────────────────────────────────────────────


class LocationUpdateRequest(BaseModel):
    block_id: str = Field(..., min_length=1)


class PreferencesUpdateRequest(BaseModel):
    cuisine_types: list[str] | None = None
    dietary_restrictions: list[str] | None = None
    spice_level: str | None = None
    price_range: str | None = None
    max_queue_time: int | None = Field(default=None, ge=0)
    max_walking_distance: int | None = Field(default=None, ge=0)
    prefer_low_cost: bool | None = None
    avoid_peak_hours: bool | None = None


class QueueUpdateRequest(BaseModel):
    current_queue: int = Field(..., ge=0)
    estimated_wait_time: int = Field(..., ge=0)


class RatingRequest(BaseModel):
    stall_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    review: str | None = Field(default=None, max_length=1000)


class RatingOut(BaseModel):
    id: str
    stall_id: str
    rating: int
    review: str | None = None
    created_at: float
