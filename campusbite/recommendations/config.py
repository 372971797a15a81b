from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class ScoringConfig:
    preference_weight: float = 0.35
    proximity_weight: float = 0.25
    queue_weight: float = 0.20
    rating_weight: float = 0.20

    # Scores at or below this are dropped after weighting.
    min_score: float = float(os.getenv("CAMPUSBITE_MIN_SCORE", "0.1"))
    neutral_score: float = 0.5
    # Substituted for a stall with no rating, before normalisation (-> 0.7).
    default_rating_text: str = "3.5"

    default_max_queue_time: int = 30
    default_max_walking_distance: int = 1000

    earth_radius_m: float = 6371e3


DEFAULT_SCORING_CONFIG = ScoringConfig()
