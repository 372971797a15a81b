from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_PACKAGED_SEED_DIR = Path(__file__).resolve().parent / "seed"


@dataclass(frozen=True)
class StoreConfig:
    """
    Where the in-memory store loads its seed tables from.
    """

    seed_dir: Path = Path(os.getenv("CAMPUSBITE_SEED_DIR", str(_PACKAGED_SEED_DIR)))
    canteens_filename: str = "canteens.csv"
    stalls_filename: str = "stalls.csv"
    blocks_filename: str = "campus_blocks.csv"
    demo_username: str = "demo_user"

    @property
    def canteens_path(self) -> Path:
        return self.seed_dir / self.canteens_filename

    @property
    def stalls_path(self) -> Path:
        return self.seed_dir / self.stalls_filename

    @property
    def blocks_path(self) -> Path:
        return self.seed_dir / self.blocks_filename


DEFAULT_STORE_CONFIG = StoreConfig()
