"""
Race program configuration using Pydantic v2.
Defaults reproduce the classic 20-horse, 6-round program exactly.
"""
from __future__ import annotations

from typing import Self, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Catalog order defines horse ids (1-based position).
HORSE_NAMES: Tuple[str, ...] = (
    "Silver Tempest",
    "Crimson Hoof",
    "Midnight Aurora",
    "Thunder Willow",
    "Obsidian Rush",
    "Golden Mirage",
    "Storm Phantom",
    "Iron Comet",
    "Velvet Blaze",
    "Desert Eclipse",
    "Shadow Gallop",
    "Frost Runner",
    "Copper Dream",
    "Neon Stallion",
    "Blue Torrent",
    "Emerald Vortex",
    "Solar Breaker",
    "Rapid Nova",
    "Windcrusher",
    "Phantom Flash",
)

ROSTER_SIZE = 20
PARTICIPANTS_PER_ROUND = 10
ROUND_DISTANCES: Tuple[int, ...] = (1200, 1400, 1600, 1800, 2000, 2200)
ROUND_COUNT = len(ROUND_DISTANCES)
ROUND_SEED_OFFSET = 1000
# Full width of the centered surprise draw: (r - 0.5) * 0.3 -> [-0.15, +0.15)
SURPRISE_SPREAD = 0.3


class RaceConfig(BaseModel):
    """Tunable shape of a race program"""

    roster_size: int = Field(
        ROSTER_SIZE, ge=1, description="Horses generated per session"
    )
    participants_per_round: int = Field(
        PARTICIPANTS_PER_ROUND, ge=1, description="Horses running each round"
    )
    round_distances: Tuple[int, ...] = Field(
        ROUND_DISTANCES, min_length=1, description="Distance in meters, one per round"
    )
    round_seed_offset: int = Field(
        ROUND_SEED_OFFSET, description="Multiplier separating per-round RNG streams"
    )
    surprise_spread: float = Field(
        SURPRISE_SPREAD, gt=0.0, le=1.0, description="Width of the finish-time noise"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("round_distances")
    @classmethod
    def validate_distances(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        """Every round needs a positive distance"""
        for i, distance in enumerate(v):
            if distance <= 0:
                raise ValueError(f"round {i + 1} distance must be positive, got {distance}")
        return v

    @model_validator(mode="after")
    def validate_sizes(self) -> Self:
        """Roster must fit the name catalog and cover a full field"""
        if self.roster_size > len(HORSE_NAMES):
            raise ValueError(
                f"roster_size cannot exceed the {len(HORSE_NAMES)} catalog names"
            )
        if self.participants_per_round > self.roster_size:
            raise ValueError("participants_per_round cannot exceed roster_size")
        return self

    @property
    def round_count(self) -> int:
        return len(self.round_distances)


DEFAULT_CONFIG = RaceConfig()


def resolve_config(config: RaceConfig | None) -> RaceConfig:
    if config is None:
        return DEFAULT_CONFIG
    return config
