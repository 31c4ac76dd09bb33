"""
Input validation schemas using Pydantic v2
Validates race commands arriving from the UI layer
"""

import logging
from typing import Optional, Self, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .types import CommandType

logger = logging.getLogger(__name__)

ALLOWED_COMMAND_TYPES = frozenset(get_args(CommandType))

# ==================== VALIDATOR FUNCTIONS ====================


class ValidatedCmd(BaseModel):
    """Race command with validation"""

    type: str = Field(..., min_length=1, max_length=50, description="Command type")

    # GENERATE_PROGRAM: explicit seed for reproducible programs
    seed: Optional[int] = Field(
        None, ge=-(2**53), le=2**53, description="Session seed (wall clock if omitted)"
    )

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Normalize and check command type"""
        v = v.strip().upper()
        if v not in ALLOWED_COMMAND_TYPES:
            raise ValueError(f"type must be one of {sorted(ALLOWED_COMMAND_TYPES)}, got {v}")
        return v

    @field_validator("seed", mode="before")
    @classmethod
    def reject_bool_seed(cls, v):
        # bool is an int subclass; True/False as a seed is always a client bug
        if isinstance(v, bool):
            raise ValueError("seed must be an integer")
        return v

    @model_validator(mode="after")
    def validate_command_fields(self) -> Self:
        """Only GENERATE_PROGRAM carries a seed"""
        if self.seed is not None and self.type != "GENERATE_PROGRAM":
            raise ValueError(f"{self.type} does not accept a seed")
        return self

    model_config = ConfigDict(extra="forbid")

    def to_command(self) -> dict:
        cmd: dict = {"type": self.type}
        if self.seed is not None:
            cmd["seed"] = self.seed
        return cmd


class InputSanitizer:
    """Utility class for input sanitization"""

    @staticmethod
    def validate_and_sanitize_cmd(cmd_dict: dict) -> ValidatedCmd:
        """
        Validate and sanitize command dictionary

        Returns:
            ValidatedCmd: Validated command object

        Raises:
            ValueError: If validation fails
        """
        try:
            return ValidatedCmd(**cmd_dict)
        except Exception as e:
            logger.warning(f"Command validation failed: {e}")
            raise ValueError(f"Invalid command: {str(e)}")


# ==================== EXPORT ====================

__all__ = [
    "ALLOWED_COMMAND_TYPES",
    "ValidatedCmd",
    "InputSanitizer",
]
