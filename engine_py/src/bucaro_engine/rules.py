"""
Game rule configuration and validation.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .constants import DEFAULT_JOKER_CARD_VALUE, PLAYER_COUNT


class RuleConfig(BaseModel):
    """Configuration for a game session.

    The rule table itself (hand size, meld points, penalties) is fixed; only
    the settings below may vary between sessions.
    """

    seed: Optional[int] = Field(
        default=None,
        description="Seed for deterministic shuffling (None = system random)"
    )
    dealer_index: int = Field(
        default=0,
        ge=0,
        le=PLAYER_COUNT - 1,
        description="Seat of the dealer; the seat to its left acts first"
    )
    joker_card_value: int = Field(
        default=DEFAULT_JOKER_CARD_VALUE,
        ge=0,
        description="Tally value of a joker card at final scoring"
    )
    max_rooms: int = Field(
        default=100,
        ge=1,
        description="Maximum number of concurrent rooms hosted by the server"
    )
    room_timeout: int = Field(
        default=3600,
        ge=300,
        le=7200,
        description="Room inactivity timeout in seconds"
    )

    @field_validator('seed')
    @classmethod
    def validate_seed(cls, v):
        """Seeds must be non-negative so they can be echoed to clients unchanged."""
        if v is not None and v < 0:
            raise ValueError(f'seed ({v}) must be >= 0')
        return v


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
