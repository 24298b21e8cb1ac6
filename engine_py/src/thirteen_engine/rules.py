"""
Lobby rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator

from .constants import CODE_LENGTH, DECK_SIZE, HAND_SIZE, MAX_PLAYERS


class RuleConfig(BaseModel):
    """Configuration for lobby limits and dealing."""

    max_players: int = Field(
        default=MAX_PLAYERS,
        ge=1,
        le=DECK_SIZE,
        description="Seats per lobby; a game starts only with a full table"
    )
    hand_size: int = Field(
        default=HAND_SIZE,
        ge=1,
        le=DECK_SIZE,
        description="Cards dealt to each player"
    )
    code_length: int = Field(
        default=CODE_LENGTH,
        ge=1,
        le=8,
        description="Length of generated lobby codes"
    )
    case_sensitive_names: bool = Field(
        default=True,
        description="Whether 'Bob' and 'bob' count as different names in one lobby"
    )

    @field_validator('hand_size')
    @classmethod
    def validate_hand_size(cls, v, info):
        """A full table must fit in one deck."""
        max_players = info.data.get('max_players', MAX_PLAYERS)
        if max_players * v > DECK_SIZE:
            raise ValueError(
                f'max_players ({max_players}) x hand_size ({v}) exceeds the {DECK_SIZE}-card deck'
            )
        return v

    def same_name(self, name_a: str, name_b: str) -> bool:
        """Compare two display names under this configuration."""
        if self.case_sensitive_names:
            return name_a == name_b
        return name_a.casefold() == name_b.casefold()


# Default configuration instance
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a RuleConfig with optional overrides."""
    config_dict = default_rules.model_dump()
    config_dict.update(overrides)
    return RuleConfig(**config_dict)
