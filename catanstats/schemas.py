"""Pydantic schemas for configuration and JSON game dumps."""

from pydantic import BaseModel, Field, field_validator

from .constants import ExtraPointKind

VALID_EXTRA_POINT_KINDS = {kind.value for kind in ExtraPointKind}


class ParticipationThreshold(BaseModel):
    """Minimum participation for a player to be selected by default."""

    mode: str = Field(default='count', pattern=r'^(count|fraction)$')
    minimum: int = Field(default=5, ge=0)
    fraction: float = Field(default=0.2, ge=0, le=1)

    class Config:
        extra = 'forbid'


class StatsConfig(BaseModel):
    """Settings loaded from data/stats_config.json."""

    header_rows: int = Field(default=2, ge=0, le=20)
    player_slots: int = Field(default=4, ge=1, le=4)
    extra_points_accumulation: str = Field(default='sum', pattern=r'^(sum|legacy)$')
    participation_threshold: ParticipationThreshold = Field(
        default_factory=ParticipationThreshold
    )
    date_formats: list[str] = Field(
        default_factory=lambda: ['%Y-%m-%d', '%m/%d/%Y', '%d.%m.%Y', '%Y/%m/%d', '%B %d, %Y']
    )
    fetch_timeout: float = Field(default=30.0, gt=0)

    @field_validator('date_formats')
    @classmethod
    def validate_date_formats(cls, v):
        """Ensure at least one date format is configured."""
        if not v:
            raise ValueError('At least one date format is required')
        return v

    class Config:
        extra = 'forbid'


class ExtraPointsRecord(BaseModel):
    """Decoded extra points of a player."""

    total: float = Field(..., ge=0)
    items: dict[str, float] = Field(default_factory=dict)

    @field_validator('items')
    @classmethod
    def validate_kinds(cls, v):
        """Ensure all extra point kinds are known."""
        for kind in v:
            if kind not in VALID_EXTRA_POINT_KINDS:
                raise ValueError(f'Invalid extra point kind: {kind}')
        return v

    class Config:
        extra = 'forbid'


class BaseRecord(BaseModel):
    cities: int = Field(..., ge=0)
    settlements: int = Field(..., ge=0)

    class Config:
        extra = 'forbid'


class DevelopmentRecord(BaseModel):
    trade: int = Field(..., ge=0)
    politics: int = Field(..., ge=0)
    science: int = Field(..., ge=0)

    class Config:
        extra = 'forbid'


class PlayerRecord(BaseModel):
    """Player line of a game in a JSON dump."""

    name: str = Field(..., min_length=1)
    score: float
    base: BaseRecord | None = None
    development: DevelopmentRecord | None = None
    extraPoints: ExtraPointsRecord | None = None
    order: int | None = Field(None, ge=0)

    class Config:
        extra = 'forbid'


class GameRecord(BaseModel):
    """Game in a JSON dump, players in finishing order."""

    gameNo: str = Field(..., min_length=1)
    date: str
    players: list[PlayerRecord] = Field(..., max_length=4)

    @field_validator('players')
    @classmethod
    def validate_unique_names(cls, v):
        """Ensure no player appears twice in the same game."""
        names = [p.name for p in v]
        if len(names) != len(set(names)):
            raise ValueError(f'Duplicate player names: {", ".join(names)}')
        return v

    class Config:
        extra = 'forbid'


class GamesFile(BaseModel):
    """Complete games JSON dump."""

    games: list[GameRecord]

    class Config:
        extra = 'forbid'
