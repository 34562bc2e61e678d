"""Data models for catanstats."""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Tuple

from .constants import ORDER_FIELD, PLACE_NAMES, ExtraPointKind


@dataclass(frozen=True)
class Base:
    """Buildings on the board at the end of the game."""
    cities: int = 0
    settlements: int = 0

    @property
    def points(self) -> int:
        return 2 * self.cities + self.settlements


@dataclass(frozen=True)
class Development:
    """City improvement levels per commodity track."""
    trade: int = 0
    politics: int = 0
    science: int = 0


@dataclass(frozen=True)
class ExtraPoints:
    """Decoded "Extra points" cell: running total plus per-kind points."""
    total: float = 0
    items: Dict[ExtraPointKind, float] = field(default_factory=dict)

    def get(self, kind: ExtraPointKind) -> float:
        return self.items.get(kind, 0)


@dataclass(frozen=True)
class PlayerResult:
    """One player's line in a game. Optional fields are absent in older records."""
    name: str
    score: float = 0.0
    base: Optional[Base] = None
    development: Optional[Development] = None
    extra_points: Optional[ExtraPoints] = None
    order: Optional[int] = None  # starting turn order, 1-based

    @property
    def missing_fields(self) -> Tuple[str, ...]:
        missing = []
        if self.base is None:
            missing.append('base')
        if self.development is None:
            missing.append('development')
        if self.extra_points is None:
            missing.append('extraPoints')
        if self.order is None:
            missing.append(ORDER_FIELD)
        return tuple(missing)


@dataclass(frozen=True)
class Game:
    """A single game session; players are in finishing order (index 0 = winner)."""
    game_no: str
    date: str
    players: Tuple[PlayerResult, ...] = ()
    played_on: Optional[date] = None  # None when the date cell could not be parsed

    @property
    def winner(self) -> Optional[PlayerResult]:
        return self.players[0] if self.players else None

    @property
    def player_names(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.players)

    def place_of(self, name: str) -> Optional[int]:
        """Return the 1-based finishing place of a player, or None if absent."""
        for index, player in enumerate(self.players):
            if player.name == name:
                return index + 1
        return None

    def player(self, name: str) -> Optional[PlayerResult]:
        for player in self.players:
            if player.name == name:
                return player
        return None


@dataclass(frozen=True)
class Places:
    """Finishing-place counts for one player."""
    first: int = 0
    second: int = 0
    third: int = 0
    fourth: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in PLACE_NAMES}


@dataclass(frozen=True)
class PlayerStats:
    """Aggregated results for one player over a filtered set of games."""
    name: str
    total_games: int = 0
    total_score: float = 0.0
    total_wins: int = 0
    places: Places = field(default_factory=Places)
    games: Tuple[Game, ...] = ()

    @property
    def average_score(self) -> float:
        return self.total_score / self.total_games if self.total_games else 0.0

    @property
    def win_rate(self) -> float:
        return self.total_wins / self.total_games if self.total_games else 0.0

    @property
    def place_rates(self) -> Dict[str, float]:
        if not self.total_games:
            return {name: 0.0 for name in PLACE_NAMES}
        return {name: count / self.total_games for name, count in self.places.as_dict().items()}


@dataclass(frozen=True)
class ScoreMismatch:
    """Recorded score differs from the score implied by the point details."""
    game_no: str
    player: str
    recorded_score: float
    expected_score: float


@dataclass(frozen=True)
class MissingStats:
    """Optional field categories absent from a game (judged by its first player)."""
    game_no: str
    missing_fields: Tuple[str, ...]


@dataclass(frozen=True)
class PlayerProfile:
    """Per-game averages for a player, over games that carry point details."""
    name: str
    detailed_games: int
    development: Dict[str, float] = field(default_factory=dict)
    buildings: Dict[str, float] = field(default_factory=dict)
    extras: Dict[ExtraPointKind, float] = field(default_factory=dict)
    start_orders: Tuple[int, ...] = ()  # count of games started from position 1..4


@dataclass(frozen=True)
class SessionSummary:
    """Headline numbers for the whole export."""
    total_games: int
    total_players: int
    first_date: Optional[date] = None
    last_date: Optional[date] = None
    days_since_last_game: Optional[int] = None
    recency: Optional[str] = None
