"""Exceptions raised while loading and parsing game exports."""


class StatsError(Exception):
    """Base class for all catanstats errors."""


class ParseError(StatsError, ValueError):
    """The export could not be turned into game records.

    Parse errors are fatal for the whole file: no partial results are returned.
    """


class UnrecognizedField(ParseError):
    """A cell does not match any known field name or extra-points token."""

    def __init__(self, value: str, context: str = ''):
        self.value = value
        self.context = context
        message = f'Unrecognized field "{value}"'
        if context:
            message = f'{message} ({context})'
        super().__init__(message)


class OrderingViolation(ParseError):
    """A player-scoped row appeared before the "Player" row of its block."""


class DuplicateRecord(ParseError):
    """A game number or a player name within a game appears twice."""


class MalformedField(ParseError):
    """A numeric or date sub-token could not be parsed."""


class FetchError(StatsError):
    """The raw export could not be retrieved."""
