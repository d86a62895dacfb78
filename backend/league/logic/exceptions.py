"""Typed domain exceptions for match lifecycle rule violations.

All rule violations raised by the logic layer use subclasses of
LeagueRuleError rather than raw ValueError. LeagueStore catches them at
its boundary and converts them to Rejection results, so callers never
see these exceptions from store operations.
"""

from league.logic.enums import LeagueErrorCode


class LeagueRuleError(Exception):
    """Base exception for match lifecycle rule violations.

    Attributes:
        code: Error code reported to the caller in the Rejection.

    """

    default_code: LeagueErrorCode = LeagueErrorCode.INVALID_INPUT

    def __init__(self, message: str, *, code: LeagueErrorCode | None = None) -> None:
        self.code = code or self.default_code
        super().__init__(message)


class InvalidScoreError(LeagueRuleError):
    """Score is negative, tied, or disagrees with the reported winner."""

    default_code = LeagueErrorCode.INVALID_SCORE


class InvalidPlayerError(LeagueRuleError):
    """Player references are missing, duplicated, or not part of the match."""

    default_code = LeagueErrorCode.INVALID_PLAYERS


class InvalidInputError(LeagueRuleError):
    """A required field is empty or an update names an unknown field."""

    default_code = LeagueErrorCode.INVALID_INPUT


class NotFoundError(LeagueRuleError):
    """Referenced entity does not exist in the current snapshot."""


class InvalidTransitionError(LeagueRuleError):
    """Entity is not in a state that allows the requested transition."""


class InviteCodeExhaustedError(LeagueRuleError):
    """No unused invite code could be generated within the attempt limit."""

    default_code = LeagueErrorCode.INVITE_CODE_EXHAUSTED
