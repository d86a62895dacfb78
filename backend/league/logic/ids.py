"""
Identifier and invite code generation.

Entity IDs are an entity prefix plus a millisecond timestamp and a
per-generator sequence number, so IDs from one generator never collide even
when several entities are created within the same millisecond.

Invite codes are drawn from the secrets module; uniqueness against active
rooms is the caller's concern (see rooms.issue_invite_code).
"""

import itertools
import secrets
import string
import time

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
INVITE_CODE_LENGTH = 6


class IdGenerator:
    """Produce prefixed, time-based, monotonic entity IDs."""

    def __init__(self) -> None:
        self._sequence = itertools.count(1)

    def next_id(self, prefix: str) -> str:
        millis = time.time_ns() // 1_000_000
        return f"{prefix}-{millis}-{next(self._sequence)}"


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    """Return a random uppercase alphanumeric invite code."""
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def normalize_invite_code(code: str) -> str:
    return code.strip().upper()
