"""Password hashing strategies."""

from __future__ import annotations

import bcrypt

from sessionauth.domain.users.repositories import PasswordHasher
from sessionauth.shared.errors import ValidationError

DEFAULT_COST_FACTOR = 8
MIN_COST_FACTOR = 4
MAX_COST_FACTOR = 31


class BcryptPasswordHasher(PasswordHasher):
    """bcrypt digests: ``$<version>$<cost>$<22-char salt><31-char digest>``.

    The cost factor is the log2 of the key-expansion rounds, so each step
    doubles the work. Passwords longer than bcrypt's 72-byte input limit are
    truncated to it on both hash and verify.
    """

    def __init__(self, cost_factor: int = DEFAULT_COST_FACTOR) -> None:
        self._cost_factor = self._check_cost(cost_factor)

    @property
    def cost_factor(self) -> int:
        return self._cost_factor

    @staticmethod
    def _check_cost(cost_factor: int) -> int:
        if not MIN_COST_FACTOR <= cost_factor <= MAX_COST_FACTOR:
            raise ValidationError(
                "cost_factor_out_of_range",
                context={
                    "cost_factor": cost_factor,
                    "min": MIN_COST_FACTOR,
                    "max": MAX_COST_FACTOR,
                },
            )
        return cost_factor

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:72]

    def hash(self, password: str, cost_factor: int | None = None) -> str:
        if not password:
            raise ValidationError(context={"fields": ["password"]})
        rounds = self._cost_factor if cost_factor is None else self._check_cost(cost_factor)
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(self._encode(password), salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        if not password or not hashed:
            return False
        try:
            return bcrypt.checkpw(self._encode(password), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def cost_of(self, hashed: str) -> int | None:
        """Cost factor embedded in ``hashed``, or None when it does not parse."""
        parts = hashed.split("$")
        if len(parts) != 4 or not parts[2].isdigit():
            return None
        return int(parts[2])
