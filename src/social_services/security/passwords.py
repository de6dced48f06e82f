"""Security – PasswordHasher port and bcrypt implementation."""
from __future__ import annotations

import abc

import bcrypt

__all__ = ["BcryptPasswordHasher", "PasswordHasher"]


class PasswordHasher(abc.ABC):
    """Port: one-way password hashing."""

    @abc.abstractmethod
    def hash(self, password: str) -> str: ...

    @abc.abstractmethod
    def verify(self, password: str, hashed: str) -> bool: ...


class BcryptPasswordHasher(PasswordHasher):
    """bcrypt with a configurable work factor (``rounds``)."""

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(password.encode(), hashed.encode())
        except ValueError:
            # not a bcrypt hash
            return False
