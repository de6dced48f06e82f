"""Application users – one-time verification codes."""
from __future__ import annotations

import secrets
from datetime import datetime, timedelta

__all__ = ["OTP_DIGITS", "generate_otp", "otp_authentication"]

OTP_DIGITS = 6


def generate_otp(digits: int = OTP_DIGITS) -> str:
    """Uniformly random numeric code, zero padded to *digits*."""
    if digits < 1:
        raise ValueError("digits must be >= 1")
    return f"{secrets.randbelow(10**digits):0{digits}d}"


def otp_authentication(code: str, now: datetime, ttl_seconds: int) -> dict[str, object]:
    return {"oneTimeCode": code, "expireAt": now + timedelta(seconds=ttl_seconds)}
