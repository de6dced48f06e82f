"""Application email – transactional templates."""
from __future__ import annotations

from html import escape

from social_services.application.email.message import EmailMessage

__all__ = ["create_account_email"]


def create_account_email(*, name: str, email: str, otp: str, ttl_minutes: int) -> EmailMessage:
    """Account verification mail carrying the one-time code."""
    html_body = (
        '<body style="font-family: Arial, sans-serif; background-color: #f9f9f9;">'
        '<div style="max-width: 600px; margin: 0 auto; padding: 20px; background: #fff;">'
        f"<h2>Hey {escape(name)}, your account credentials</h2>"
        "<p>Your single use code is:</p>"
        f'<div style="font-size: 24px; font-weight: bold; letter-spacing: 4px;">{escape(otp)}</div>'
        f"<p>This code is valid for {ttl_minutes} minutes.</p>"
        "</div></body>"
    )
    text_body = (
        f"Hey {name}, your single use code is {otp}. "
        f"It is valid for {ttl_minutes} minutes."
    )
    return EmailMessage(
        to=(email,),
        subject="Verify your account",
        html_body=html_body,
        text_body=text_body,
        tags=("create-account",),
    )
