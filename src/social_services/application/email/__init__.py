"""Application email – port, value object and templates."""
from social_services.application.email.message import EmailMessage
from social_services.application.email.sender import EmailSender, InMemoryEmailSender
from social_services.application.email.templates import create_account_email

__all__ = ["EmailMessage", "EmailSender", "InMemoryEmailSender", "create_account_email"]
