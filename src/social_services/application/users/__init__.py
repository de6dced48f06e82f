"""Application users – account lifecycle and user listings."""
from social_services.application.users.models import UserRole, UserStatus
from social_services.application.users.otp import generate_otp
from social_services.application.users.service import UserService

__all__ = ["UserRole", "UserService", "UserStatus", "generate_otp"]
