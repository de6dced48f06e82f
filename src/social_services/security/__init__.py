"""Security – password hashing."""
from social_services.security.passwords import BcryptPasswordHasher, PasswordHasher

__all__ = ["BcryptPasswordHasher", "PasswordHasher"]
