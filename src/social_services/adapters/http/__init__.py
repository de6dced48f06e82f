"""HTTP adapter – async HTTP client with error mapping."""
from social_services.adapters.http.client import HttpxHttpClient

__all__ = ["HttpxHttpClient"]
