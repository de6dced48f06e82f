"""Application storage – collection port, in-memory double and helpers."""
from social_services.application.storage.collection import DocumentCollection, as_object_id
from social_services.application.storage.in_memory import InMemoryCollection
from social_services.application.storage.populate import populate

__all__ = ["DocumentCollection", "InMemoryCollection", "as_object_id", "populate"]
