"""MongoDB adapter – motor-backed collections and queryable handles."""

from social_services.adapters.mongodb.collection import MongoCollection
from social_services.adapters.mongodb.errors import storage_errors
from social_services.adapters.mongodb.filters import to_mongo_filter, to_mongo_projection, to_mongo_sort
from social_services.adapters.mongodb.handle import MongoQueryableHandle

__all__ = [
    "MongoCollection",
    "MongoQueryableHandle",
    "storage_errors",
    "to_mongo_filter",
    "to_mongo_projection",
    "to_mongo_sort",
]
