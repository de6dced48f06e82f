"""Application saved posts."""
from social_services.application.saved_posts.service import POST_FIELDS, SavedPostService

__all__ = ["POST_FIELDS", "SavedPostService"]
