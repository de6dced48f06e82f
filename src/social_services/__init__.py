"""
social_services – list queries and account services for a social platform.

Import path convention::

    from social_services.application.query import QueryBuilder, Eq
    from social_services.application.users import UserService
    from social_services.adapters.mongodb import MongoCollection
    from social_services.adapters.fastapi import FastAPIExceptionMapper, users_router
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
