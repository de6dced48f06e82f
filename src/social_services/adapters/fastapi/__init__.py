"""FastAPI adapter – exception mapper, query dependency and routers."""
from social_services.adapters.fastapi.deps import RawQuery, raw_query_dep, to_jsonable
from social_services.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from social_services.adapters.fastapi.routers import users_router

__all__ = ["FastAPIExceptionMapper", "RawQuery", "raw_query_dep", "to_jsonable", "users_router"]
