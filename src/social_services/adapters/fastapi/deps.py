"""FastAPI adapter – reusable dependency functions."""
from __future__ import annotations

from typing import Annotated, Any

from bson import ObjectId
from fastapi import Depends, Request
from fastapi.encoders import jsonable_encoder

from social_services.application.query import normalize_query

__all__ = ["RawQuery", "raw_query_dep", "to_jsonable"]


async def raw_query_dep(request: Request) -> dict[str, Any]:
    """Request query string as a raw query mapping.

    ``?role=a&role=b`` becomes ``{"role": ["a", "b"]}`` and
    ``?age[gte]=18`` becomes ``{"age": {"gte": "18"}}``.
    """
    return normalize_query(request.query_params.multi_items())


RawQuery = Annotated[dict[str, Any], Depends(raw_query_dep)]


def to_jsonable(value: Any) -> Any:
    """Encode documents for a JSON response; ``ObjectId`` becomes its hex string."""
    return jsonable_encoder(value, custom_encoder={ObjectId: str})
