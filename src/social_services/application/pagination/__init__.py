"""Application pagination – page window, sort and metadata primitives."""
from social_services.application.pagination.page_request import PageRequest, Sort, SortDirection
from social_services.application.pagination.page import Page, PaginationMeta

__all__ = ["Page", "PageRequest", "PaginationMeta", "Sort", "SortDirection"]
