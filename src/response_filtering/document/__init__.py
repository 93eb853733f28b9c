"""Document-store (MongoDB) compilation of response filters."""

from __future__ import annotations

from .query_builder import DocumentQueryBuilder, build_mongodb_filter

__all__ = ["DocumentQueryBuilder", "build_mongodb_filter"]
