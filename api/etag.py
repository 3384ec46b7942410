"""
Travel Booking API - ETag Helpers
==================================

ETags are the quoted number of microseconds since the Unix epoch of a
record's ``last_updated`` (naive UTC). Lists use the newest record.

- GET: If-None-Match equal to the current ETag -> 304
- PATCH: If-Match missing or not listing the current ETag -> 412
  (``*`` matches any existing record)
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from fastapi import Request, Response

from exceptions import PreconditionFailedError

EPOCH = datetime(1970, 1, 1)


def make_etag(last_updated: datetime) -> str:
    if last_updated.tzinfo is not None:
        last_updated = last_updated.replace(tzinfo=None) - last_updated.utcoffset()
    return f'"{(last_updated - EPOCH) // timedelta(microseconds=1)}"'


def list_etag(items: Iterable) -> str:
    """ETag of a non-empty collection of read DTOs."""
    return make_etag(max(item.last_updated for item in items))


def _normalize(tag: str) -> str:
    tag = tag.strip()
    return tag[2:] if tag.startswith("W/") else tag


def cache_headers(etag: str) -> dict:
    return {"ETag": etag, "Cache-Control": "private, no-cache"}


def maybe_304(request: Request, etag: str) -> Optional[Response]:
    """Return a 304 Not Modified response if If-None-Match carries ``etag``."""
    inm = request.headers.get("if-none-match")
    if inm and etag in (_normalize(t) for t in inm.split(",")):
        return Response(status_code=304, headers=cache_headers(etag))
    return None


def require_if_match(request: Request, current_etag: str) -> None:
    """Raise PreconditionFailedError unless If-Match carries the current ETag."""
    if_match = request.headers.get("if-match")
    if not if_match:
        raise PreconditionFailedError("If-Match header is required")
    if if_match.strip() == "*":
        return
    if current_etag not in (_normalize(t) for t in if_match.split(",")):
        raise PreconditionFailedError(
            "The resource was modified by another request",
            {"current_etag": current_etag},
        )
