"""
Helper functions for common infrastructure operations.

- Token generation (cryptographic)
- Pagination metadata and queryset slicing for page/limit listings

Usage:
    from core.helpers import generate_token, paginate_queryset

    token = generate_token(32)
    items, meta = paginate_queryset(Review.objects.all(), page=2, limit=10)
"""

from __future__ import annotations

import math
import secrets


def generate_token(length: int = 32) -> str:
    """
    Generate a cryptographically secure random token.

    Args:
        length: Number of bytes (resulting string is 2x length in hex)

    Example:
        token = generate_token(32)  # Returns 64-character hex string
    """
    return secrets.token_hex(length)


def calculate_pagination(total: int, page: int, per_page: int) -> dict:
    """
    Calculate pagination metadata.

    Example:
        calculate_pagination(total=45, page=2, per_page=20)
        # {"total": 45, "page": 2, "per_page": 20, "total_pages": 3,
        #  "offset": 20, "has_next": True, "has_previous": True}
    """
    total_pages = math.ceil(total / per_page) if per_page > 0 else 0

    return {
        "total": total,
        "page": page,
        "per_page": per_page,
        "total_pages": total_pages,
        "offset": (page - 1) * per_page,
        "has_next": page < total_pages,
        "has_previous": page > 1,
    }


def paginate_queryset(queryset, page: int, limit: int) -> tuple[list, dict]:
    """
    Slice a queryset for page/limit listings.

    Returns:
        Tuple of (items, pagination metadata)
    """
    meta = calculate_pagination(queryset.count(), page, limit)
    offset = meta["offset"]
    return list(queryset[offset:offset + limit]), meta
