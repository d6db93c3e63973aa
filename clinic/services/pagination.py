import math


def paginate(qs, page: int, limit: int):
    """Slice ``qs`` and return ``(rows, pagination)`` for the response envelope."""
    total = qs.count()
    offset = (page - 1) * limit
    rows = list(qs[offset:offset + limit])
    return rows, {
        'currentPage': page,
        'totalPages': math.ceil(total / limit) if total else 0,
        'totalItems': total,
        'itemsPerPage': limit,
    }
