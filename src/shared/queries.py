"""Repository query helpers.

Protean caps every query at a default page size, so reading "everything"
means walking the pages until the result set is exhausted.
"""

PAGE_SIZE = 100


def fetch_all(query, page_size: int = PAGE_SIZE) -> list:
    """Every record matched by ``query``, in the query's own order.

    Give the query a deterministic ``order_by`` so pages do not overlap.
    """
    records = []
    offset = 0
    while True:
        page = query.offset(offset).limit(page_size).all()
        records.extend(page.items)
        offset += page_size
        if not page.items or offset >= page.total:
            return records


def fetch_first(query):
    """The first record of ``query``, or ``None``."""
    return query.limit(1).all().first
