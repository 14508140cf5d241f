"""Helpers for reading complete result sets through repository DAOs."""

PAGE_SIZE = 500


def fetch_all(queryset, page_size=PAGE_SIZE):
    """Return every record matched by ``queryset``.

    DAO querysets apply a default limit, so tenant-wide reads (all orders of a
    store, all products of a store) page through the results explicitly.
    """
    records = []
    offset = 0
    while True:
        page = queryset.offset(offset).limit(page_size).all()
        records.extend(page.items)
        if len(page.items) < page_size:
            return records
        offset += page_size
