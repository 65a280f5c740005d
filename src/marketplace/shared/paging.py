"""Walk a Protean query page by page instead of stopping at the default limit."""

PAGE_SIZE = 100


def every(query, page_size=PAGE_SIZE):
    """Yield every record matched by `query`, fetching `page_size` at a time."""
    offset = 0
    while True:
        page = query.offset(offset).limit(page_size).all()
        yield from page.items
        if not page.has_next:
            return
        offset += page_size
