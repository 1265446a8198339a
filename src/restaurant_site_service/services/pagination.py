"""Page arithmetic and the compact pagination range used by listing pagers."""

import math

from restaurant_site_service.models.listing_models import PaginationRangeItem

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 50
ELLIPSIS = "ellipsis"

# Below this many pages every page number is listed.
FULL_RANGE_LIMIT = 6


def parse_positive_int(raw: str | None) -> int | None:
    """Leniently parse a query parameter as a positive integer.

    Fractional values are truncated. Anything non-numeric, non-finite or
    below 1 yields None so the caller can apply its default.

    Args:
        raw: Raw query string value

    Returns:
        Parsed integer or None
    """
    if raw is None:
        return None

    try:
        value = float(raw.strip())
    except ValueError:
        return None

    if not math.isfinite(value):
        return None

    parsed = int(value)
    return parsed if parsed >= 1 else None


def clamp_page_size(page_size: int | None, default: int) -> int:
    """Clamp a requested page size into [1, 50].

    Args:
        page_size: Requested page size, or None when absent
        default: Listing-specific default

    Returns:
        Page size actually used
    """
    size = default if page_size is None else page_size
    return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, size))


def count_pages(total: int, page_size: int) -> int:
    """Total pages for a result set, never less than 1."""
    return max(1, math.ceil(total / page_size))


def clamp_page(page: int | None, total_pages: int) -> int:
    """Clamp a requested page into [1, total_pages], defaulting to 1."""
    if page is None:
        return 1
    return max(1, min(page, total_pages))


def build_pagination_range(
    current_page: int, total_pages: int, sibling_count: int = 1
) -> list[PaginationRangeItem]:
    """Build a condensed list of page numbers with ellipsis markers.

    The first and last pages are always present. Around the current page a
    window of sibling pages is shown, pinned against the edges so it never
    runs into the first or last page. An ellipsis replaces every run of
    omitted pages.

    Args:
        current_page: Page being displayed
        total_pages: Total number of pages
        sibling_count: Pages to show on each side of the current page

    Returns:
        list: Page numbers and "ellipsis" markers, with no repeated page

    Example:
        >>> build_pagination_range(1, 10)
        [1, 2, 3, 'ellipsis', 10]
    """
    if total_pages <= 0:
        return [1]

    if total_pages <= FULL_RANGE_LIMIT:
        return list(range(1, total_pages + 1))

    last_inner = total_pages - 1
    edge_width = 2 * sibling_count

    if current_page <= 1 + edge_width:
        left, right = 2, min(last_inner, 1 + edge_width)
    elif current_page >= total_pages - edge_width:
        left, right = max(2, total_pages - edge_width), last_inner
    else:
        left, right = current_page - sibling_count, current_page + sibling_count

    pages: list[PaginationRangeItem] = [1]

    if left > 2:
        pages.append(ELLIPSIS)

    pages.extend(range(left, right + 1))

    if right < last_inner:
        pages.append(ELLIPSIS)

    pages.append(total_pages)

    return pages
