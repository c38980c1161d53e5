import math
from typing import Iterable, Optional

ALL = "all"


def _value(row: dict, key: str):
    # "payment.status" reaches into nested records
    value = row
    for part in key.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _as_text(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def search_rows(rows: list, term: Optional[str], keys: Iterable[str]) -> list:
    keys = list(keys or [])
    term = (term or "").strip().lower()
    if not term or not keys:
        return list(rows)

    return [
        row for row in rows
        if any(term in _as_text(_value(row, key)).lower() for key in keys)
    ]


def filter_rows(rows: list, filters: Optional[dict]) -> list:
    active = {
        key: value for key, value in (filters or {}).items()
        if value not in (None, "", ALL)
    }

    return [
        row for row in rows
        if all(_as_text(_value(row, key)) == str(value) for key, value in active.items())
    ]


def paginate(items: list, page: int = 1, per_page: int = 10):
    per_page = max(int(per_page or 10), 1)
    total = len(items)

    total_pages = math.ceil(total / per_page) if total else 1
    page = min(max(int(page or 1), 1), total_pages)

    start = (page - 1) * per_page

    return {
        "items": items[start:start + per_page],
        "page": page,
        "per_page": per_page,
        "total": total,
        "total_pages": total_pages
    }


def build_table(
    rows: list,
    *,
    search: Optional[str] = None,
    search_keys: Iterable[str] = (),
    filters: Optional[dict] = None,
    page: int = 1,
    per_page: int = 10,
):
    """
    Filter, search, then paginate an in-memory list of records.

    Filters run first and compare the stringified field with the chosen
    value ("all" or empty disables a filter). Search keeps rows where any
    of `search_keys` contains the term, ignoring case. The returned dict is
    the page from `paginate` plus the active query, so templates can
    re-render the controls and build page links.
    """
    filtered = filter_rows(rows, filters)
    matched = search_rows(filtered, search, search_keys)

    table = paginate(matched, page, per_page)
    table["search"] = search or ""
    table["filters"] = {key: (value or ALL) for key, value in (filters or {}).items()}
    table["empty_message"] = "No data found."
    return table
