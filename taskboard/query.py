"""Разбор параметров списочных запросов: фильтры, сортировка, пагинация."""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

logger = logging.getLogger(__name__)

RESERVED_PARAMS = ("page", "sort", "limit", "fields")
DEFAULT_SORT = "-createdAt"
DEFAULT_PAGE = 1
MAX_PAGE_SIZE = 100
# OFFSET должен помещаться в 64-битное целое SQLite
MAX_PAGE = 10 ** 9

OPERATOR_PREFIX = "$"
PATH_SEPARATOR = "."


def is_unsafe_key(key) -> bool:
    return isinstance(key, str) and (key.startswith(OPERATOR_PREFIX) or PATH_SEPARATOR in key)


def sanitize(value):
    """Возвращает копию value без ключей-операторов ("$..." и "a.b") на любой глубине"""
    if isinstance(value, Mapping):
        return {
            key: sanitize(item)
            for key, item in value.items()
            if not is_unsafe_key(key)
        }
    if isinstance(value, (list, tuple)):
        return [sanitize(item) for item in value]
    return value


def parse_sort(raw) -> List[Tuple[str, bool]]:
    """Разбирает "priority,-createdAt" в [("priority", False), ("createdAt", True)]"""
    if not raw or not isinstance(raw, str):
        raw = DEFAULT_SORT

    order = []
    for part in raw.split(","):
        part = part.strip()
        descending = part.startswith("-")
        name = part.lstrip("-").strip()
        if name:
            order.append((name, descending))
    return order or parse_sort(DEFAULT_SORT)


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


@dataclass
class ListQuery:
    filters: Dict[str, Any] = field(default_factory=dict)
    sort: List[Tuple[str, bool]] = field(default_factory=lambda: parse_sort(DEFAULT_SORT))
    page: int = DEFAULT_PAGE
    limit: int = 10

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def build_list_query(
        params: Mapping[str, Any],
        default_limit: int = 10,
        max_limit: int = MAX_PAGE_SIZE,
) -> ListQuery:
    params = sanitize(dict(params))

    filters = {}
    for key, value in params.items():
        if key in RESERVED_PARAMS:
            continue
        # Только равенство со скалярным значением
        if isinstance(value, (dict, list)):
            logger.debug("Dropping non-scalar filter %r", key)
            continue
        filters[key] = value

    return ListQuery(
        filters=filters,
        sort=parse_sort(params.get("sort")),
        page=min(_positive_int(params.get("page"), DEFAULT_PAGE), MAX_PAGE),
        limit=min(_positive_int(params.get("limit"), default_limit), max_limit),
    )


def page_summary(query: ListQuery, returned: int, total: int, total_key: str = "totalMatches") -> Dict[str, int]:
    return {
        "count": returned,
        "page": query.page,
        "totalPages": math.ceil(total / query.limit),
        total_key: total,
    }
