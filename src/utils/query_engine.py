"""
Generic list query used by every listing endpoint.

Raw query parameters (``request.query_params.multi_items()``) are parsed once
into ``FilterExpr`` values and a Mongo filter, then combined with text search,
projection, sort and pagination:

    GET /courses?price[gte]=10&price[lte]=50&sort=-rating,title&page=2&limit=10
    GET /courses?search=python&select=title,price

``search`` replaces the field filters (it is not ANDed with them). A
``base_filter`` supplied by the caller is always applied, so server-side
constraints such as ``isDeleted: false`` cannot be bypassed from the URL.
"""
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pymongo.errors import PyMongoError

from src.config import settings

RESERVED_PARAMS = frozenset({"select", "sort", "page", "limit", "search"})
OPERATORS = frozenset({"eq", "gt", "gte", "lt", "lte", "in"})

# collection -> fields searched by ?search=
SEARCH_FIELDS: Dict[str, Tuple[str, ...]] = {
    "courses": ("title", "shortDescription", "longDescription", "instructor", "category"),
    "users": ("fullName", "email"),
    "events": ("title", "description", "speaker"),
}

DEFAULT_SORT: Tuple[Tuple[str, int], ...] = (("createdAt", -1),)

MAX_PAGE_LIMIT = 100
# skip is a BSON int64 at the driver
MAX_SKIP = 2 ** 63 - 1

_KEY_WITH_OP = re.compile(r"^(?P<field>[A-Za-z_][\w.]*)\[(?P<op>\w+)\]$")
_INT = re.compile(r"^-?\d+$")
_FLOAT = re.compile(r"^-?\d+\.\d+$")

RawParams = Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]


@dataclass(frozen=True)
class FilterExpr:
    field: str
    op: str
    value: Any

    def to_mongo(self) -> Dict[str, Any]:
        if self.op == "eq":
            return {self.field: self.value}
        if self.op in OPERATORS:
            return {self.field: {f"${self.op}": self.value}}
        # unknown operator: literal embedded-document equality, matches nothing
        return {self.field: {self.op: self.value}}


def coerce_value(raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw
    lowered = raw.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if _INT.match(raw):
        return int(raw)
    if _FLOAT.match(raw):
        return float(raw)
    return raw


def _items(params: RawParams) -> List[Tuple[str, Any]]:
    if isinstance(params, Mapping):
        out: List[Tuple[str, Any]] = []
        for k, v in params.items():
            if isinstance(v, (list, tuple)):
                out.extend((k, x) for x in v)
            else:
                out.append((k, v))
        return out
    return list(params)


def parse_filters(params: RawParams) -> List[FilterExpr]:
    """Convierte los parámetros crudos (sin los reservados) en expresiones de filtro."""
    grouped: Dict[Tuple[str, str], List[Any]] = {}
    for key, raw in _items(params):
        if key in RESERVED_PARAMS or key.startswith("$"):
            continue
        m = _KEY_WITH_OP.match(key)
        fname, op = (m.group("field"), m.group("op")) if m else (key, "eq")
        values = grouped.setdefault((fname, op), [])
        if op == "in" and isinstance(raw, str):
            values.extend(coerce_value(v.strip()) for v in raw.split(",") if v.strip())
        else:
            values.append(coerce_value(raw))

    exprs: List[FilterExpr] = []
    for (fname, op), values in grouped.items():
        if op == "in":
            exprs.append(FilterExpr(fname, "in", values))
        elif op == "eq" and len(values) > 1:
            exprs.append(FilterExpr(fname, "in", values))
        else:
            exprs.append(FilterExpr(fname, op, values[-1]))
    return exprs


def build_filter(exprs: Sequence[FilterExpr]) -> Dict[str, Any]:
    """Une las expresiones; varios operadores sobre el mismo campo se combinan."""
    query: Dict[str, Any] = {}
    for expr in exprs:
        for fname, cond in expr.to_mongo().items():
            current = query.get(fname)
            if isinstance(current, dict) and isinstance(cond, dict):
                query[fname] = {**current, **cond}
            elif fname in query:
                query.setdefault("$and", []).append({fname: cond})
            else:
                query[fname] = cond
    return query


def build_search(term: str, fields: Sequence[str]) -> Dict[str, Any]:
    pattern = re.escape(term)
    return {"$or": [{f: {"$regex": pattern, "$options": "i"}} for f in fields]}


def parse_sort(raw: Optional[str], default: Sequence[Tuple[str, int]] = DEFAULT_SORT) -> List[Tuple[str, int]]:
    if not raw:
        return list(default)
    order: List[Tuple[str, int]] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if part.startswith("-"):
            order.append((part[1:], -1))
        else:
            order.append((part.lstrip("+"), 1))
    return order or list(default)


def parse_projection(raw: Optional[str]) -> Optional[Dict[str, int]]:
    if not raw:
        return None
    fields = [f.strip() for f in raw.split(",") if f.strip()]
    return {f: 1 for f in fields} or None


def parse_positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


@dataclass
class QueryResult:
    items: List[Dict[str, Any]]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def pagination(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.has_next:
            out["next"] = {"page": self.page + 1, "limit": self.limit}
        if self.has_prev:
            out["previous"] = {"page": self.page - 1, "limit": self.limit}
        return out

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "count": len(self.items),
            "total": self.total,
            "pagination": self.pagination(),
            "data": self.items,
        }

    def to_page_response(self) -> Dict[str, Any]:
        """Formato de los listados del panel de admin."""
        return {
            "success": True,
            "count": len(self.items),
            "total": self.total,
            "page": self.page,
            "totalPages": self.total_pages,
            "data": self.items,
        }


def _get(params: RawParams, key: str) -> Optional[str]:
    value = None
    for k, v in _items(params):
        if k == key:
            value = v
    return value


def run_query(
    repo,
    params: RawParams,
    *,
    base_filter: Optional[Dict[str, Any]] = None,
    search_fields: Optional[Sequence[str]] = None,
    default_sort: Sequence[Tuple[str, int]] = DEFAULT_SORT,
    default_limit: Optional[int] = None,
    populate: Optional[Callable[[List[Dict[str, Any]]], List[Dict[str, Any]]]] = None,
) -> QueryResult:
    """
    Ejecuta un listado filtrado/buscado/ordenado/paginado sobre ``repo``
    (un MongoRepository). Sin efectos secundarios.
    """
    if search_fields is None:
        search_fields = SEARCH_FIELDS.get(repo.collection_name)

    term = _get(params, "search")
    if term and search_fields:
        user_query = build_search(str(term), search_fields)
    else:
        user_query = build_filter(parse_filters(params))

    if base_filter and user_query:
        query = {"$and": [base_filter, user_query]}
    else:
        query = dict(base_filter or user_query)

    limit = min(parse_positive_int(_get(params, "limit"), default_limit or settings.DEFAULT_PAGE_LIMIT), MAX_PAGE_LIMIT)
    page = min(parse_positive_int(_get(params, "page"), 1), MAX_SKIP // limit + 1)
    sort = parse_sort(_get(params, "sort"), default_sort)
    projection = parse_projection(_get(params, "select"))

    try:
        total = repo.count(query)
        items = repo.find(query, projection, sort=sort, skip=(page - 1) * limit, limit=limit)
    except (PyMongoError, OverflowError) as e:
        logging.warning(f"[query.{repo.collection_name}] filtro inválido {query!r}: {e}")
        return QueryResult(items=[], page=page, limit=limit, total=0)

    if populate:
        items = populate(items)
    return QueryResult(items=items, page=page, limit=limit, total=total)
