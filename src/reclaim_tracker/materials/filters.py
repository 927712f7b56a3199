from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any, Literal

from pydantic import BaseModel

logger = logging.getLogger(__name__)

FilterGroup = Literal["categories", "material_types", "conditions"]

SEARCH_FIELDS = ("name", "category", "materialType", "condition")

# Filter group -> record field, in the order the groups narrow the result.
GROUP_FIELDS: dict[str, str] = {
    "categories": "category",
    "material_types": "materialType",
    "conditions": "condition",
}

_SNAKE_NAMES = {"materialType": "material_type"}


@dataclass(frozen=True)
class FilterState:
    categories: tuple[str, ...] = ()
    material_types: tuple[str, ...] = ()
    conditions: tuple[str, ...] = ()
    query: str = ""

    def selected(self, group: FilterGroup) -> tuple[str, ...]:
        return getattr(self, group)

    def toggle(self, group: FilterGroup, value: str) -> FilterState:
        current = list(self.selected(group))
        if value in current:
            current.remove(value)
        else:
            current.append(value)
        return replace(self, **{group: tuple(current)})

    def with_selection(self, group: FilterGroup, values: Iterable[str]) -> FilterState:
        return replace(self, **{group: tuple(dict.fromkeys(values))})

    def cleared(self) -> FilterState:
        return FilterState(query=self.query)

    def active_chips(self) -> list[tuple[FilterGroup, str]]:
        chips: list[tuple[FilterGroup, str]] = []
        for group in GROUP_FIELDS:
            chips.extend((group, value) for value in self.selected(group))  # type: ignore[arg-type]
        return chips


@dataclass
class FilterResult:
    records: list[Any] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MalformedRecordsError(TypeError):
    pass


def field_value(record: Any, name: str) -> Any:
    """Read a wire-named field from a model or a camelCase/snake_case mapping."""
    if isinstance(record, BaseModel):
        snake = _SNAKE_NAMES.get(name, name)
        if snake in type(record).model_fields:
            return getattr(record, snake)
        return (record.model_extra or {}).get(name)
    if isinstance(record, Mapping):
        if name in record:
            return record[name]
        return record.get(_SNAKE_NAMES.get(name, name))
    raise MalformedRecordsError(f"Unsupported record type: {type(record).__name__}")


def _ensure_records(records: Any) -> Sequence[Any]:
    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Sequence):
        raise MalformedRecordsError(f"Expected a list of records, got {type(records).__name__}")
    for record in records:
        if not isinstance(record, (BaseModel, Mapping)):
            raise MalformedRecordsError(f"Unsupported record type: {type(record).__name__}")
    return records


def search(records: Sequence[Any], query: str | None) -> list[Any]:
    """Case-insensitive substring match on name, category, type and condition."""
    needle = (query or "").strip().lower()
    if not needle:
        return list(records)
    matches = []
    for record in records:
        for name in SEARCH_FIELDS:
            value = field_value(record, name)
            if value is not None and needle in str(value).lower():
                matches.append(record)
                break
    return matches


def _narrow(records: Sequence[Any], field_name: str, selected: Sequence[str]) -> list[Any]:
    if not selected:
        return list(records)
    allowed = set(selected)
    narrowed = []
    for record in records:
        value = field_value(record, field_name)
        if isinstance(value, str) and value in allowed:
            narrowed.append(record)
    return narrowed


def apply_filters(records: Sequence[Any], filters: FilterState) -> list[Any]:
    narrowed = list(records)
    for group, field_name in GROUP_FIELDS.items():
        narrowed = _narrow(narrowed, field_name, getattr(filters, group))
    return narrowed


def filter_materials(records: Any, filters: FilterState) -> FilterResult:
    """Run search, then category, type and condition narrowing.

    Malformed input never raises; it yields an empty result carrying an error
    message for the view to display.
    """
    try:
        checked = _ensure_records(records)
        return FilterResult(records=apply_filters(search(checked, filters.query), filters))
    except MalformedRecordsError as exc:
        logger.warning("Cannot filter materials: %s", exc)
        return FilterResult(records=[], error="Materials could not be displayed: unexpected data format.")


def facet_counts(records: Sequence[Any]) -> dict[str, Counter[str]]:
    counts: dict[str, Counter[str]] = {group: Counter() for group in GROUP_FIELDS}
    for record in records:
        for group, field_name in GROUP_FIELDS.items():
            value = field_value(record, field_name)
            if value:
                counts[group][str(value)] += 1
    return counts


__all__ = [
    "FilterGroup",
    "FilterResult",
    "FilterState",
    "MalformedRecordsError",
    "apply_filters",
    "facet_counts",
    "field_value",
    "filter_materials",
    "search",
]
