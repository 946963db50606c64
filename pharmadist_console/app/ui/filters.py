from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FilterKind(str, Enum):
    SELECT = "select"
    DATE = "date"


@dataclass(frozen=True)
class FilterOption:
    value: Any
    label: str


@dataclass(frozen=True)
class FilterDefinition:
    label: str
    key: str
    options: tuple[FilterOption, ...] = ()
    on_change_hook: Callable[[Any], None] | None = None
    kind: FilterKind = FilterKind.SELECT
    placeholder: str | None = None

    def option_label(self, value: Any) -> str | None:
        for option in self.options:
            if option.value == value:
                return option.label
        return None


@dataclass(frozen=True)
class FilterPanel:
    filters: tuple[FilterDefinition, ...] = field(default_factory=tuple)
    heading: str = "Filters"

    def get(self, key: str) -> FilterDefinition | None:
        return next((item for item in self.filters if item.key == key), None)


def options(*pairs: tuple[Any, str]) -> tuple[FilterOption, ...]:
    return tuple(FilterOption(value=value, label=label) for value, label in pairs)


def status_filter(values: Sequence[str] = ("Active", "Inactive")) -> FilterDefinition:
    return FilterDefinition(
        label="Status",
        key="status",
        options=options(*((value, value) for value in values)),
        placeholder="Select Status",
    )
