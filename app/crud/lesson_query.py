"""Typed lesson list queries.

Callers describe what they want with these filter and sort values; only the
lesson repository turns them into SQL, so no raw field names reach the store.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union

from app.core.constants import LessonSortEnum, RecordStatusEnum, SortOrderEnum


@dataclass(frozen=True)
class TitleContains:
    text: str

@dataclass(frozen=True)
class StatusIn:
    statuses: FrozenSet[RecordStatusEnum]

@dataclass(frozen=True)
class SchoolYearEquals:
    school_year_id: int

LessonFilter = Union[TitleContains, StatusIn, SchoolYearEquals]


@dataclass(frozen=True)
class LessonOrdering:
    sort_by: LessonSortEnum = LessonSortEnum.ORDER_NUMBER
    order: SortOrderEnum = SortOrderEnum.ASC

    @classmethod
    def parse(cls, value: Optional[str]) -> "LessonOrdering":
        """Read `"<field>,<asc|desc>"` as sent by list endpoints; unknown fields raise ValueError."""
        if not value or not value.strip():
            return cls()
        sort_by, _, order = value.partition(",")
        return cls(
            sort_by=LessonSortEnum(sort_by.strip()),
            order=SortOrderEnum((order.strip() or SortOrderEnum.ASC.value).lower()),
        )


@dataclass
class LessonQuery:
    filters: List[LessonFilter] = field(default_factory=list)
    ordering: LessonOrdering = field(default_factory=LessonOrdering)
    skip: int = 0
    limit: Optional[int] = None

    def title_contains(self, text: Optional[str]) -> "LessonQuery":
        if text and text.strip():
            self.filters.append(TitleContains(text.strip()))
        return self

    def status_in(self, statuses: Optional[Iterable[RecordStatusEnum]]) -> "LessonQuery":
        statuses = frozenset(statuses or ())
        if statuses:
            self.filters.append(StatusIn(statuses))
        return self

    def school_year(self, school_year_id: Optional[int]) -> "LessonQuery":
        if school_year_id is not None:
            self.filters.append(SchoolYearEquals(school_year_id))
        return self

    def order_by(self, ordering: LessonOrdering) -> "LessonQuery":
        self.ordering = ordering
        return self

    def page(self, skip: int = 0, limit: Optional[int] = None) -> "LessonQuery":
        self.skip = skip
        self.limit = limit
        return self


def parse_statuses(value: Optional[str]) -> Tuple[RecordStatusEnum, ...]:
    """Read a comma separated status list such as `"draft,published"`."""
    if not value or not value.strip():
        return ()
    return tuple(RecordStatusEnum(part.strip()) for part in value.split(",") if part.strip())
