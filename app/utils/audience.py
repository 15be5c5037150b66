from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Union


class Audience:
    """Who a lesson schedule applies to: everyone, or an explicit set of students."""

    @staticmethod
    def from_ids(student_ids: Optional[Iterable[int]]) -> "Audience":
        # An empty selection means every student of the teacher, never nobody
        ids = frozenset(student_ids or ())
        if not ids:
            return EVERYONE
        return Students(ids)

    @property
    def is_everyone(self) -> bool:
        return isinstance(self, Everyone)

    def student_ids(self) -> FrozenSet[int]:
        return frozenset()


@dataclass(frozen=True)
class Everyone(Audience):
    pass


@dataclass(frozen=True)
class Students(Audience):
    ids: FrozenSet[int]

    def __post_init__(self):
        if not self.ids:
            raise ValueError("Students audience requires at least one student id; use EVERYONE instead.")

    def student_ids(self) -> FrozenSet[int]:
        return self.ids


EVERYONE = Everyone()


class AudienceResolver:
    @staticmethod
    def audience_of(schedule) -> Audience:
        audience = getattr(schedule, "audience", None)
        if isinstance(audience, Audience):
            return audience
        return Audience.from_ids(student.id for student in (getattr(schedule, "students", None) or []))

    @staticmethod
    def belongs_to_teacher(student, teacher_id: int) -> bool:
        return bool(student.is_active) and student.teacher_id == teacher_id

    @staticmethod
    def is_assigned_to(target: Union[Audience, object], student, teacher_id: int) -> bool:
        """Decide whether `student` is in the audience of a schedule (or a bare Audience).

        `teacher_id` is the owner of the scheduled lesson; the everyone audience
        only covers that teacher's active students.
        """
        audience = target if isinstance(target, Audience) else AudienceResolver.audience_of(target)
        if audience.is_everyone:
            return AudienceResolver.belongs_to_teacher(student, teacher_id)
        return student.id in audience.student_ids()
