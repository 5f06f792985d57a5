"""
In-memory shapes for the planner engine.

JSON documents use the desktop app's camelCase names; the dataclasses here use
snake_case and are built by data_loader.py. Everything is frozen so a plan
snapshot can be shared between requests without copying.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

UNDERGRADUATE = "Undergraduate"
GRADUATE = "Graduate"
LEVELS = (UNDERGRADUATE, GRADUATE)

IN_PERSON = "In-Person"
ONLINE = "Online"
BOTH = "Both"
DELIVERY_MODES = (IN_PERSON, ONLINE, BOTH)

DEGREE_TYPES = ("Bachelor", "Master", "Doctorate")


@dataclass(frozen=True)
class CourseChoiceGroup:
    """OR over explicit course ids: one of them scheduled earlier is enough."""

    courses: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"type": "course", "courses": list(self.courses)}


@dataclass(frozen=True)
class PatternGroup:
    """At least `count` earlier courses whose code matches department/level."""

    count: int
    level: str | None = None
    department: str | None = None

    def to_dict(self) -> dict:
        return {
            "type": "pattern",
            "count": self.count,
            "level": self.level or "",
            "department": self.department or "",
        }


@dataclass(frozen=True)
class Course:
    id: str
    code: str
    title: str = ""
    credits: int = 0
    level: str = UNDERGRADUATE
    description: str = ""
    delivery_mode: str = IN_PERSON
    semester_restrictions_in_person: tuple[str, ...] = ()
    semester_restrictions_online: tuple[str, ...] = ()
    assigned_degrees: tuple[str, ...] = ()
    prerequisites: tuple = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "title": self.title,
            "credits": self.credits,
            "level": self.level,
            "description": self.description,
            "deliveryMode": self.delivery_mode,
            "semesterRestrictionsInPerson": list(self.semester_restrictions_in_person),
            "semesterRestrictionsOnline": list(self.semester_restrictions_online),
            "assignedDegrees": list(self.assigned_degrees),
            "prerequisites": {
                "type": "and",
                "groups": [g.to_dict() for g in self.prerequisites],
            },
        }


@dataclass(frozen=True)
class Degree:
    id: str
    name: str
    type: str = "Bachelor"
    required_credits: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "requiredCredits": self.required_credits,
        }


def index_courses(courses) -> dict[str, Course]:
    """id → Course. On duplicate ids the first course wins."""
    out: dict[str, Course] = {}
    for course in courses:
        out.setdefault(course.id, course)
    return out


def remove_degree_assignments(courses, degree_id: str) -> list[Course]:
    """Strip `degree_id` from every course's assigned degrees."""
    out: list[Course] = []
    for course in courses:
        if degree_id in course.assigned_degrees:
            kept = tuple(d for d in course.assigned_degrees if d != degree_id)
            course = replace(course, assigned_degrees=kept)
        out.append(course)
    return out
