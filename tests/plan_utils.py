"""Builders for small in-memory plans used across the engine tests."""

from models import Course, CourseChoiceGroup, Degree, PatternGroup, index_courses
from placements import Placements


def make_course(course_id, code, credits=3, level="Undergraduate", prereqs=(), **kwargs) -> Course:
    return Course(
        id=course_id,
        code=code,
        title=kwargs.pop("title", f"{code} title"),
        credits=credits,
        level=level,
        prerequisites=tuple(prereqs),
        **kwargs,
    )


def one_of(*ids) -> CourseChoiceGroup:
    return CourseChoiceGroup(tuple(ids))


def pattern(count, level=None, department=None) -> PatternGroup:
    return PatternGroup(count=count, level=level, department=department)


def make_placements(**by_semester) -> Placements:
    """
    make_placements(fall_2025=["1"], spring_2026=["2"], pool=["3"])
    """
    raw = {}
    for key, ids in by_semester.items():
        label = "pool" if key == "pool" else key.replace("_", " ").title()
        raw[label] = list(ids)
    return Placements.from_dict(raw)


def make_degree(degree_id, name="Bachelor of Science", type="Bachelor", required_credits=120) -> Degree:
    return Degree(id=degree_id, name=name, type=type, required_credits=required_credits)


def by_id(*courses) -> dict:
    return index_courses(courses)


def course_json(course_id, code, credits=3, level="Undergraduate", groups=None, **overrides) -> dict:
    """Desktop-app JSON record for one course."""
    record = {
        "id": course_id,
        "code": code,
        "title": f"{code} title",
        "credits": credits,
        "level": level,
        "description": "",
        "deliveryMode": "In-Person",
        "semesterRestrictionsInPerson": [],
        "semesterRestrictionsOnline": [],
        "assignedDegrees": [],
        "prerequisites": {"type": "and", "groups": groups or []},
    }
    record.update(overrides)
    return record


def empty_placements_json() -> dict:
    return {"Fall 2025": [], "Spring 2026": [], "Fall 2026": [], "Spring 2027": [], "pool": []}
