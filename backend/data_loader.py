import json
import sys

from models import DEGREE_TYPES, DELIVERY_MODES, IN_PERSON, LEVELS, UNDERGRADUATE, Course, Degree, index_courses
from placements import Placements
from prereq_parser import parse_prereq_groups
from validators import find_dangling_references


def _safe_int(val, field_name: str, default: int = 0) -> int:
    if val is None or val == "":
        return default
    if isinstance(val, bool):
        raise ValueError(f"{field_name} must be an integer, got {val!r}.")
    if isinstance(val, float):
        if not val.is_integer():
            raise ValueError(f"{field_name} must be an integer, got {val!r}.")
        return int(val)
    try:
        return int(str(val).strip())
    except ValueError:
        raise ValueError(f"{field_name} must be an integer, got {val!r}.")


def _str_list(val, field_name: str) -> tuple[str, ...]:
    if val is None:
        return ()
    if not isinstance(val, list):
        raise ValueError(f"{field_name} must be a list.")
    return tuple(str(v).strip() for v in val if str(v).strip())


def course_from_dict(raw: dict) -> Course:
    """Build a Course from its desktop-app JSON record (camelCase keys)."""
    if not isinstance(raw, dict):
        raise ValueError(f"Course must be an object, got {raw!r}.")
    course_id = str(raw.get("id") or "").strip()
    if not course_id:
        raise ValueError("Every course needs an 'id'.")
    return Course(
        id=course_id,
        code=str(raw.get("code") or "").strip(),
        title=str(raw.get("title") or "").strip(),
        credits=_safe_int(raw.get("credits"), f"credits of course {course_id}"),
        level=str(raw.get("level") or UNDERGRADUATE).strip(),
        description=str(raw.get("description") or ""),
        delivery_mode=str(raw.get("deliveryMode") or IN_PERSON).strip(),
        semester_restrictions_in_person=_str_list(
            raw.get("semesterRestrictionsInPerson"), "semesterRestrictionsInPerson"
        ),
        semester_restrictions_online=_str_list(
            raw.get("semesterRestrictionsOnline"), "semesterRestrictionsOnline"
        ),
        assigned_degrees=_str_list(raw.get("assignedDegrees"), "assignedDegrees"),
        prerequisites=parse_prereq_groups(raw.get("prerequisites")),
    )


def degree_from_dict(raw: dict) -> Degree:
    if not isinstance(raw, dict):
        raise ValueError(f"Degree must be an object, got {raw!r}.")
    degree_id = str(raw.get("id") or "").strip()
    if not degree_id:
        raise ValueError("Every degree needs an 'id'.")
    return Degree(
        id=degree_id,
        name=str(raw.get("name") or "").strip(),
        type=str(raw.get("type") or "Bachelor").strip(),
        required_credits=_safe_int(raw.get("requiredCredits"), f"requiredCredits of degree {degree_id}"),
    )


def load_plan(payload: dict, warn: bool = True) -> dict:
    """
    Parse a plan document {courses, placements, degrees, ...} into engine
    objects. Raises ValueError on structurally invalid input.

    `notes`, `exportDate` and `version` are carried through untouched.
    """
    if not isinstance(payload, dict):
        raise ValueError("Plan must be a JSON object.")
    raw_courses = payload.get("courses")
    if not isinstance(raw_courses, list):
        raise ValueError("Plan needs a 'courses' list.")
    raw_degrees = payload.get("degrees") or []
    if not isinstance(raw_degrees, list):
        raise ValueError("'degrees' must be a list.")

    courses = [course_from_dict(c) for c in raw_courses]
    degrees = [degree_from_dict(d) for d in raw_degrees]
    placements = Placements.from_dict(payload.get("placements"))
    courses_by_id = index_courses(courses)

    # ── Data integrity checks ──────────────────────────────────────────────
    if warn:
        dangling = find_dangling_references(courses_by_id, placements, degrees)
        if dangling["placed_unknown_courses"]:
            print(
                f"[WARN] {len(dangling['placed_unknown_courses'])} placed course id(s) not found in courses: "
                f"{dangling['placed_unknown_courses']}",
                file=sys.stderr,
            )
        if dangling["unknown_prereq_courses"]:
            print(
                f"[WARN] {len(dangling['unknown_prereq_courses'])} prerequisite reference(s) do not resolve: "
                f"{dangling['unknown_prereq_courses']}",
                file=sys.stderr,
            )
        if dangling["unknown_assigned_degrees"]:
            print(
                f"[WARN] {len(dangling['unknown_assigned_degrees'])} degree assignment(s) do not resolve: "
                f"{dangling['unknown_assigned_degrees']}",
                file=sys.stderr,
            )

        odd_values = [
            f"{c.code}: {field}={value!r}"
            for c in courses
            for field, value, allowed in (("level", c.level, LEVELS), ("deliveryMode", c.delivery_mode, DELIVERY_MODES))
            if value not in allowed
        ]
        odd_values += [f"{d.name or d.id}: type={d.type!r}" for d in degrees if d.type not in DEGREE_TYPES]
        if odd_values:
            print(f"[WARN] {len(odd_values)} unrecognized enum value(s): {odd_values}", file=sys.stderr)

    return {
        "courses": courses,
        "courses_by_id": courses_by_id,
        "placements": placements,
        "degrees": degrees,
        "notes": payload.get("notes") or "",
    }


def load_plan_file(path: str) -> dict:
    """Read an exported plan document from disk. Raises on file/schema errors."""
    with open(path, encoding="utf-8") as fh:
        payload = json.load(fh)
    plan = load_plan(payload)
    print(f"[INFO] Loaded {len(plan['courses'])} courses and {len(plan['degrees'])} degrees from {path}", file=sys.stderr)
    return plan
