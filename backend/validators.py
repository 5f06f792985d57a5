"""
Plan validation: prerequisite and semester-offering checks over a placement.
No Flask or data-loader imports.
"""

from typing import Dict, List, Optional

from models import BOTH, IN_PERSON, ONLINE, CourseChoiceGroup, index_courses
from prereq_parser import prereqs_satisfied
from semesters import SEMESTER_ORDER, parse_season
from unlocks import compute_tree_depths


def offering_violation(course, semester: str) -> Optional[str]:
    """
    Returns the violation message if `course` is not offered in the season of
    `semester` for its delivery mode, else None. Empty restriction lists mean
    the course runs every season.
    """
    season = parse_season(semester)
    in_person = list(course.semester_restrictions_in_person or ())
    online = list(course.semester_restrictions_online or ())

    if course.delivery_mode == IN_PERSON and in_person:
        if season not in in_person:
            return (
                f"{course.code}: Semester restriction violated "
                f"(In-Person only offered in {', '.join(in_person)})"
            )
    elif course.delivery_mode == ONLINE and online:
        if season not in online:
            return (
                f"{course.code}: Semester restriction violated "
                f"(Online only offered in {', '.join(online)})"
            )
    elif course.delivery_mode == BOTH:
        available_in_person = not in_person or season in in_person
        available_online = not online or season in online
        if not available_in_person and not available_online:
            return f"{course.code}: Semester restriction violated (not offered in {season})"
    return None


def get_violations(
    courses,
    placements,
    degrees=None,
    semester_order=SEMESTER_ORDER,
) -> List[str]:
    """
    Every constraint violation of the current plan, in semester order and then
    placement order within a semester.

    `degrees` is accepted so callers can pass the whole plan snapshot; no rule
    reads it yet.
    """
    courses_by_id = courses if isinstance(courses, dict) else index_courses(courses)
    violations: List[str] = []

    for semester, rank, course_id in placements.scheduled(semester_order):
        course = courses_by_id.get(course_id)
        if course is None:
            continue

        if course.prerequisites and not prereqs_satisfied(
            course.prerequisites, rank, placements, courses_by_id, semester_order
        ):
            violations.append(f"{course.code}: Prerequisites not satisfied")

        offering = offering_violation(course, semester)
        if offering:
            violations.append(offering)

    return violations


def find_prereq_cycles(courses) -> List[str]:
    """Codes of courses whose prerequisite chain loops back on itself."""
    courses_by_id = courses if isinstance(courses, dict) else index_courses(courses)
    depths = compute_tree_depths(courses_by_id)
    return [
        courses_by_id[cid].code
        for cid, result in depths.items()
        if result.cycle_detected
    ]


def find_dangling_references(courses, placements, degrees) -> Dict[str, List[str]]:
    """
    Ids that do not resolve. The engine skips these silently; this report lets
    the caller warn about them.

    Shape:
      {
        "placed_unknown_courses": ["42"],
        "unknown_prereq_courses": ["STAT 415 -> 99"],
        "unknown_assigned_degrees": ["STAT 415 -> 7"],
      }
    """
    courses_by_id = courses if isinstance(courses, dict) else index_courses(courses)
    degree_ids = {d.id for d in degrees or ()}

    placed_unknown: List[str] = []
    for key in placements.keys():
        for course_id in placements.semester(key):
            if course_id not in courses_by_id and course_id not in placed_unknown:
                placed_unknown.append(course_id)

    unknown_prereqs: List[str] = []
    unknown_degrees: List[str] = []
    for course in courses_by_id.values():
        for group in course.prerequisites:
            if not isinstance(group, CourseChoiceGroup):
                continue
            for prereq_id in group.courses:
                if prereq_id not in courses_by_id:
                    unknown_prereqs.append(f"{course.code} -> {prereq_id}")
        for degree_id in course.assigned_degrees:
            if degree_id not in degree_ids:
                unknown_degrees.append(f"{course.code} -> {degree_id}")

    return {
        "placed_unknown_courses": placed_unknown,
        "unknown_prereq_courses": unknown_prereqs,
        "unknown_assigned_degrees": unknown_degrees,
    }
