from typing import NamedTuple

from prereq_parser import prereq_course_ids


class DepthResult(NamedTuple):
    depth: int
    cycle_detected: bool


def compute_tree_depth(
    course_id: str,
    courses_by_id: dict,
    visited: frozenset | set | None = None,
) -> DepthResult:
    """
    Longest prerequisite chain ending at `course_id`, counting the course itself.

    STAT 300 (no prereqs)                → 1
    STAT 415 needs STAT 300              → 2
    STAT 506 needs STAT 415 or STAT 380  → 3

    Only course-choice groups contribute; pattern groups name no course.
    Prerequisite ids that are not in `courses_by_id` are dropped before
    recursing. `visited` holds the ancestors on the current path: meeting one
    again returns depth 0 with cycle_detected=True. Each branch gets its own
    copy so siblings never see each other's path.
    """
    ancestors = frozenset(visited or ())
    if course_id in ancestors:
        return DepthResult(0, True)
    ancestors = ancestors | {course_id}

    course = courses_by_id.get(course_id)
    if course is None or not course.prerequisites:
        return DepthResult(1, False)

    prereq_ids = [p for p in prereq_course_ids(course.prerequisites) if p in courses_by_id]
    if not prereq_ids:
        return DepthResult(1, False)

    children = [compute_tree_depth(p, courses_by_id, ancestors) for p in prereq_ids]
    return DepthResult(
        1 + max(child.depth for child in children),
        any(child.cycle_detected for child in children),
    )


def tree_depth(course_id: str, courses_by_id: dict) -> int:
    return compute_tree_depth(course_id, courses_by_id).depth


def compute_tree_depths(courses_by_id: dict) -> dict[str, DepthResult]:
    """Depth of every course, keyed by id."""
    return {cid: compute_tree_depth(cid, courses_by_id) for cid in courses_by_id}


def build_reverse_prereq_map(courses) -> dict[str, list[str]]:
    """
    For each course id, the ids of courses that list it in a course-choice group.

    Returns: {"3": ["1", "7"], ...}

    Only direct prerequisites (one level deep). No transitive graph traversal.
    """
    reverse: dict[str, list[str]] = {}
    for course in courses:
        for prereq_id in prereq_course_ids(course.prerequisites):
            reverse.setdefault(prereq_id, [])
            if course.id not in reverse[prereq_id]:
                reverse[prereq_id].append(course.id)
    return reverse


def get_direct_unlocks(
    course_id: str,
    reverse_map: dict[str, list[str]],
    limit: int | None = None,
) -> list[str]:
    """Courses that list `course_id` directly, up to `limit` when given."""
    dependents = reverse_map.get(course_id, [])
    if limit is None:
        return list(dependents)
    return dependents[:limit]
