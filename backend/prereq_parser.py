from models import CourseChoiceGroup, PatternGroup
from normalizer import normalize_filter, parse_course_code
from semesters import POOL, SEMESTER_ORDER, semester_rank


def _parse_count(raw) -> int:
    if isinstance(raw, bool):
        raise ValueError(f"Pattern group count must be a positive integer, got {raw!r}.")
    try:
        count = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValueError(f"Pattern group count must be a positive integer, got {raw!r}.")
    if count <= 0:
        raise ValueError(f"Pattern group count must be a positive integer, got {raw!r}.")
    return count


def parse_prereq_group(raw: dict):
    """
    One JSON group → CourseChoiceGroup or PatternGroup.

      {"type": "course", "courses": ["3", "7"]}                     → CourseChoiceGroup(("3", "7"))
      {"type": "pattern", "count": 2, "level": "4", "department": ""} → PatternGroup(2, "4", None)

    Any other shape raises ValueError.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Prerequisite group must be an object, got {raw!r}.")
    t = str(raw.get("type") or "").strip().lower()
    if t == "course":
        ids = raw.get("courses") or []
        if not isinstance(ids, list):
            raise ValueError("Course prerequisite group needs a 'courses' list.")
        # dict.fromkeys keeps first-seen order while dropping repeats
        return CourseChoiceGroup(tuple(dict.fromkeys(str(c) for c in ids if str(c).strip())))
    if t == "pattern":
        return PatternGroup(
            count=_parse_count(raw.get("count")),
            level=normalize_filter(raw.get("level")),
            department=normalize_filter(raw.get("department")),
        )
    raise ValueError(f"Unknown prerequisite group type: {raw.get('type')!r}")


def parse_prereq_groups(prereq_doc) -> tuple:
    """
    Parses a course's `prerequisites` field: {"type": "and", "groups": [...]}.

    A missing field means no prerequisites. The legacy list format is rejected;
    older save files have to be migrated before they reach the engine.
    """
    if prereq_doc is None:
        return ()
    if isinstance(prereq_doc, list):
        raise ValueError("Prerequisites must be {'type': 'and', 'groups': [...]}, not a list.")
    if not isinstance(prereq_doc, dict):
        raise ValueError(f"Prerequisites must be an object, got {prereq_doc!r}.")
    groups = prereq_doc.get("groups") or []
    if not isinstance(groups, list):
        raise ValueError("Prerequisites 'groups' must be a list.")
    return tuple(parse_prereq_group(g) for g in groups)


def prereq_course_ids(groups) -> list[str]:
    """Union of explicit ids over all course-choice groups, first-seen order."""
    result: list[str] = []
    for group in groups or ():
        if isinstance(group, CourseChoiceGroup):
            for course_id in group.courses:
                if course_id not in result:
                    result.append(course_id)
    return result


def _scheduled_before(course_id: str, reference_rank: int, placements, semester_order) -> bool:
    label = placements.locate(course_id)
    if label is None or label == POOL:
        return False
    rank = semester_rank(label, semester_order)
    return rank is not None and rank < reference_rank


def pattern_match_count(
    group: PatternGroup,
    reference_rank: int,
    placements,
    courses_by_id: dict,
    semester_order=SEMESTER_ORDER,
) -> int:
    """Number of courses scheduled strictly before `reference_rank` matching the pattern."""
    matches = 0
    for _, rank, course_id in placements.scheduled(semester_order):
        if rank >= reference_rank:
            continue
        course = courses_by_id.get(course_id)
        if course is None:
            continue
        parsed = parse_course_code(course.code)
        if parsed is None:
            continue
        dept, level, _ = parsed
        if group.department and dept != group.department:
            continue
        if group.level and level != group.level:
            continue
        matches += 1
    return matches


def is_group_satisfied(
    group,
    reference_rank: int | None,
    placements,
    courses_by_id: dict,
    semester_order=SEMESTER_ORDER,
) -> bool:
    """
    Returns True if one prerequisite group holds for a course scheduled at
    `reference_rank`. Only courses in strictly earlier semesters count.
    """
    if reference_rank is None:
        return False
    if isinstance(group, CourseChoiceGroup):
        return any(
            _scheduled_before(course_id, reference_rank, placements, semester_order)
            for course_id in group.courses
        )
    if isinstance(group, PatternGroup):
        count = pattern_match_count(group, reference_rank, placements, courses_by_id, semester_order)
        return count >= group.count
    raise TypeError(f"Unsupported prerequisite group: {group!r}")


def prereqs_satisfied(
    groups,
    reference_rank: int | None,
    placements,
    courses_by_id: dict,
    semester_order=SEMESTER_ORDER,
) -> bool:
    """AND across groups. No groups → satisfied."""
    return all(
        is_group_satisfied(g, reference_rank, placements, courses_by_id, semester_order)
        for g in groups or ()
    )


def describe_prereq_groups(groups, courses_by_id: dict) -> list[str]:
    """
    Human-readable lines for a course's prerequisites.
    Examples:
      ["No prerequisites"]
      ["One of: STAT 300 - Stat Modeling I, Unknown course (ID: 99)"]
      ["At least 2 4xx level STAT", "All requirements above must be met"]
    """
    if not groups:
        return ["No prerequisites"]

    lines: list[str] = []
    for group in groups:
        if isinstance(group, CourseChoiceGroup):
            labels = []
            for course_id in group.courses:
                course = courses_by_id.get(course_id)
                if course is None:
                    labels.append(f"Unknown course (ID: {course_id})")
                else:
                    labels.append(f"{course.code} - {course.title}")
            lines.append("One of: " + ", ".join(labels))
        elif isinstance(group, PatternGroup):
            parts = [f"At least {group.count}"]
            if group.level:
                parts.append(f"{group.level}xx")
            parts.append("level")
            parts.append(group.department or "courses")
            lines.append(" ".join(parts))
    if len(groups) > 1:
        lines.append("All requirements above must be met")
    return lines
