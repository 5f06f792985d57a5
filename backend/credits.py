import pandas as pd

from models import GRADUATE, UNDERGRADUATE, index_courses
from semesters import SEMESTER_ORDER, semester_rank

PLAN_COLUMNS = ["semester", "rank", "scheduled", "course_id", "code", "credits", "level", "assigned_degrees"]


def build_plan_frame(courses, placements, semester_order=SEMESTER_ORDER) -> pd.DataFrame:
    """
    One row per placed course that resolves to a known course, pool included.

    `scheduled` is False for the pool (and any key outside `semester_order`),
    so progress sums can drop unscheduled rows with a single mask.
    """
    courses_by_id = courses if isinstance(courses, dict) else index_courses(courses)
    rows = []
    for key in placements.keys():
        rank = semester_rank(key, semester_order)
        for course_id in placements.semester(key):
            course = courses_by_id.get(course_id)
            if course is None:
                continue
            rows.append({
                "semester": key,
                "rank": rank,
                "scheduled": rank is not None,
                "course_id": course_id,
                "code": course.code,
                "credits": int(course.credits or 0),
                "level": course.level,
                "assigned_degrees": tuple(course.assigned_degrees),
            })
    return pd.DataFrame(rows, columns=PLAN_COLUMNS)


def semester_credits(semester: str, placements, courses, frame: pd.DataFrame | None = None) -> dict:
    """
    Credit load of one semester split by level.

    Returns: {"undergrad": 9, "grad": 3, "total": 12}
    """
    if frame is None:
        frame = build_plan_frame(courses, placements)
    rows = frame[frame["semester"] == semester]
    undergrad = int(rows.loc[rows["level"] == UNDERGRADUATE, "credits"].sum())
    grad = int(rows.loc[rows["level"] == GRADUATE, "credits"].sum())
    return {"undergrad": undergrad, "grad": grad, "total": undergrad + grad}


def degree_progress(degree_id: str, placements, courses, frame: pd.DataFrame | None = None) -> int:
    """
    Credits earned toward `degree_id` by courses in real semesters.
    Pool courses never count. A course assigned to several degrees counts
    fully toward each of them.
    """
    if frame is None:
        frame = build_plan_frame(courses, placements)
    scheduled = frame[frame["scheduled"].astype(bool)]
    if scheduled.empty:
        return 0
    mask = scheduled["assigned_degrees"].apply(lambda ids: degree_id in ids)
    return int(scheduled.loc[mask, "credits"].sum())


def plan_credit_summary(placements, courses, semester_order=SEMESTER_ORDER) -> dict[str, dict]:
    """semester → {"undergrad", "grad", "total"} for every real semester."""
    frame = build_plan_frame(courses, placements, semester_order)
    return {
        semester: semester_credits(semester, placements, courses, frame=frame)
        for semester in semester_order
    }


def degree_progress_summary(degrees, placements, courses) -> list[dict]:
    """
    Progress rows for the degree bars, in degree order.

    Item shape:
      {"id": "1", "name": "...", "type": "Bachelor",
       "earned": 18, "required": 120, "percentage": 15.0}
    """
    frame = build_plan_frame(courses, placements)
    out: list[dict] = []
    for degree in degrees or ():
        earned = degree_progress(degree.id, placements, courses, frame=frame)
        required = int(degree.required_credits or 0)
        percentage = round(earned / required * 100, 1) if required > 0 else 0.0
        out.append({
            "id": degree.id,
            "name": degree.name,
            "type": degree.type,
            "earned": earned,
            "required": required,
            "percentage": percentage,
        })
    return out
