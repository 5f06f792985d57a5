from credits import degree_progress_summary, plan_credit_summary
from prereq_parser import describe_prereq_groups
from unlocks import build_reverse_prereq_map, compute_tree_depth, compute_tree_depths, get_direct_unlocks
from validators import find_dangling_references, find_prereq_cycles, get_violations


def summarize_plan(plan: dict) -> dict:
    """
    Everything the planner view renders for one plan snapshot.

    `plan` is the dict returned by data_loader.load_plan().
    """
    courses_by_id = plan["courses_by_id"]
    placements = plan["placements"]
    degrees = plan["degrees"]

    violations = get_violations(courses_by_id, placements, degrees)
    depths = compute_tree_depths(courses_by_id)

    return {
        "violations": violations,
        "violation_count": len(violations),
        "depths": {cid: result.depth for cid, result in depths.items()},
        "cycles": find_prereq_cycles(courses_by_id),
        "semester_credits": plan_credit_summary(placements, courses_by_id),
        "degree_progress": degree_progress_summary(degrees, placements, courses_by_id),
        "dangling_references": find_dangling_references(courses_by_id, placements, degrees),
    }


def course_detail(plan: dict, course_id: str) -> dict | None:
    """Side-panel view of one course, or None if the id is unknown."""
    courses_by_id = plan["courses_by_id"]
    course = courses_by_id.get(course_id)
    if course is None:
        return None

    depth = compute_tree_depth(course_id, courses_by_id)
    degree_names = {d.id: d.name for d in plan["degrees"]}
    reverse_map = build_reverse_prereq_map(plan["courses"])
    dependents = [
        courses_by_id[cid].code
        for cid in get_direct_unlocks(course_id, reverse_map)
        if cid in courses_by_id
    ]

    return {
        "course": course.to_dict(),
        "placement": plan["placements"].locate(course_id),
        "tree_depth": depth.depth,
        "cycle_detected": depth.cycle_detected,
        "prerequisites": describe_prereq_groups(course.prerequisites, courses_by_id),
        "assigned_degree_names": [
            degree_names[d] for d in course.assigned_degrees if d in degree_names
        ],
        "unlocks": dependents,
    }
