"""
Plan checker for exported course-planner documents.

Loads a plan document ({courses, placements, degrees, notes, exportDate,
version}) and reports violations, prerequisite depths, cycles and credit
loads. Designed to be importable for tests and runnable as a standalone CLI.

Usage:
    python scripts/check_plan.py path/to/plan.json
    python scripts/check_plan.py path/to/plan.json --json

Exit codes: 0 clean, 1 violations found, 2 unreadable or invalid document.
"""

import argparse
import json
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "backend"))

from data_loader import load_plan_file  # noqa: E402
from summary import summarize_plan  # noqa: E402


def format_report(plan: dict, report: dict) -> str:
    courses_by_id = plan["courses_by_id"]
    status = "PASS" if report["violation_count"] == 0 else "FAIL"
    lines = [f"[{status}] {report['violation_count']} violation(s)"]
    for violation in report["violations"]:
        lines.append(f"  [ERROR] {violation}")
    for code in report["cycles"]:
        lines.append(f"  [WARN]  {code}: prerequisite cycle detected")

    lines.append("")
    lines.append("Semester credits:")
    for semester, credits in report["semester_credits"].items():
        lines.append(
            f"  {semester:<12} {credits['total']:>3} total "
            f"({credits['undergrad']} undergrad, {credits['grad']} grad)"
        )

    if report["degree_progress"]:
        lines.append("")
        lines.append("Degree progress:")
        for row in report["degree_progress"]:
            lines.append(
                f"  {row['name']}: {row['earned']}/{row['required']} credits ({row['percentage']}%)"
            )

    lines.append("")
    lines.append("Prerequisite depth:")
    for course_id, depth in report["depths"].items():
        lines.append(f"  {courses_by_id[course_id].code:<12} {depth}")
    return "\n".join(lines)


def check_plan(path: str) -> tuple[dict, dict]:
    plan = load_plan_file(path)
    return plan, summarize_plan(plan)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate an exported course plan.")
    parser.add_argument("path", help="Path to the plan JSON document")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    args = parser.parse_args(argv)

    try:
        plan, report = check_plan(args.path)
    except FileNotFoundError:
        print(f"[FATAL] Plan file not found: {args.path}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"[FATAL] Cannot read plan file {args.path}: {exc}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"[FATAL] Invalid plan document: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(format_report(plan, report))
    return 1 if report["violation_count"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
