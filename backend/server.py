import os
import sys
import time
import threading
import hashlib
import json
from collections import OrderedDict

# Ensure backend/ is on sys.path so sibling imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException
from dotenv import load_dotenv

from credits import degree_progress_summary
from data_loader import course_from_dict, degree_from_dict, load_plan
from models import remove_degree_assignments
from summary import course_detail, summarize_plan
from validators import get_violations

load_dotenv()

app = Flask(__name__)

VERSION = "1.0.0"


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.environ.get(name, "")
    try:
        return max(minimum, float(raw))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name, "")
    try:
        return max(minimum, int(raw))
    except (TypeError, ValueError):
        return default


_SLOW_REQUEST_LOG_MS = _env_float("SLOW_REQUEST_LOG_MS", 750.0, minimum=0.0)
_REQUEST_CACHE_SIZE = _env_int("REQUEST_CACHE_SIZE", 128, minimum=1)


class _LruResponseCache:
    """Thread-safe bounded in-memory cache for JSON-serializable responses."""

    def __init__(self, max_size: int):
        self.max_size = max(1, int(max_size))
        self._lock = threading.Lock()
        self._items: OrderedDict[str, dict] = OrderedDict()

    def get(self, key: str):
        with self._lock:
            if key not in self._items:
                return None
            value = self._items.pop(key)
            self._items[key] = value
            return value

    def set(self, key: str, value: dict) -> None:
        with self._lock:
            if key in self._items:
                self._items.pop(key)
            self._items[key] = value
            while len(self._items) > self.max_size:
                self._items.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


_summary_response_cache = _LruResponseCache(_REQUEST_CACHE_SIZE)


def _cache_enabled() -> bool:
    return not app.config.get("TESTING", False)


def _stable_payload_hash(payload) -> str:
    try:
        encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
    except (TypeError, ValueError):
        encoded = repr(payload)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def _request_cache_key(prefix: str, payload) -> str:
    return f"{prefix}:{VERSION}:{_stable_payload_hash(payload)}"


def _error_response(error_code: str, message: str, status: int):
    return jsonify({
        "mode": "error",
        "error": {
            "error_code": error_code,
            "message": message,
        },
    }), status


def _read_plan_body():
    """
    Returns (body, plan, error_response). Exactly one of plan / error_response
    is None.
    """
    body = request.get_json(force=True, silent=True)
    if not isinstance(body, dict):
        return None, None, _error_response("INVALID_INPUT", "Request body must be valid JSON.", 400)
    try:
        plan = load_plan(body, warn=False)
    except ValueError as exc:
        return body, None, _error_response("INVALID_INPUT", str(exc), 400)
    return body, plan, None


def _require_str(body: dict, field: str):
    value = str(body.get(field) or "").strip()
    if not value:
        return None, _error_response("INVALID_INPUT", f"{field} is required.", 400)
    return value, None


# -- Security headers ------------------------------------------------------
@app.before_request
def _start_request_timer():
    g._request_start_time = time.perf_counter()


@app.after_request
def _add_security_headers(response):
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "same-origin"

    started = getattr(g, "_request_start_time", None)
    if started is not None:
        duration_ms = (time.perf_counter() - started) * 1000.0
        if duration_ms >= _SLOW_REQUEST_LOG_MS:
            endpoint = request.endpoint or "unknown"
            print(
                f"[SLOW] {request.method} {request.path} "
                f"endpoint={endpoint} status={response.status_code} duration_ms={duration_ms:.1f}"
            )
    return response


# -- Health endpoint --------------------------------------------------------
@app.route("/health", methods=["GET"])
def health_endpoint():
    return jsonify({
        "status": "ok",
        "version": VERSION,
    })


# ── 500 handler ────────────────────────────────────────────────────────────────
@app.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    print(f"[WARN] Unhandled error on {request.path}: {e!r}", file=sys.stderr)
    return _error_response("SERVER_ERROR", "An unexpected server error occurred.", 500)


# ── Routes ─────────────────────────────────────────────────────────────────────
def validate_endpoint():
    """Violation list for the plan in the request body."""
    _, plan, error = _read_plan_body()
    if error:
        return error
    violations = get_violations(plan["courses_by_id"], plan["placements"], plan["degrees"])
    return jsonify({
        "mode": "validate",
        "violations": violations,
        "violation_count": len(violations),
    })


def summary_endpoint():
    """Violations, depth badges, credit loads and degree progress in one call."""
    body, plan, error = _read_plan_body()
    if error:
        return error

    cache_key = _request_cache_key("summary", body)
    if _cache_enabled():
        cached = _summary_response_cache.get(cache_key)
        if cached is not None:
            return jsonify(cached)

    response_payload = {"mode": "summary", **summarize_plan(plan)}
    if _cache_enabled():
        _summary_response_cache.set(cache_key, response_payload)
    return jsonify(response_payload)


def move_endpoint():
    """Move one course to a semester or the pool; returns the new placement."""
    body, plan, error = _read_plan_body()
    if error:
        return error
    course_id, error = _require_str(body, "course_id")
    if error:
        return error
    target, error = _require_str(body, "target")
    if error:
        return error
    if course_id not in plan["courses_by_id"]:
        return _error_response("UNKNOWN_COURSE", f"Course {course_id!r} is not in the course list.", 404)

    try:
        placements = plan["placements"].move(course_id, target)
    except ValueError as exc:
        return _error_response("INVALID_INPUT", str(exc), 400)

    violations = get_violations(plan["courses_by_id"], placements, plan["degrees"])
    return jsonify({
        "mode": "move",
        "placements": placements.to_dict(),
        "violations": violations,
        "violation_count": len(violations),
    })


def add_course_endpoint():
    """Append a new course record and park it in the pool."""
    body, plan, error = _read_plan_body()
    if error:
        return error
    try:
        course = course_from_dict(body.get("course"))
    except ValueError as exc:
        return _error_response("INVALID_INPUT", str(exc), 400)
    if course.id in plan["courses_by_id"]:
        return _error_response("INVALID_INPUT", f"Course id {course.id!r} already exists.", 400)

    courses = plan["courses"] + [course]
    placements = plan["placements"].add_to_pool(course.id)
    return jsonify({
        "mode": "add_course",
        "courses": [c.to_dict() for c in courses],
        "placements": placements.to_dict(),
    })


def edit_course_endpoint():
    """Replace an existing course record in place; placements are untouched."""
    body, plan, error = _read_plan_body()
    if error:
        return error
    try:
        course = course_from_dict(body.get("course"))
    except ValueError as exc:
        return _error_response("INVALID_INPUT", str(exc), 400)
    if course.id not in plan["courses_by_id"]:
        return _error_response("UNKNOWN_COURSE", f"Course {course.id!r} is not in the course list.", 404)

    courses = [course if c.id == course.id else c for c in plan["courses"]]
    violations = get_violations(courses, plan["placements"], plan["degrees"])
    return jsonify({
        "mode": "edit_course",
        "courses": [c.to_dict() for c in courses],
        "violations": violations,
        "violation_count": len(violations),
    })


def save_degree_endpoint():
    """Add a degree, or replace the one with the same id."""
    body, plan, error = _read_plan_body()
    if error:
        return error
    try:
        degree = degree_from_dict(body.get("degree"))
    except ValueError as exc:
        return _error_response("INVALID_INPUT", str(exc), 400)

    degrees = [degree if d.id == degree.id else d for d in plan["degrees"]]
    if all(d.id != degree.id for d in plan["degrees"]):
        degrees.append(degree)
    return jsonify({
        "mode": "save_degree",
        "degrees": [d.to_dict() for d in degrees],
        "degree_progress": degree_progress_summary(degrees, plan["placements"], plan["courses_by_id"]),
    })


def delete_course_endpoint():
    """Drop a course from the course list and from every placement slot."""
    body, plan, error = _read_plan_body()
    if error:
        return error
    course_id, error = _require_str(body, "course_id")
    if error:
        return error

    courses = [c for c in plan["courses"] if c.id != course_id]
    placements = plan["placements"].remove(course_id)
    return jsonify({
        "mode": "delete_course",
        "courses": [c.to_dict() for c in courses],
        "placements": placements.to_dict(),
    })


def delete_degree_endpoint():
    """Drop a degree and strip it from every course's assignments."""
    body, plan, error = _read_plan_body()
    if error:
        return error
    degree_id, error = _require_str(body, "degree_id")
    if error:
        return error

    degrees = [d for d in plan["degrees"] if d.id != degree_id]
    courses = remove_degree_assignments(plan["courses"], degree_id)
    return jsonify({
        "mode": "delete_degree",
        "courses": [c.to_dict() for c in courses],
        "degrees": [d.to_dict() for d in degrees],
    })


def course_detail_endpoint():
    """Side-panel data for one course."""
    body, plan, error = _read_plan_body()
    if error:
        return error
    course_id, error = _require_str(body, "course_id")
    if error:
        return error

    detail = course_detail(plan, course_id)
    if detail is None:
        return _error_response("UNKNOWN_COURSE", f"Course {course_id!r} is not in the course list.", 404)
    return jsonify({"mode": "course_detail", **detail})


app.add_url_rule("/api/health", endpoint="api_health", view_func=health_endpoint, methods=["GET"])
app.add_url_rule("/api/validate", endpoint="api_validate", view_func=validate_endpoint, methods=["POST"])
app.add_url_rule("/api/summary", endpoint="api_summary", view_func=summary_endpoint, methods=["POST"])
app.add_url_rule("/api/move", endpoint="api_move", view_func=move_endpoint, methods=["POST"])
app.add_url_rule("/api/add-course", endpoint="api_add_course", view_func=add_course_endpoint, methods=["POST"])
app.add_url_rule("/api/edit-course", endpoint="api_edit_course", view_func=edit_course_endpoint, methods=["POST"])
app.add_url_rule("/api/save-degree", endpoint="api_save_degree", view_func=save_degree_endpoint, methods=["POST"])
app.add_url_rule("/api/delete-course", endpoint="api_delete_course", view_func=delete_course_endpoint, methods=["POST"])
app.add_url_rule("/api/delete-degree", endpoint="api_delete_degree", view_func=delete_degree_endpoint, methods=["POST"])
app.add_url_rule("/api/course-detail", endpoint="api_course_detail", view_func=course_detail_endpoint, methods=["POST"])


# -- API catch-all (404 for unknown /api/* routes) -------------------
@app.route("/api/<path:rest>", methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
def api_catch_all(rest):
    return jsonify({"error": f"/api/{rest} not found"}), 404


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    debug = os.environ.get("FLASK_DEBUG", "1") == "1"
    print(f"[OK] Course planner engine {VERSION} listening on port {port}")
    app.run(host="0.0.0.0", port=port, debug=debug)
