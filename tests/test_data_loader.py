import json

import pytest
from data_loader import course_from_dict, degree_from_dict, load_plan, load_plan_file
from models import CourseChoiceGroup, PatternGroup, remove_degree_assignments
from plan_utils import course_json, empty_placements_json


class TestCourseFromDict:
    def test_full_record(self):
        course = course_from_dict(course_json(
            "7", "STAT 506",
            level="Graduate",
            semesterRestrictionsInPerson=["Spring"],
            assignedDegrees=["3"],
            groups=[
                {"type": "course", "courses": ["1", "3"]},
                {"type": "pattern", "count": 1, "level": "4", "department": "STAT"},
            ],
        ))
        assert course.id == "7"
        assert course.level == "Graduate"
        assert course.semester_restrictions_in_person == ("Spring",)
        assert course.assigned_degrees == ("3",)
        assert course.prerequisites == (
            CourseChoiceGroup(("1", "3")),
            PatternGroup(count=1, level="4", department="STAT"),
        )

    def test_numeric_id(self):
        assert course_from_dict(course_json(11, "STAT 480")).id == "11"

    def test_missing_id(self):
        with pytest.raises(ValueError):
            course_from_dict({"code": "STAT 480"})

    def test_bad_credits(self):
        with pytest.raises(ValueError, match="credits"):
            course_from_dict(course_json("1", "STAT 480", credits="three"))

    def test_float_credits(self):
        assert course_from_dict(course_json("1", "STAT 480", credits=3.0)).credits == 3

    def test_restrictions_must_be_list(self):
        with pytest.raises(ValueError):
            course_from_dict(course_json("1", "STAT 480", semesterRestrictionsOnline="Fall"))

    def test_round_trip_to_dict_keeps_camel_case(self):
        raw = course_json("1", "STAT 480", groups=[{"type": "course", "courses": ["2"]}])
        out = course_from_dict(raw).to_dict()
        assert out["deliveryMode"] == "In-Person"
        assert out["prerequisites"] == {"type": "and", "groups": [{"type": "course", "courses": ["2"]}]}


class TestDegreeFromDict:
    def test_record(self):
        degree = degree_from_dict({"id": "3", "name": "Master of Applied Statistics", "type": "Master", "requiredCredits": 30})
        assert degree.required_credits == 30
        assert degree.to_dict()["requiredCredits"] == 30

    def test_missing_id(self):
        with pytest.raises(ValueError):
            degree_from_dict({"name": "x"})


class TestLoadPlan:
    def test_document_shape(self):
        payload = {
            "courses": [course_json("1", "STAT 415")],
            "placements": {**empty_placements_json(), "Fall 2025": ["1"]},
            "degrees": [{"id": "d", "name": "BS", "type": "Bachelor", "requiredCredits": 120}],
            "notes": "remember the SAS course",
            "exportDate": "2025-09-01T10:00:00.000Z",
            "version": "1.0",
        }
        plan = load_plan(payload)
        assert plan["placements"].locate("1") == "Fall 2025"
        assert plan["courses_by_id"]["1"].code == "STAT 415"
        assert plan["notes"] == "remember the SAS course"

    def test_missing_courses(self):
        with pytest.raises(ValueError, match="courses"):
            load_plan({"placements": {}})

    def test_not_an_object(self):
        with pytest.raises(ValueError):
            load_plan([])

    def test_missing_placements_is_empty(self):
        plan = load_plan({"courses": []})
        assert plan["placements"].to_dict() == empty_placements_json()

    def test_warns_on_dangling_references(self, capsys):
        load_plan({
            "courses": [course_json("1", "STAT 415", groups=[{"type": "course", "courses": ["99"]}])],
            "placements": {"Fall 2025": ["1", "42"]},
        })
        err = capsys.readouterr().err
        assert "[WARN]" in err
        assert "42" in err
        assert "STAT 415 -> 99" in err

    def test_warns_on_unrecognized_enum_values(self, capsys):
        load_plan({
            "courses": [course_json("1", "STAT 415", deliveryMode="Hybrid")],
            "degrees": [{"id": "d", "name": "Cert", "type": "Certificate", "requiredCredits": 12}],
        })
        err = capsys.readouterr().err
        assert "deliveryMode='Hybrid'" in err
        assert "type='Certificate'" in err

    def test_warnings_can_be_silenced(self, capsys):
        load_plan({"courses": [], "placements": {"Fall 2025": ["42"]}}, warn=False)
        assert capsys.readouterr().err == ""

    def test_load_plan_file(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text(json.dumps({"courses": [course_json("1", "STAT 415")], "degrees": []}), encoding="utf-8")
        plan = load_plan_file(str(path))
        assert len(plan["courses"]) == 1


class TestRemoveDegreeAssignments:
    def test_strips_degree(self):
        courses = [
            course_from_dict(course_json("1", "STAT 415", assignedDegrees=["a", "b"])),
            course_from_dict(course_json("2", "STAT 380", assignedDegrees=["b"])),
        ]
        out = remove_degree_assignments(courses, "b")
        assert [c.assigned_degrees for c in out] == [("a",), ()]
        assert courses[0].assigned_degrees == ("a", "b")
