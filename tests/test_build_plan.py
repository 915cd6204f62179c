"""Tests for build plan serialization."""

import pytest
import toml

from phpweb.services.build_plan import (
    PHP_DEPENDENCY,
    SCRIPT_DEPENDENCY,
    WEB_DEPENDENCY,
    BuildPlan,
    BuildPlanError,
    read_plan,
    script_plan,
    web_plan,
    write_plan,
)


class TestBuildPlan:
    """Tests for BuildPlan."""

    def test_web_plan_dict(self):
        assert web_plan().to_dict() == {
            PHP_DEPENDENCY: {"metadata": {"launch": True}},
            WEB_DEPENDENCY: {},
        }

    def test_script_plan_dict(self):
        assert script_plan().to_dict() == {
            PHP_DEPENDENCY: {"metadata": {"launch": True}},
            SCRIPT_DEPENDENCY: {},
        }

    def test_from_entries_list(self):
        plan = BuildPlan.from_dict(
            {"entries": [{"name": "php-web"}, {"name": "php-binary", "metadata": {"launch": True}}]}
        )

        assert WEB_DEPENDENCY in plan
        assert plan.get(PHP_DEPENDENCY).metadata == {"launch": True}


class TestPlanFiles:
    """Tests for write_plan and read_plan."""

    def test_written_plan_is_toml(self, tmp_path):
        path = tmp_path / "plan.toml"

        write_plan(web_plan(), path)

        data = toml.loads(path.read_text())
        assert data[PHP_DEPENDENCY]["metadata"]["launch"] is True
        assert WEB_DEPENDENCY in data

    def test_read_written_plan(self, tmp_path):
        path = tmp_path / "plan.toml"
        write_plan(script_plan(), path)

        plan = read_plan(path)

        assert SCRIPT_DEPENDENCY in plan
        assert WEB_DEPENDENCY not in plan

    def test_missing_plan_is_empty(self, tmp_path):
        assert read_plan(tmp_path / "missing.toml").dependencies == {}

    def test_malformed_plan(self, tmp_path):
        path = tmp_path / "plan.toml"
        path.write_text("name = \"unterminated\n")

        with pytest.raises(BuildPlanError) as exc_info:
            read_plan(path)

        assert exc_info.value.code == "PLAN_READ_FAILED"

    def test_undecodable_plan(self, tmp_path):
        path = tmp_path / "plan.toml"
        path.write_bytes(b"[php-web]\nname = \"\xff\xfe\"\n")

        with pytest.raises(BuildPlanError) as exc_info:
            read_plan(path)

        assert exc_info.value.code == "PLAN_READ_FAILED"
