"""
Tests for plugin template rendering.

This module tests the basic template, the insight entries embedded in both
templates, header usage instructions and filename sanitization.
"""

import pytest

from ..templates import (
    BASIC_VERSION,
    build_insight_entries,
    plugin_filename,
    render_basic_plugin,
)
from ..javascript import comment_text, js_string
from .conftest import GENERATED_AT, assert_well_formed, extract_insights


class TestPluginFilename:
    """Test download filename sanitization."""

    def test_every_unsafe_character_replaced(self):
        assert plugin_filename("My Plugin!", "1.0.0") == "My_Plugin__v1.0.0.js"

    def test_alphanumeric_name_unchanged(self):
        assert plugin_filename("Tracker2", "1.1.0") == "Tracker2_v1.1.0.js"

    def test_non_ascii_replaced_one_for_one(self):
        assert plugin_filename("café-ü", "1.0.0") == "caf____v1.0.0.js"


class TestInsightEntries:
    """Test projection of function maps onto embedded insight entries."""

    def test_one_entry_per_function_in_order(self, analyzed_functions):
        entries = build_insight_entries(analyzed_functions)

        assert [entry["name"] for entry in entries] == [
            "processUserData", "saveToDatabase", "processUserData"
        ]
        assert [entry["description"] for entry in entries][-1] == "Second definition"

    def test_suggestions_default_to_empty(self, analyzed_functions):
        entries = build_insight_entries(analyzed_functions)

        assert entries[1]["suggestions"] == []
        assert entries[2]["suggestions"] == []

    def test_basic_entries_have_no_insights_key(self, functions):
        entries = build_insight_entries(functions)

        assert entries == [
            {"name": "foo", "description": "d", "complexity": 3, "suggestions": ["s1"]}
        ]

    def test_advanced_entries_include_insights(self, analyzed_functions):
        entries = build_insight_entries(analyzed_functions, include_insights=True)

        assert entries[0]["insights"] == ["Validates email presence"]
        assert entries[2]["insights"] == []

    def test_empty_function_list(self):
        assert build_insight_entries([]) == []


class TestBasicTemplate:
    """Test the basic plugin template."""

    def test_acme_plugin(self, project, functions):
        code = render_basic_plugin(project, functions, generated_at=GENERATED_AT)

        assert "projectName: 'Acme'," in code
        assert f"version: '{BASIC_VERSION}'," in code
        assert extract_insights(code) == [
            {"name": "foo", "description": "d", "complexity": 3, "suggestions": ["s1"]}
        ]

    def test_exposes_lookup_and_dump(self, project, functions):
        code = render_basic_plugin(project, functions)

        assert "getFunctionInsights: function(functionName)" in code
        assert "this.insights.find(f => f.name === functionName) || null" in code
        assert "showAllInsights: function()" in code

    def test_installs_on_window_when_dom_ready(self, project, functions):
        code = render_basic_plugin(project, functions)

        assert "window.AILearning = this;" in code
        assert "document.addEventListener('DOMContentLoaded', () => AILearningPlugin.init());" in code
        assert code.rstrip().endswith("})(window);")

    def test_duplicate_names_kept_in_source_order(self, project, analyzed_functions):
        code = render_basic_plugin(project, analyzed_functions)

        entries = extract_insights(code)
        duplicates = [entry for entry in entries if entry["name"] == "processUserData"]
        assert [entry["description"] for entry in duplicates] == [
            "Normalizes user records", "Second definition"
        ]

    def test_well_formed(self, project, analyzed_functions):
        assert_well_formed(render_basic_plugin(project, analyzed_functions))

    def test_deterministic_for_fixed_timestamp(self, project, functions):
        first = render_basic_plugin(project, functions, "Acme Insights", GENERATED_AT)
        second = render_basic_plugin(project, functions, "Acme Insights", GENERATED_AT)

        assert first == second
        assert "Generated on: 2024-05-01T12:00:00+00:00" in first

    def test_header_names_plugin_and_script_tag(self, project, functions):
        code = render_basic_plugin(project, functions, plugin_name="My Plugin!")

        assert " * Plugin: My Plugin! v1.0.0" in code
        assert '<script src="My_Plugin__v1.0.0.js"></script>' in code

    def test_header_without_plugin_name(self, project, functions):
        code = render_basic_plugin(project, functions)

        assert " * Version: 1.0.0" in code
        assert "<script src=" not in code

    def test_non_string_project_name_rejected(self, functions):
        with pytest.raises(TypeError, match="Project name must be a string"):
            render_basic_plugin({"id": 2, "name": 42}, functions)

    def test_missing_project_name_rejected(self, functions):
        with pytest.raises(TypeError):
            render_basic_plugin({"id": 2}, functions)

    def test_quotes_in_project_name_escaped(self, functions):
        code = render_basic_plugin({"id": 3, "name": "O'Reilly */ Labs"}, functions)

        assert "projectName: 'O\\'Reilly */ Labs'," in code
        assert "Generated for: O'Reilly *\\/ Labs" in code


class TestJavascriptHelpers:
    """Test literal escaping helpers."""

    def test_js_string_escapes(self):
        assert js_string("a\\b") == "'a\\\\b'"
        assert js_string("line\nbreak") == "'line\\nbreak'"
        assert js_string("</script>") == "'<\\/script>'"

    def test_js_string_requires_str(self):
        with pytest.raises(TypeError):
            js_string(None)

    def test_comment_text_closes_nothing(self):
        assert "*/" not in comment_text("evil */ name")
