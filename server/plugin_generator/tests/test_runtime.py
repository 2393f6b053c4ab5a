"""
Tests that execute generated plugins under node.

These check what the plugin computes in a page rather than the text it
contains: performance arithmetic, first-match lookup and the error report.
Skipped when node is not installed.
"""

import pytest

from ..generator import PluginGenerator
from .test_generator import FEATURE_SUBSETS
from .conftest import run_in_node


class TestPluginLoads:

    @pytest.mark.parametrize(
        "features",
        FEATURE_SUBSETS + [["sparkles"]],
        ids=lambda f: "+".join(f),
    )
    def test_installs_global_object(self, project, analyzed_functions, features):
        code = PluginGenerator.generate_plugin(project, analyzed_functions, features)

        state = run_in_node(code, """
          report({
            projectName: plugin.projectName,
            version: plugin.version,
            features: plugin.features,
            insights: plugin.insights.length
          });
        """)

        assert state == {
            "projectName": "Acme",
            "version": "1.1.0",
            "features": features,
            "insights": len(analyzed_functions),
        }

    def test_basic_plugin_installs(self, project, functions):
        code = PluginGenerator.generate_plugin(project, functions, [])

        state = run_in_node(code, "report({name: plugin.projectName, version: plugin.version});")

        assert state == {"name": "Acme", "version": "1.0.0"}


class TestLookup:

    @pytest.mark.parametrize("features", [[], ["visual-indicator"]])
    def test_first_match_wins_for_duplicate_names(self, project, analyzed_functions, features):
        code = PluginGenerator.generate_plugin(project, analyzed_functions, features)

        found = run_in_node(code, """
          report({
            first: plugin.getFunctionInsights('processUserData').description,
            missing: plugin.getFunctionInsights('nope')
          });
        """)

        assert found == {"first": "Normalizes user records", "missing": None}


class TestPerformanceReport:

    def test_report_for_samples(self, project, functions):
        code = PluginGenerator.generate_plugin(project, functions, ["performance-monitoring"])

        result = run_in_node(code, """
          plugin.trackPerformance('foo', 0, 10);
          plugin.trackPerformance('foo', 100, 120);
          plugin.trackPerformance('foo', 5, 35);
          report(plugin.getPerformanceReport('foo'));
        """)

        assert result == {"calls": 3, "avgDuration": 20, "minDuration": 10, "maxDuration": 30}

    def test_no_report_without_samples(self, project, functions):
        code = PluginGenerator.generate_plugin(project, functions, ["performance-monitoring"])

        assert run_in_node(code, "report(plugin.getPerformanceReport('foo'));") is None


class TestErrorReport:

    def test_recent_errors_capped_at_ten(self, project, functions):
        code = PluginGenerator.generate_plugin(project, functions, ["error-tracking"])

        result = run_in_node(code, """
          for (let i = 0; i < 13; i++) {
            plugin.trackError(new Error('e' + i), i % 2 ? 'foo' : 'bar');
          }
          const errorReport = plugin.getErrorReport();
          report({
            total: errorReport.totalErrors,
            recent: errorReport.recentErrors.map(e => e.error),
            byFunction: errorReport.errorsByFunction
          });
        """)

        assert result["total"] == 13
        assert result["recent"] == [f"e{i}" for i in range(3, 13)]
        assert result["byFunction"] == {"bar": 7, "foo": 6}
