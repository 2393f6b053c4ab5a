"""
Plugin templates for the AI Learning Service.

Renders the self-executing browser script that exposes a project's function
insights on ``window.AILearning``. Rendering is pure string composition: the
same project, functions, features, plugin name and timestamp always produce
the same text.

Two templates exist:
    - basic (version 1.0.0): insights, lookup and a console dump
    - advanced (version 1.1.0): adds per-function insight lists and the
      optional feature fragments from ``fragments.py``
"""

import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .features import FeatureSet
from .fragments import GLOBAL_NAMESPACE, compose_feature_members, features_member
from .javascript import comment_text, js_json, js_string

BASIC_VERSION = "1.0.0"
ADVANCED_VERSION = "1.1.0"

_FILENAME_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


def plugin_filename(config_name: str, version: str) -> str:
    """
    Download filename for a plugin.

    Every character outside [a-zA-Z0-9] in ``config_name`` becomes ``_``,
    one for one, so ``"My Plugin!"`` at ``1.0.0`` gives
    ``My_Plugin__v1.0.0.js``.
    """
    return f"{_FILENAME_UNSAFE.sub('_', config_name)}_v{version}.js"


def project_name_of(project: Mapping[str, Any]) -> str:
    """
    Read the project name the plugin is generated for.

    Raises:
        TypeError: If the name is not a string. Names are never coerced.
    """
    name = project.get("name")
    if not isinstance(name, str):
        raise TypeError(f"Project name must be a string, got {type(name).__name__}")
    return name


def build_insight_entries(
    functions: Iterable[Mapping[str, Any]],
    include_insights: bool = False,
) -> List[Dict[str, Any]]:
    """
    Project function records onto the entries embedded in the plugin.

    One entry per record, in input order. Duplicate names are kept; the
    generated lookup returns the first.

    Args:
        functions: Function map dictionaries (``FunctionMap.to_dict()`` shape)
        include_insights: Add the ``insights`` list (advanced template only)

    Returns:
        List of ``{name, description, complexity, [insights], suggestions}``
    """
    entries = []
    for function in functions:
        analysis = function.get("ai_analysis") or {}
        entry: Dict[str, Any] = {
            "name": function.get("function_name"),
            "description": function.get("description"),
            "complexity": function.get("complexity_score"),
        }
        if include_insights:
            entry["insights"] = list(analysis.get("insights") or [])
        entry["suggestions"] = list(analysis.get("suggestions") or [])
        entries.append(entry)
    return entries


def _timestamp(generated_at: Optional[datetime]) -> str:
    moment = generated_at or datetime.now(timezone.utc)
    return moment.isoformat()


def plugin_header(
    title: str,
    project_name: str,
    version: str,
    generated_at: Optional[datetime] = None,
    plugin_name: Optional[str] = None,
    features: Optional[FeatureSet] = None,
) -> str:
    """Leading block comment, including the script tag to install the file."""
    lines = [
        "/**",
        f" * AI Learning Service - {title}",
        f" * Generated for: {comment_text(project_name)}",
    ]
    if plugin_name is not None:
        lines.append(f" * Plugin: {comment_text(plugin_name)} v{version}")
    else:
        lines.append(f" * Version: {version}")
    if features is not None:
        lines.append(f" * Features: {comment_text(', '.join(features.requested))}")
    lines.append(f" * Generated on: {_timestamp(generated_at)}")
    if plugin_name is not None:
        lines.extend([
            " *",
            " * Usage:",
            f' *   <script src="{plugin_filename(plugin_name, version)}"></script>',
            f" *   window.{GLOBAL_NAMESPACE}.getFunctionInsights('functionName')",
        ])
    lines.append(" */")
    return "\n".join(lines)


def _identity_members(project_name: str, version: str) -> str:
    return "\n".join([
        f"    projectName: {js_string(project_name)},",
        f"    version: {js_string(version)},",
    ])


def _insights_member(entries: List[Dict[str, Any]]) -> str:
    return f"    insights: {js_json(entries, indent_level=4)},"


AUTO_INIT = """  // Auto-initialize
  if (document.readyState === 'loading') {
    document.addEventListener('DOMContentLoaded', () => AILearningPlugin.init());
  } else {
    AILearningPlugin.init();
  }"""

BASIC_METHODS = """
    getFunctionInsights: function(functionName) {
      return this.insights.find(f => f.name === functionName) || null;
    },

    showAllInsights: function() {
      console.group('🤖 AI Learning Insights');
      this.insights.forEach(insight => {
        console.log(`${insight.name}: ${insight.description}`);
      });
      console.groupEnd();
    },

    init: function() {
      console.log('🤖 AI Learning Plugin initialized');
      window.""" + GLOBAL_NAMESPACE + """ = this;
      return this;
    }
"""


def _wrap_plugin(header: str, members: List[str]) -> str:
    """Place object members inside the plugin literal and the window IIFE."""
    return "\n".join([
        header,
        "",
        "(function(window) {",
        "  'use strict';",
        "",
        "  const AILearningPlugin = {",
        *members,
        "  };",
        "",
        AUTO_INIT,
        "",
        "})(window);",
    ])


def render_basic_plugin(
    project: Mapping[str, Any],
    functions: Iterable[Mapping[str, Any]],
    plugin_name: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render the basic plugin.

    Args:
        project: Project dictionary; only ``name`` is used
        functions: Function map dictionaries
        plugin_name: Config name shown in the header and usage line
        generated_at: Timestamp written to the header (defaults to now, UTC)

    Returns:
        Plugin JavaScript source
    """
    project_name = project_name_of(project)
    entries = build_insight_entries(functions)

    header = plugin_header("Basic Plugin", project_name, BASIC_VERSION, generated_at, plugin_name)
    members = [
        _identity_members(project_name, BASIC_VERSION),
        "",
        _insights_member(entries),
        BASIC_METHODS,
    ]
    return _wrap_plugin(header, members)


def render_advanced_plugin(
    project: Mapping[str, Any],
    functions: Iterable[Mapping[str, Any]],
    features: FeatureSet,
    plugin_name: Optional[str] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render the advanced plugin with the requested feature fragments.

    Fragments are appended in a fixed order (performance, error tracking,
    lookup, visual indicator, init). Unrequested and unknown features add
    nothing.
    """
    project_name = project_name_of(project)
    entries = build_insight_entries(functions, include_insights=True)

    header = plugin_header(
        "Advanced Plugin", project_name, ADVANCED_VERSION, generated_at, plugin_name, features
    )
    members = [
        _identity_members(project_name, ADVANCED_VERSION),
        features_member(features),
        "",
        _insights_member(entries),
        *compose_feature_members(features),
    ]
    return _wrap_plugin(header, members)
