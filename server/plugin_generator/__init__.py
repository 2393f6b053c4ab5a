"""
Browser plugin generation for analyzed projects.

Turns a project's stored function insights into a downloadable JavaScript file
that installs itself on ``window.AILearning``.
"""

from .features import FeatureSet, PluginFeature, KNOWN_FEATURES
from .generator import PluginGenerator, generate_plugin
from .templates import (
    ADVANCED_VERSION,
    BASIC_VERSION,
    build_insight_entries,
    plugin_filename,
    render_advanced_plugin,
    render_basic_plugin,
)

__all__ = [
    "FeatureSet",
    "PluginFeature",
    "KNOWN_FEATURES",
    "PluginGenerator",
    "generate_plugin",
    "ADVANCED_VERSION",
    "BASIC_VERSION",
    "build_insight_entries",
    "plugin_filename",
    "render_advanced_plugin",
    "render_basic_plugin",
]
