"""
Plugin generator entry point.

Chooses between the basic and advanced templates: any requested feature,
recognized or not, selects the advanced template.
"""

import logging
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from .features import FeatureSet
from .templates import (
    ADVANCED_VERSION,
    BASIC_VERSION,
    render_advanced_plugin,
    render_basic_plugin,
)

logger = logging.getLogger(__name__)


class PluginGenerator:
    """Renders downloadable browser plugins from stored function insights."""

    @staticmethod
    def template_version(features: Optional[Iterable[str]] = None) -> str:
        """Version string embedded by the template ``features`` would select."""
        return ADVANCED_VERSION if FeatureSet.from_requested(features) else BASIC_VERSION

    @staticmethod
    def generate_plugin(
        project: Mapping[str, Any],
        functions: Iterable[Mapping[str, Any]],
        features: Optional[Iterable[str]] = None,
        plugin_name: Optional[str] = None,
        generated_at: Optional[datetime] = None,
    ) -> str:
        """
        Generate plugin source for a project.

        Args:
            project: Project dictionary (``Project.to_dict()`` shape)
            functions: Function map dictionaries, in the order to embed them
            features: Requested feature identifiers; empty selects the basic template
            plugin_name: Config name written into the header and usage line
            generated_at: Header timestamp (defaults to now, UTC)

        Returns:
            JavaScript source text

        Raises:
            TypeError: If the project name is not a string
        """
        feature_set = FeatureSet.from_requested(features)

        if not feature_set:
            logger.debug(f"Rendering basic plugin for project {project.get('id')}")
            return render_basic_plugin(project, functions, plugin_name, generated_at)

        if feature_set.unknown:
            logger.warning(f"Ignoring unknown plugin features: {', '.join(feature_set.unknown)}")

        logger.debug(
            f"Rendering advanced plugin for project {project.get('id')} "
            f"with features: {[feature.value for feature in feature_set.enabled]}"
        )
        return render_advanced_plugin(project, functions, feature_set, plugin_name, generated_at)


def generate_plugin(
    project: Mapping[str, Any],
    functions: Iterable[Mapping[str, Any]],
    features: Optional[Iterable[str]] = None,
    **kwargs,
) -> str:
    """Convenience wrapper around PluginGenerator.generate_plugin."""
    return PluginGenerator.generate_plugin(project, functions, features, **kwargs)
