"""
Optional capabilities that can be compiled into an advanced plugin.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple


class PluginFeature(str, Enum):
    """Feature identifiers accepted by the plugin generator."""
    VISUAL_INDICATOR = "visual-indicator"
    PERFORMANCE_MONITORING = "performance-monitoring"
    ERROR_TRACKING = "error-tracking"


KNOWN_FEATURES = tuple(feature.value for feature in PluginFeature)


@dataclass(frozen=True)
class FeatureSet:
    """
    Parsed view of a requested feature list.

    ``requested`` keeps the caller's list verbatim (order, duplicates and
    unknown identifiers included) because the advanced plugin reports it as-is.
    The boolean flags decide which code fragments are compiled in.
    """
    requested: Tuple[str, ...] = ()
    visual_indicator: bool = False
    performance_monitoring: bool = False
    error_tracking: bool = False

    @classmethod
    def from_requested(cls, features: Optional[Iterable[str]]) -> "FeatureSet":
        requested = tuple(features or ())
        return cls(
            requested=requested,
            visual_indicator=PluginFeature.VISUAL_INDICATOR.value in requested,
            performance_monitoring=PluginFeature.PERFORMANCE_MONITORING.value in requested,
            error_tracking=PluginFeature.ERROR_TRACKING.value in requested,
        )

    @property
    def enabled(self) -> List[PluginFeature]:
        flags = {
            PluginFeature.VISUAL_INDICATOR: self.visual_indicator,
            PluginFeature.PERFORMANCE_MONITORING: self.performance_monitoring,
            PluginFeature.ERROR_TRACKING: self.error_tracking,
        }
        return [feature for feature, on in flags.items() if on]

    @property
    def unknown(self) -> Tuple[str, ...]:
        return tuple(feature for feature in self.requested if feature not in KNOWN_FEATURES)

    def __bool__(self) -> bool:
        return bool(self.requested)
