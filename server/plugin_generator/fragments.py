"""
Code fragment builders for advanced plugins.

Each builder takes the parsed FeatureSet and returns a block of object members
for the plugin literal. A builder whose feature is off returns an empty
string, so the surrounding structure is identical for every feature
combination. The advanced template concatenates them in ADVANCED_MEMBER_ORDER.
"""

import json
from typing import Callable, List, Sequence

from .features import FeatureSet

GLOBAL_NAMESPACE = "AILearning"

# How many of the most recent errors getErrorReport() returns.
RECENT_ERROR_LIMIT = 10

FragmentBuilder = Callable[[FeatureSet], str]


def performance_members(features: FeatureSet) -> str:
    """trackPerformance / getPerformanceReport and their sample store."""
    if not features.performance_monitoring:
        return ""
    return """
    performanceData: {},

    trackPerformance: function(functionName, startTime, endTime) {
      if (!this.performanceData[functionName]) {
        this.performanceData[functionName] = [];
      }
      this.performanceData[functionName].push({
        duration: endTime - startTime,
        timestamp: Date.now()
      });
    },

    getPerformanceReport: function(functionName) {
      const data = this.performanceData[functionName] || [];
      if (data.length === 0) return null;

      const durations = data.map(d => d.duration);
      return {
        calls: data.length,
        avgDuration: durations.reduce((a, b) => a + b, 0) / durations.length,
        minDuration: Math.min(...durations),
        maxDuration: Math.max(...durations)
      };
    },
"""


def error_tracking_members(features: FeatureSet) -> str:
    """trackError / getErrorReport, forwarding to gtag when the page has it."""
    if not features.error_tracking:
        return ""
    return """
    errors: [],

    trackError: function(error, functionName) {
      const err = error || {};
      this.errors.push({
        error: err.message || String(error),
        function: functionName,
        timestamp: Date.now(),
        stack: err.stack
      });

      // Send to analytics if available
      if (typeof gtag !== 'undefined') {
        gtag('event', 'ai_learning_error', {
          function_name: functionName,
          error_message: err.message || String(error)
        });
      }
    },

    getErrorReport: function() {
      return {
        totalErrors: this.errors.length,
        recentErrors: this.errors.slice(-""" + str(RECENT_ERROR_LIMIT) + """),
        errorsByFunction: this.errors.reduce((acc, err) => {
          acc[err.function] = (acc[err.function] || 0) + 1;
          return acc;
        }, {})
      };
    },
"""


def show_insights_performance_lines(features: FeatureSet) -> str:
    """Extra lines printed by showInsights(name) when performance data exists."""
    if not features.performance_monitoring:
        return ""
    return """
          const perf = this.getPerformanceReport(functionName);
          if (perf) {
            console.log('Performance:', perf);
          }
"""


def lookup_members(features: FeatureSet) -> str:
    """getFunctionInsights (first match wins) and showInsights."""
    return """
    getFunctionInsights: function(functionName) {
      return this.insights.find(f => f.name === functionName) || null;
    },

    showInsights: function(functionName) {
      if (functionName) {
        const insight = this.getFunctionInsights(functionName);
        if (insight) {
          console.group('🤖 AI Insights for ' + functionName);
          console.log('Description:', insight.description);
          console.log('Complexity:', insight.complexity + '/10');
          console.log('Insights:', insight.insights);
          console.log('Suggestions:', insight.suggestions);""" + show_insights_performance_lines(features) + """
          console.groupEnd();
        }
      } else {
        console.group('🤖 All AI Insights');
        this.insights.forEach(f => {
          console.log(`${f.name} (Complexity: ${f.complexity}/10): ${f.description}`);
        });
        console.groupEnd();
      }
    },
"""


def visual_indicator_members(features: FeatureSet) -> str:
    """A fixed badge in the page corner; clicking it dumps every insight."""
    if not features.visual_indicator:
        return ""
    return """
    addVisualIndicator: function() {
      const indicator = document.createElement('div');
      indicator.innerHTML = '🤖 AI Insights';
      indicator.style.cssText = `
        position: fixed;
        top: 20px;
        right: 20px;
        background: linear-gradient(135deg, #0891b2, #0e7490);
        color: white;
        padding: 12px 16px;
        border-radius: 8px;
        font-size: 14px;
        font-weight: 600;
        z-index: 10000;
        cursor: pointer;
        box-shadow: 0 4px 12px rgba(8, 145, 178, 0.3);
        transition: all 0.3s ease;
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
      `;

      indicator.onmouseover = () => {
        indicator.style.transform = 'translateY(-2px)';
        indicator.style.boxShadow = '0 6px 16px rgba(8, 145, 178, 0.4)';
      };

      indicator.onmouseout = () => {
        indicator.style.transform = 'translateY(0)';
        indicator.style.boxShadow = '0 4px 12px rgba(8, 145, 178, 0.3)';
      };

      indicator.onclick = () => this.showInsights();
      document.body.appendChild(indicator);
    },
"""


def init_visual_indicator(features: FeatureSet) -> str:
    if not features.visual_indicator:
        return ""
    return """
      this.addVisualIndicator();
"""


def init_error_hook(features: FeatureSet) -> str:
    if not features.error_tracking:
        return ""
    return """
      // Global error handler
      window.addEventListener('error', (event) => {
        this.trackError(event.error || { message: event.message }, 'global');
      });
"""


def init_member(features: FeatureSet) -> str:
    """Installs the plugin on window and wires up the requested features."""
    return """
    init: function() {
      console.log('🤖 AI Learning Plugin initialized for:', this.projectName);
      console.log('Features enabled:', this.features);

      window.""" + GLOBAL_NAMESPACE + """ = this;
""" + init_visual_indicator(features) + init_error_hook(features) + """
      return this;
    }
"""


ADVANCED_MEMBER_ORDER: Sequence[FragmentBuilder] = (
    performance_members,
    error_tracking_members,
    lookup_members,
    visual_indicator_members,
    init_member,
)


def compose_feature_members(features: FeatureSet) -> List[str]:
    """Render every fragment in order; disabled ones come back as ''."""
    return [builder(features) for builder in ADVANCED_MEMBER_ORDER]


def features_member(features: FeatureSet) -> str:
    return "    features: " + json.dumps(list(features.requested)) + ","
