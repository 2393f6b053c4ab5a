"""
Pytest fixtures for plugin generator tests.
"""

import json
import shutil
import subprocess
from datetime import datetime, timezone
from typing import Any, Dict, List

import esprima
import pytest


GENERATED_AT = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def extract_insights(code: str) -> List[Dict[str, Any]]:
    """Decode the JSON array assigned to the plugin's ``insights`` member."""
    marker = "\n    insights: "
    start = code.index(marker) + len(marker)
    entries, _ = json.JSONDecoder().raw_decode(code, start)
    return entries


def assert_well_formed(code: str) -> None:
    """Parse the plugin as a classic browser script; raises on any syntax error."""
    esprima.parseScript(code)


# Minimal browser globals for running a plugin under node. console.log and
# friends are silenced so only the harness writes to stdout.
NODE_PRELUDE = """
const window = globalThis;
window.addEventListener = () => {};
const document = {
  readyState: 'complete',
  addEventListener: () => {},
  createElement: () => ({ style: {} }),
  body: { appendChild: () => {} }
};
console.log = () => {};
console.group = () => {};
console.groupEnd = () => {};
"""


def run_in_node(code: str, script: str):
    """
    Load a generated plugin in node, run ``script`` against it and return
    the JSON value the script passes to ``report(...)``.

    Skips the calling test when node is not installed.
    """
    node = shutil.which("node")
    if node is None:
        pytest.skip("node is not installed")

    program = "\n".join([
        NODE_PRELUDE,
        "const report = (value) => process.stdout.write(JSON.stringify(value));",
        code,
        "const plugin = window.AILearning;",
        script,
    ])
    completed = subprocess.run(
        [node], input=program, capture_output=True, text=True, timeout=30
    )
    assert completed.returncode == 0, completed.stderr
    return json.loads(completed.stdout)


@pytest.fixture
def project() -> Dict[str, Any]:
    return {"id": 1, "name": "Acme"}


@pytest.fixture
def functions() -> List[Dict[str, Any]]:
    return [
        {
            "function_name": "foo",
            "description": "d",
            "complexity_score": 3,
            "ai_analysis": {"suggestions": ["s1"]},
        }
    ]


@pytest.fixture
def analyzed_functions() -> List[Dict[str, Any]]:
    """Several function maps, including a duplicated name."""
    return [
        {
            "function_name": "processUserData",
            "description": "Normalizes user records",
            "complexity_score": 4,
            "ai_analysis": {
                "insights": ["Validates email presence"],
                "suggestions": ["Use a schema validator"],
            },
        },
        {
            "function_name": "saveToDatabase",
            "description": "Persists a user",
            "complexity_score": 6,
            "ai_analysis": {"insights": ["Re-throws errors"], "suggestions": []},
        },
        {
            "function_name": "processUserData",
            "description": "Second definition",
            "complexity_score": 2,
            "ai_analysis": None,
        },
    ]
