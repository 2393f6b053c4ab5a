"""
Helpers for embedding Python values in generated JavaScript source.
"""

import json
from typing import Any

# Characters that cannot appear raw inside a single-quoted JS string literal.
_JS_STRING_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def js_string(value: str) -> str:
    """
    Render ``value`` as a single-quoted JavaScript string literal.

    Args:
        value: Text to embed

    Returns:
        Quoted and escaped literal, e.g. ``'Acme'``

    Raises:
        TypeError: If value is not a string
    """
    if not isinstance(value, str):
        raise TypeError(f"Expected str for JavaScript string literal, got {type(value).__name__}")

    escaped = "".join(_JS_STRING_ESCAPES.get(char, char) for char in value)
    # Keep '</script>' from closing an inline script tag when pasted into a page.
    return "'" + escaped.replace("</", "<\\/") + "'"


def js_json(value: Any, indent_level: int = 0) -> str:
    """
    Render ``value`` as a JSON literal, pretty printed with two-space indents.

    Continuation lines are shifted right by ``indent_level`` spaces so the
    literal lines up with the object member it is assigned to.
    """
    text = json.dumps(value, indent=2)
    if indent_level and "\n" in text:
        pad = " " * indent_level
        text = text.replace("\n", "\n" + pad)
    return text


def comment_text(value: Any) -> str:
    """Make ``value`` safe to place inside a /* ... */ block comment."""
    return str(value).replace("*/", "*\\/").replace("\r", " ").replace("\n", " ")
