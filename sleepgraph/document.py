"""Loading and validating sleep-settings documents.

Device settings files are JSON with C-style comments, e.g.::

    {
      // wake on ignition
      "sleepsettings": {"inactToAct": {"hysteresis": 2000}},
      "sleepcdns": {"inactToAct": {"cdn_and": ["ign"]}}
    }

Only a missing ``sleepsettings`` block is an error; everything below it
is tolerated and rendered as empty conditions.
"""
import json
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

from .builder import build_graph
from .state_graph import GraphResult

_COMMENT_RE = re.compile(r'/\*[\s\S]*?\*/|//.*')

SETTINGS_KEY = 'sleepsettings'
CONDITIONS_KEY = 'sleepcdns'


class SettingsDocumentError(Exception):
    """Base exception for unusable sleep-settings documents."""
    pass


class DocumentParseError(SettingsDocumentError):
    """The document could not be read or is not a JSON object."""
    pass


class SchemaError(SettingsDocumentError):
    """The document has no sleep settings block."""

    def __init__(self, message: str = 'No sleep settings found in JSON'):
        super().__init__(message)


def strip_comments(text: str) -> str:
    """Remove /* block */ and // line comments."""
    return _COMMENT_RE.sub('', text)


def parse_document(text: str) -> Dict[str, Any]:
    """Parse commented JSON text into a document dict."""
    try:
        document = json.loads(strip_comments(text))
    except json.JSONDecodeError as e:
        raise DocumentParseError(f"Invalid JSON: {e}")

    if not isinstance(document, dict):
        raise DocumentParseError(
            f"Expected a JSON object, got {type(document).__name__}"
        )
    return document


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """Read and parse a settings document from disk."""
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentParseError(f"Cannot read {path}: {e}")
    return parse_document(text)


def require_sleep_settings(document: Any) -> Tuple[Mapping[str, Any], Mapping[str, Any]]:
    """Return the (sleepsettings, sleepcdns) blocks of a document.

    Raises SchemaError when sleepsettings is missing or not an object.
    A missing sleepcdns block is returned as an empty dict.
    """
    if not isinstance(document, Mapping):
        raise SchemaError()

    settings = document.get(SETTINGS_KEY)
    if not isinstance(settings, Mapping):
        raise SchemaError()

    conditions = document.get(CONDITIONS_KEY)
    if not isinstance(conditions, Mapping):
        conditions = {}
    return settings, conditions


def build_graph_from_document(document: Any) -> GraphResult:
    """Validate a parsed document and build its graph."""
    settings, conditions = require_sleep_settings(document)
    return build_graph(settings, conditions)
