"""Stored sleep-settings records: *.json files in the settings directory."""
from pathlib import Path
from typing import List, Optional, Union

from .config import get_settings_dir
from .document import SettingsDocumentError

RECORD_SUFFIX = '.json'


class RecordNotFoundError(SettingsDocumentError):
    """No stored record or file matches the requested name."""
    pass


def list_records(directory: Optional[Union[str, Path]] = None, search: str = '') -> List[str]:
    """Return sorted record names, filtered case-insensitively by ``search``."""
    root = Path(directory) if directory else get_settings_dir()
    if not root.is_dir():
        return []

    names = sorted(
        (p.stem for p in root.iterdir()
         if p.is_file() and p.suffix.lower() == RECORD_SUFFIX),
        key=str.lower,
    )
    term = search.lower()
    return [name for name in names if term in name.lower()]


def record_path(name: str, directory: Optional[Union[str, Path]] = None) -> Path:
    """Resolve a record name (or a direct file path) to an existing file."""
    candidate = Path(name)
    if candidate.is_file():
        return candidate

    root = Path(directory) if directory else get_settings_dir()
    for path in (root / name, root / f'{name}{RECORD_SUFFIX}'):
        if path.is_file():
            return path
    raise RecordNotFoundError(f"No settings record named '{name}' in {root}")
