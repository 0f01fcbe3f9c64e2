"""
sleepgraph configuration module.

Provides configurable paths for stored sleep-settings records and diagram
exports, so the same tools work across checkouts with different data
locations.

Configuration precedence:
1. SLEEPGRAPH_SETTINGS_DIR environment variable (for CI and explicit override)
2. Standard location .sleepgraph/settings under the repo root
3. ./settings relative to the working directory
"""

import os
import subprocess
from pathlib import Path

SETTINGS_DIR_ENV = 'SLEEPGRAPH_SETTINGS_DIR'
EXPORT_DIR_ENV = 'SLEEPGRAPH_EXPORT_DIR'

DEFAULT_EXPORT_NAME = 'sleep-settings-diagram'


def _find_repo_root() -> Path:
    """Find repo root via git, fall back to CWD."""
    try:
        result = subprocess.run(
            ['git', 'rev-parse', '--show-toplevel'],
            capture_output=True, text=True, check=True
        )
        return Path(result.stdout.strip())
    except (subprocess.CalledProcessError, FileNotFoundError):
        return Path.cwd()


def get_settings_dir() -> Path:
    """Get the directory holding stored sleep-settings records."""
    # 1. Environment variable (for CI and explicit override)
    if env_dir := os.environ.get(SETTINGS_DIR_ENV):
        return Path(env_dir)

    # 2. Standard location inside a repo
    standard_path = _find_repo_root() / '.sleepgraph' / 'settings'
    if standard_path.exists():
        return standard_path

    # 3. Plain working-directory fallback
    return Path('settings')


def get_export_dir() -> Path:
    """Get the directory PNG exports are written to by default."""
    if env_dir := os.environ.get(EXPORT_DIR_ENV):
        return Path(env_dir)
    return get_settings_dir().parent / 'exports'


def get_export_path(name: str = '') -> Path:
    """Default PNG path for a diagram named after its record or file."""
    return get_export_dir() / f'{name or DEFAULT_EXPORT_NAME}.png'
