from __future__ import annotations
import logging
import os
from pathlib import Path


# Resolve installation dir (roughcut package directory)
_ROUGHCUT_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE_DIR = _ROUGHCUT_DIR / 'prelude'
PRELUDE_FILE_NAME = 'stdlib.lisp'
DEFAULT_LOG_LEVEL = 'WARNING'

PRIMARY_PROMPT = 'roughcut> '
SECONDARY_PROMPT = ''
RESULT_PREFIX = '=> '


def path_from_env(var: str, default: Path) -> Path:
    raw = os.environ.get(var, '').strip()
    return Path(raw) if raw else default


def get_prelude_path() -> Path:
    """The bootstrap file; ROUGHCUT_PRELUDE_PATH may name the file or its directory."""
    p = path_from_env('ROUGHCUT_PRELUDE_PATH', _DEFAULT_PRELUDE_DIR)
    return p / PRELUDE_FILE_NAME if p.is_dir() else p


def get_log_level() -> int:
    name = os.environ.get('ROUGHCUT_LOG_LEVEL', DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    # unknown names come back as the string "Level <name>"
    return level if isinstance(level, int) else logging.WARNING
