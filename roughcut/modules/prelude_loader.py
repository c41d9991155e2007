from __future__ import annotations
import logging
from pathlib import Path
from typing import Protocol

from roughcut.config import get_prelude_path
from roughcut.errors import RoughcutError
from roughcut.reader.char_stream import EOF
from roughcut.reader.parser import Reader

logger = logging.getLogger(__name__)


class _HasEvalPrelude(Protocol):
    def eval_prelude(self, code: str) -> None: ...


def read_source(path: Path | str) -> str:
    try:
        return Path(path).read_text(encoding='utf-8')
    except OSError as exc:
        raise RoughcutError(f"cannot load '{path}': {exc.strerror or exc}") from exc


def load_file(evaluator, path: Path | str) -> None:
    """Read and evaluate every form of a file in the evaluator's global environment."""
    reader = Reader(read_source(path), evaluator.symbols)
    count = 0
    while (form := reader.read(False)) is not EOF:
        evaluator.eval(form)
        count += 1
    logger.debug("loaded %d forms from %s", count, path)


# Bootstrap library loader

def load_prelude(itp: _HasEvalPrelude, path: Path | str | None = None) -> None:
    p = Path(path) if path is not None else get_prelude_path()
    logger.debug("loading prelude %s", p)
    itp.eval_prelude(read_source(p))
