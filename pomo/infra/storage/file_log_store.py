"""File-backed log store rooted at a vault directory"""
import logging
from pathlib import Path

from pomo.features.timer.ports import LogStore

logger = logging.getLogger(__name__)


class FileLogStore(LogStore):
    """
    Stores logs as UTF-8 text files under a root directory.
    Paths are vault-relative, e.g. "Journal/2026-10-19.md".
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def _resolve(self, path: str) -> Path:
        root = self.root.resolve()
        target = (root / path).resolve()
        if target != root and root not in target.parents:
            raise ValueError(f"Log path escapes the vault: {path}")
        return target

    async def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    async def create(self, path: str, text: str = "") -> None:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        # "x" refuses to clobber a file created in the meantime
        with open(target, "x", encoding="utf-8", newline="") as f:
            f.write(text)
        logger.info(f"Created {target}")

    async def read(self, path: str) -> str:
        with open(self._resolve(path), "r", encoding="utf-8", newline="") as f:
            return f.read()

    async def write(self, path: str, text: str) -> None:
        with open(self._resolve(path), "w", encoding="utf-8", newline="") as f:
            f.write(text)


class MemoryLogStore(LogStore):
    """In-process log store"""

    def __init__(self):
        self.files: dict = {}

    async def exists(self, path: str) -> bool:
        return path in self.files

    async def create(self, path: str, text: str = "") -> None:
        if path in self.files:
            raise FileExistsError(path)
        self.files[path] = text

    async def read(self, path: str) -> str:
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    async def write(self, path: str, text: str) -> None:
        self.files[path] = text
