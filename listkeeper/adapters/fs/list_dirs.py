import logging
import os
import shutil
from pathlib import Path

from listkeeper.domain.errors import TableIOError

logger = logging.getLogger(__name__)


class ListDirectories:
    """
    The list manager's on-disk list directories.

    A list whose directory sits under the disabled location is invisible to
    the list manager; moving it back re-enables it.
    """

    def __init__(self, enabled_dir: Path, disabled_dir: Path):
        self.enabled_dir = Path(enabled_dir)
        self.disabled_dir = Path(disabled_dir)

    def _safe_path(self, base: Path, list_name: str) -> Path:
        # newlist stores list directories lower-cased
        target = (base / list_name.lower()).resolve()
        if target.parent != base.resolve():
            raise ValueError(f"Path traversal attempt detected: {list_name}")
        return target

    def is_enabled(self, list_name: str) -> bool:
        return self._safe_path(self.enabled_dir, list_name).is_dir()

    def is_disabled(self, list_name: str) -> bool:
        return self._safe_path(self.disabled_dir, list_name).is_dir()

    def move_to_disabled(self, list_name: str) -> None:
        self._move(self.enabled_dir, self.disabled_dir, list_name)

    def move_to_enabled(self, list_name: str) -> None:
        self._move(self.disabled_dir, self.enabled_dir, list_name)

    def _move(self, src_base: Path, dst_base: Path, list_name: str) -> None:
        src = self._safe_path(src_base, list_name)
        dst = self._safe_path(dst_base, list_name)
        if dst.exists():
            raise TableIOError(dst, "destination already exists")
        try:
            os.makedirs(dst_base, mode=0o750, exist_ok=True)
            shutil.move(str(src), str(dst))
        except OSError as e:
            raise TableIOError(src, e.strerror or str(e)) from e
        logger.debug("Moved list directory %s to %s", src, dst)
