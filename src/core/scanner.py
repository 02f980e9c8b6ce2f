# Copyright (c) 2025 Trae AI. All rights reserved.

import os
import stat
import logging
from pathlib import Path
from typing import Iterator, List
from .errors import ScanError

logger = logging.getLogger(__name__)


class Scanner:
    """
    Walks directories for video files based on extensions.
    """

    def __init__(self, video_extensions: List[str]):
        self.video_extensions = {ext.lower() for ext in video_extensions}

    def is_video(self, file_name: str) -> bool:
        return os.path.splitext(file_name)[1].lower() in self.video_extensions

    def walk(self, root_path: Path) -> Iterator[str]:
        """
        Lazily yields absolute paths of regular video files under root_path.
        Symlinks are not followed and unreadable entries are skipped.
        """
        root = Path(root_path)
        if not root.is_dir():
            raise ScanError(f"Not a directory: {root}")

        for current, dirs, files in os.walk(root, followlinks=False, onerror=self._skip):
            for file_name in files:
                if not self.is_video(file_name):
                    continue
                path = os.path.join(current, file_name)
                try:
                    mode = os.lstat(path).st_mode
                except OSError as e:
                    logger.debug(f"Skipping {path}: {e}")
                    continue
                if stat.S_ISREG(mode):
                    yield os.path.abspath(path)

    @staticmethod
    def _skip(error: OSError):
        logger.debug(f"Skipping unreadable entry: {error}")
