# Copyright (c) 2025 Trae AI. All rights reserved.

import os
import yaml
from pathlib import Path
from typing import List, Mapping, Optional
from pydantic import BaseModel
from .errors import ConfigError

DEFAULT_VIDEO_EXTENSIONS = [
    ".3g2", ".3gp", ".3gp2", ".asf", ".avi", ".divx", ".flv", ".mk3d", ".m4v", ".mk2",
    ".mka", ".mkv", ".mov", ".mp4", ".mp4a", ".mpeg", ".mpg", ".ogg", ".ogm", ".ogv",
    ".qt", ".ra", ".ram", ".rm", ".ts", ".wav", ".webm", ".wma", ".wmv", ".iso", ".vob",
]


class Config(BaseModel):
    omdb_api_key: Optional[str] = None
    cache_dir: Optional[Path] = None
    debug: bool = False
    video_extensions: List[str] = DEFAULT_VIDEO_EXTENSIONS
    workers: Optional[int] = None
    queue_size: int = 128
    http_timeout: float = 6.0

    @classmethod
    def load(cls, path: str = "config.yaml") -> "Config":
        """
        Loads the YAML config file. A missing file means defaults.
        """
        config_file = Path(path)
        if not config_file.exists():
            return cls()
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def apply_env(self, environ: Mapping[str, str] = os.environ) -> "Config":
        """
        Overlays OMDB_API_KEY, USER_CACHE_DIR and DEBUG from the environment.
        """
        update = {}
        if environ.get("OMDB_API_KEY"):
            update["omdb_api_key"] = environ["OMDB_API_KEY"]
        if environ.get("USER_CACHE_DIR"):
            update["cache_dir"] = Path(environ["USER_CACHE_DIR"])
        if "DEBUG" in environ:
            update["debug"] = True
        return self.model_copy(update=update)

    def require_api_key(self) -> str:
        if not self.omdb_api_key:
            raise ConfigError("Missing OMDb key. Please set OMDB_API_KEY environment variable.")
        return self.omdb_api_key

    def worker_count(self) -> int:
        if self.workers and self.workers > 0:
            return self.workers
        return max(os.cpu_count() or 1, 1)
