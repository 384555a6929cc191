"""
Persistence of user state as a flat ``key=value`` text file.

Example::

    # Simple config for Video Dataset Preparation Tool
    last_video=/home/me/clips/run1.mp4
    save_dir=/home/me/dataset/images
    next_image=42
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from PySide6.QtCore import QStandardPaths

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.txt"
HEADER = "# Simple config for Video Dataset Preparation Tool"


@dataclass
class Config:
    last_video: str = ""
    save_dir: str = ""
    next_image: int = 0


def default_config_path() -> str:
    """``config.txt`` in the per-user application data directory."""
    app_data = QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)
    return os.path.join(app_data, CONFIG_FILENAME)


def parse_config(text: str) -> Config:
    """Parse config text; malformed lines and unknown keys are skipped."""
    config = Config()
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        value = value.strip()
        if key == "last_video":
            config.last_video = value
        elif key == "save_dir":
            config.save_dir = value
        elif key == "next_image":
            try:
                config.next_image = int(value)
            except ValueError:
                config.next_image = 0
    return config


def format_config(config: Config) -> str:
    return (
        f"{HEADER}\n"
        f"last_video={config.last_video}\n"
        f"save_dir={config.save_dir}\n"
        f"next_image={config.next_image}\n"
    )


class ConfigStore:
    """Loads and saves a :class:`Config` at a fixed path."""

    def __init__(self, path: str) -> None:
        self.path = path

    def load(self) -> Config:
        """Read the config file; a missing or unreadable file gives defaults."""
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                text = fh.read()
        except FileNotFoundError:
            return Config()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read config %s: %s", self.path, exc)
            return Config()
        return parse_config(text)

    def save(self, config: Config) -> bool:
        """Overwrite the config file. Returns False if it could not be written."""
        try:
            parent = os.path.dirname(self.path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as fh:
                fh.write(format_config(config))
        except OSError as exc:
            logger.warning("Could not write config %s: %s", self.path, exc)
            return False
        return True
