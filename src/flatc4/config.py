"""
Configuration for flatc4.

Defaults live here as module constants. A project may override them in
``.flatc4/config.yaml``::

    storage:
      path: .flatc4/flatc4.db
      key: flat-c4-storage
    labels:
      system: Service
    technologies:
      http:
        color: "#4f9"
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_DIR = ".flatc4"
CONFIG_FILE = "config.yaml"
DEFAULT_DB_PATH = f"{CONFIG_DIR}/flatc4.db"
DEFAULT_STORAGE_KEY = "flat-c4-storage"

DEFAULT_EDGE_COLOR = "#fff"
MARKER_SIZE = 18

DEFAULT_LABELS: Dict[str, str] = {
    "system": "System",
    "container": "Container",
    "component": "Component",
    "code": "Code",
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "storage": {"path": DEFAULT_DB_PATH, "key": DEFAULT_STORAGE_KEY},
    "labels": dict(DEFAULT_LABELS),
    "technologies": {},
}


class StorageSettings(BaseModel):
    path: str = DEFAULT_DB_PATH
    key: str = DEFAULT_STORAGE_KEY


class TechnologySettings(BaseModel):
    color: str = DEFAULT_EDGE_COLOR


class Settings(BaseModel):
    storage: StorageSettings = Field(default_factory=StorageSettings)
    labels: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_LABELS))
    technologies: Dict[str, TechnologySettings] = Field(default_factory=dict)

    def label(self, level: str) -> str:
        return self.labels.get(level, DEFAULT_LABELS.get(level, level.title()))

    def technology_color(self, technology_id: Optional[str] = None) -> str:
        """Edge colour for a technology; unknown or missing ids get the default."""
        if technology_id and technology_id in self.technologies:
            return self.technologies[technology_id].color
        return DEFAULT_EDGE_COLOR


def default_config_path(root: Optional[Path] = None) -> Path:
    return (root or Path.cwd()) / CONFIG_DIR / CONFIG_FILE


def load_config(path: Optional[Path] = None) -> Settings:
    """
    Load settings from a YAML file.

    A missing, unreadable or invalid file yields the defaults.
    """
    config_path = Path(path) if path else default_config_path()
    if not config_path.exists():
        return Settings()

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
        settings = Settings.model_validate(data)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        logger.warning(f"Ignoring config {config_path}: {e}")
        return Settings()

    labels = dict(DEFAULT_LABELS)
    labels.update(settings.labels)
    return settings.model_copy(update={"labels": labels})


def write_default_config(root: Path) -> Path:
    """Write the default config under ``root`` and return its path."""
    config_path = default_config_path(root)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        yaml.dump(DEFAULT_CONFIG, f, sort_keys=False, default_flow_style=False)
    return config_path
