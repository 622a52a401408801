"""Read-only inspection and backup of DungeonDraft map files."""

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import DecodeError, IoError

logger = logging.getLogger(__name__)

BACKUP_EXTENSION = "dungeondraft_map.bak"


class MapFile(BaseModel):
    model_config = ConfigDict(extra="allow")

    header: Dict[str, Any] = {}
    world: Dict[str, Any] = {}

    def top_level_keys(self) -> List[str]:
        return sorted(self.model_dump().keys())


def backup_path(path: Union[str, Path]) -> Path:
    """castle.dungeondraft_map -> castle.dungeondraft_map.bak"""
    path = Path(path)
    return path.with_name(f"{path.stem}.{BACKUP_EXTENSION}")


def create_backup(path: Union[str, Path]) -> bool:
    """
    Copy `path` to its backup location. Returns False when a backup already
    exists; an existing backup is never overwritten.
    """
    path = Path(path)
    dest = backup_path(path)
    if dest.exists():
        return False
    try:
        shutil.copyfile(path, dest)
    except OSError as exc:
        raise IoError(f"Cannot back up {path} to {dest}: {exc}") from exc
    logger.debug("Wrote backup %s", dest)
    return True


def inspect_map(path: Union[str, Path]) -> MapFile:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise IoError(f"Cannot read map file {path}: {exc}") from exc
    except ValueError as exc:
        raise DecodeError(f"Map file {path} is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise DecodeError(f"Map file {path} must contain a JSON object")
    try:
        return MapFile(**data)
    except ValidationError as exc:
        raise DecodeError(f"Unexpected map file layout in {path}: {exc}") from exc
