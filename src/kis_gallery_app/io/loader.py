"""Gallery configuration loading."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger

from ..models.gallery import (
    DEFAULT_SPAWN_POINT,
    ExhibitItem,
    GalleryConfig,
    GallerySettings,
    ItemPlacement,
    Room,
    RoomDimensions,
    TextOverlay,
    WallSide,
)


def load_gallery_config(path: Path) -> GalleryConfig:
    """Load a ``gallery-config.json`` style file.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ValueError
        If the file is not valid JSON or misses required fields.
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"Gallery config not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path.name} is not valid JSON: {exc}") from exc

    config = parse_gallery_config(data, source=path.name)
    logger.info(
        "Loaded gallery config {}: {} room(s), {} item(s)",
        path,
        len(config.rooms),
        len(config.items),
    )
    return config


def parse_gallery_config(data: Mapping[str, Any], source: str = "<config>") -> GalleryConfig:
    """Build a :class:`GalleryConfig` from the decoded JSON document."""
    if not isinstance(data, Mapping):
        raise ValueError(f"{source}: top-level value must be an object")

    gallery = _optional_mapping(data, "gallery", source)
    rooms = [_parse_room(entry, f"{source}:rooms[{idx}]") for idx, entry in enumerate(_require_list(data, "rooms", source))]
    if not rooms:
        raise ValueError(f"{source}: at least one room is required")

    photos = _require_list(data, "photos", source) if data.get("photos") is not None else []
    items = [_parse_item(entry, f"{source}:photos[{idx}]") for idx, entry in enumerate(photos)]
    room_ids = {room.id for room in rooms}
    for item in items:
        if item.placement.room not in room_ids:
            logger.warning("{}: item {} references unknown room {}", source, item.id, item.placement.room)

    return GalleryConfig(
        rooms=tuple(rooms),
        items=tuple(items),
        name=str(gallery.get("name") or "Gallery"),
        description=str(gallery.get("description") or ""),
        settings=_parse_settings(_optional_mapping(gallery, "settings", f"{source}:gallery"), f"{source}:gallery.settings"),
    )


def _parse_room(entry: Any, where: str) -> Room:
    if not isinstance(entry, Mapping):
        raise ValueError(f"{where}: room entry must be an object")
    dims = _require_mapping(entry, "dimensions", where)
    dimensions = RoomDimensions(
        width=_to_float(dims, "width", where),
        height=_to_float(dims, "height", where),
        depth=_to_float(dims, "depth", where),
    )
    if dimensions.width <= 0.0 or dimensions.depth <= 0.0:
        raise ValueError(f"{where}: room width and depth must be positive")

    spawn_point = DEFAULT_SPAWN_POINT
    if entry.get("spawnPoint") is not None:
        spawn = _require_mapping(entry, "spawnPoint", where)
        spawn_point = (
            _to_float(spawn, "x", where),
            _to_float(spawn, "y", where),
            _to_float(spawn, "z", where),
        )

    return Room(
        id=_require_str(entry, "id", where),
        name=str(entry.get("name") or ""),
        dimensions=dimensions,
        spawn_point=spawn_point,
    )


def _parse_item(entry: Any, where: str) -> ExhibitItem:
    if not isinstance(entry, Mapping):
        raise ValueError(f"{where}: photo entry must be an object")
    position = _require_mapping(entry, "position", where)
    try:
        wall = WallSide.parse(_require_str(position, "wall", where))
    except ValueError as exc:
        raise ValueError(f"{where}: {exc}") from None
    placement = ItemPlacement(
        room=_require_str(position, "room", where),
        wall=wall,
        x=_to_float(position, "x", where, default=0.0),
        y=_to_float(position, "y", where, default=1.8),
    )
    dims = _optional_mapping(entry, "dimensions", where)
    src = entry.get("src")
    if src is not None and not isinstance(src, str):
        raise ValueError(f"{where}: 'src' must be a string")
    return ExhibitItem(
        id=_require_str(entry, "id", where),
        placement=placement,
        title=str(entry.get("title") or ""),
        description=str(entry.get("description") or ""),
        src=src or None,
        width=_to_float(dims, "width", where, default=1.5),
        height=_to_float(dims, "height", where, default=1.0),
        overlay=_parse_overlay(entry, where),
    )


def _parse_overlay(entry: Mapping[str, Any], where: str) -> Optional[TextOverlay]:
    overlay = _optional_mapping(entry, "overlay", where)
    text = overlay.get("text")
    if not text:
        return None
    if not isinstance(text, str):
        raise ValueError(f"{where}: 'overlay.text' must be a string")
    return TextOverlay(
        text=text,
        position=str(overlay.get("position") or "bottom"),
        color=str(overlay.get("color") or "#ffffff"),
    )


def _parse_settings(settings: Mapping[str, Any], where: str) -> GallerySettings:
    defaults = GallerySettings()
    return GallerySettings(
        wall_color=str(settings.get("wallColor") or defaults.wall_color),
        floor_color=str(settings.get("floorColor") or defaults.floor_color),
        ambient_light=_to_float(settings, "ambientLight", where, default=defaults.ambient_light),
        spotlight_intensity=_to_float(settings, "spotlightIntensity", where, default=defaults.spotlight_intensity),
    )


def _optional_mapping(data: Mapping[str, Any], key: str, where: str) -> Dict[str, Any]:
    if data.get(key) is None:
        return {}
    return _require_mapping(data, key, where)


def _require_list(data: Mapping[str, Any], key: str, where: str) -> List[Any]:
    value = data.get(key)
    if not isinstance(value, list):
        raise ValueError(f"{where}: '{key}' must be a list")
    return value


def _require_mapping(data: Mapping[str, Any], key: str, where: str) -> Dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, Mapping):
        raise ValueError(f"{where}: '{key}' must be an object")
    return dict(value)


def _require_str(data: Mapping[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if value is None or str(value).strip() == "":
        raise ValueError(f"{where}: missing required field '{key}'")
    return str(value)


_MISSING = object()


def _to_float(data: Mapping[str, Any], key: str, where: str, default: Any = _MISSING) -> float:
    value = data.get(key)
    if value is None or value == "":
        if default is _MISSING:
            raise ValueError(f"{where}: missing required field '{key}'")
        return float(default)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{where}: field '{key}' must be numeric, got {value!r}") from exc
