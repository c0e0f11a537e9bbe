import json

import pytest

from kis_gallery_app.io import load_gallery_config, parse_gallery_config
from kis_gallery_app.models.gallery import DEFAULT_SPAWN_POINT, Room, RoomDimensions, WallSide


def sample_document():
    return {
        "gallery": {
            "name": "Summer Show",
            "description": "Photographs from the coast",
            "settings": {"wallColor": "#ffffff", "ambientLight": 0.7},
        },
        "rooms": [
            {
                "id": "main",
                "name": "Main hall",
                "dimensions": {"width": 10, "height": 3.5, "depth": 8},
                "spawnPoint": {"x": 0, "y": 1.6, "z": 3},
            }
        ],
        "photos": [
            {
                "id": "photo-cover",
                "title": "Cover",
                "src": "/images/cover.jpg",
                "position": {"room": "main", "wall": "north", "x": 0, "y": 1.8},
                "dimensions": {"width": 2, "height": 1.2},
            },
            {
                "id": "dunes",
                "title": "Dunes",
                "description": "Late afternoon",
                "position": {"room": "main", "wall": "East", "x": "-1.5"},
            },
        ],
    }


def test_load_gallery_config_reads_rooms_items_and_settings(tmp_path):
    path = tmp_path / "gallery-config.json"
    path.write_text(json.dumps(sample_document()), encoding="utf-8")

    config = load_gallery_config(path)

    assert config.name == "Summer Show"
    assert config.first_room.id == "main"
    assert config.first_room.dimensions.width == 10.0
    assert config.first_room.spawn_point == (0.0, 1.6, 3.0)
    assert [item.id for item in config.items] == ["photo-cover", "dunes"]
    assert config.settings.wall_color == "#ffffff"
    assert config.settings.ambient_light == 0.7
    assert config.settings.floor_color == "#2a2a2a"

    cover, dunes = config.items
    assert (cover.width, cover.height) == (2.0, 1.2)
    assert dunes.placement.wall is WallSide.EAST
    assert dunes.placement.x == -1.5
    assert dunes.placement.y == 1.8
    assert (dunes.width, dunes.height) == (1.5, 1.0)
    assert dunes.src is None
    assert config.items_in_room("main") == config.items


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_gallery_config(tmp_path / "absent.json")


def test_invalid_json_raises_value_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{ not json", encoding="utf-8")
    with pytest.raises(ValueError, match="not valid JSON"):
        load_gallery_config(path)


def test_unknown_wall_is_rejected():
    document = sample_document()
    document["photos"][1]["position"]["wall"] = "ceiling"
    with pytest.raises(ValueError, match="ceiling"):
        parse_gallery_config(document)


def test_rooms_are_required():
    document = sample_document()
    document["rooms"] = []
    with pytest.raises(ValueError, match="at least one room"):
        parse_gallery_config(document)
    del document["rooms"]
    with pytest.raises(ValueError, match="'rooms'"):
        parse_gallery_config(document)


def test_non_positive_room_extent_is_rejected():
    document = sample_document()
    document["rooms"][0]["dimensions"]["depth"] = 0
    with pytest.raises(ValueError, match="positive"):
        parse_gallery_config(document)


def test_non_numeric_offset_is_rejected():
    document = sample_document()
    document["photos"][1]["position"]["x"] = "left"
    with pytest.raises(ValueError, match="numeric"):
        parse_gallery_config(document)


def test_item_in_unknown_room_is_kept():
    document = sample_document()
    document["photos"][1]["position"]["room"] = "annex"
    config = parse_gallery_config(document)
    assert config.items[1].placement.room == "annex"
    assert config.items_in_room("annex") == (config.items[1],)


def test_missing_spawn_point_uses_room_centre():
    document = sample_document()
    del document["rooms"][0]["spawnPoint"]
    config = parse_gallery_config(document)
    assert config.first_room.spawn_point == (0.0, 1.6, 0.0)
    assert Room(id="bare", dimensions=RoomDimensions(4.0, 3.0, 4.0)).spawn_point == DEFAULT_SPAWN_POINT


def _replace(path, value):
    def mutate(document):
        target = document
        for key in path[:-1]:
            target = target[key]
        target[path[-1]] = value

    return mutate


@pytest.mark.parametrize(
    "mutate",
    [
        _replace(("gallery",), "Harbour"),
        _replace(("gallery", "settings"), ["dark"]),
        _replace(("gallery", "settings", "ambientLight"), "bright"),
        _replace(("rooms",), ["main"]),
        _replace(("rooms", 0, "spawnPoint"), [0, 1, 2]),
        _replace(("rooms", 0, "dimensions"), 10),
        _replace(("photos",), {"id": "x"}),
        _replace(("photos", 0), "x"),
        _replace(("photos", 0, "position"), "north"),
        _replace(("photos", 0, "dimensions"), [2, 1]),
        _replace(("photos", 0, "src"), 42),
        _replace(("photos", 0, "overlay"), "text"),
        _replace(("photos", 0, "overlay"), {"text": ["a", "b"]}),
    ],
)
def test_malformed_documents_raise_value_error(mutate):
    document = sample_document()
    mutate(document)
    with pytest.raises(ValueError):
        parse_gallery_config(document)


def test_overlay_text_is_parsed():
    document = sample_document()
    document["photos"][0]["overlay"] = {"text": "Summer Show\n2024", "position": "full"}
    document["photos"][1]["overlay"] = {"color": "#000000"}
    cover, dunes = parse_gallery_config(document).items

    assert cover.overlay.text == "Summer Show\n2024"
    assert cover.overlay.position == "full"
    assert cover.overlay.color == "#ffffff"
    assert cover.overlay_text == "Summer Show\n2024"
    assert dunes.overlay is None
    assert dunes.overlay_text == ""


def test_null_settings_fall_back_to_defaults():
    document = sample_document()
    document["gallery"]["settings"] = {"ambientLight": None, "spotlightIntensity": None}
    settings = parse_gallery_config(document).settings
    defaults = type(settings)()
    assert settings.ambient_light == defaults.ambient_light
    assert settings.spotlight_intensity == defaults.spotlight_intensity
