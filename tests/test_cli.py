"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from virtualroom.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def scene_file(runner, tmp_path):
    path = tmp_path / "scene.json"
    result = runner.invoke(main, ["scene", "create", str(path)])
    assert result.exit_code == 0
    return path


@pytest.fixture
def room_file(tmp_path, glb_bytes):
    path = tmp_path / "room.glb"
    path.write_bytes(glb_bytes)
    return path


def _read(path):
    return json.loads(path.read_text())


class TestPresetCommands:
    """Test the read-only lighting commands."""

    def test_presets(self, runner):
        """Test listing presets."""
        result = runner.invoke(main, ["presets"])
        assert result.exit_code == 0
        assert "warm-evening" in result.output
        assert "dramatic" in result.output

    def test_room_lighting_from_bounds(self, runner):
        """Test resolving a room rig from explicit bounds."""
        result = runner.invoke(
            main, ["lighting", "room", "warm-evening", "--bounds", "0", "10", "0", "4", "0", "10"]
        )
        assert result.exit_code == 0
        assert "(9.00, 3.60, 9.00)" in result.output

    def test_room_lighting_swapped_bounds(self, runner):
        """Test that bounds given max-first are reordered."""
        result = runner.invoke(
            main, ["lighting", "room", "warm-evening", "--bounds", "10", "0", "4", "0", "10", "0"]
        )
        assert result.exit_code == 0
        assert "(9.00, 3.60, 9.00)" in result.output

    def test_room_lighting_from_asset(self, runner, room_file):
        """Test resolving a room rig from a room asset."""
        result = runner.invoke(main, ["lighting", "room", "bright-day", "--room", str(room_file)])
        assert result.exit_code == 0
        assert "(4.00, 3.60, 4.00)" in result.output

    def test_room_lighting_off(self, runner):
        """Test that the off preset reports no rig."""
        result = runner.invoke(
            main, ["lighting", "room", "off", "--bounds", "0", "10", "0", "4", "0", "10"]
        )
        assert result.exit_code == 0
        assert "off" in result.output

    def test_room_lighting_needs_bounds(self, runner):
        """Test that a room or bounds must be given."""
        result = runner.invoke(main, ["lighting", "room", "warm-evening"])
        assert result.exit_code != 0

    def test_furniture_lighting(self, runner):
        """Test the furniture rig output."""
        result = runner.invoke(main, ["lighting", "furniture", "dramatic"])
        assert result.exit_code == 0
        assert "(8, 15, 10)" in result.output


class TestSceneCommands:
    """Test editing scene documents."""

    def test_create(self, scene_file):
        """Test that a new scene has defaults and nothing else."""
        data = _read(scene_file)
        assert data["library"] == []
        assert data["items"] == []
        assert data["roomLightingPreset"] == "warm-evening"

    def test_add_asset(self, runner, scene_file, room_file):
        """Test adding a model file to the library."""
        result = runner.invoke(main, ["scene", "add-asset", str(scene_file), str(room_file)])
        assert result.exit_code == 0
        assert _read(scene_file)["library"][0]["name"] == "room.glb"

    def test_add_asset_embedded(self, runner, scene_file, room_file):
        """Test embedding the payload in the document."""
        runner.invoke(main, ["scene", "add-asset", str(scene_file), str(room_file), "--embed"])
        url = _read(scene_file)["library"][0]["url"]
        assert url.startswith("data:model/gltf-binary;base64,")

    def test_add_duplicate_asset(self, runner, scene_file, room_file):
        """Test that a second asset with the same name is refused."""
        runner.invoke(main, ["scene", "add-asset", str(scene_file), str(room_file)])
        result = runner.invoke(main, ["scene", "add-asset", str(scene_file), str(room_file)])

        assert result.exit_code != 0
        assert "already in the library" in result.output
        assert len(_read(scene_file)["library"]) == 1

    def test_add_wrong_suffix(self, runner, scene_file, tmp_path):
        """Test that only .glb files are accepted."""
        model = tmp_path / "chair.obj"
        model.write_text("")
        result = runner.invoke(main, ["scene", "add-asset", str(scene_file), str(model)])
        assert result.exit_code != 0
        assert ".glb" in result.output

    def test_place_move_delete(self, runner, scene_file, room_file):
        """Test the item lifecycle through the CLI."""
        runner.invoke(main, ["scene", "add-asset", str(scene_file), str(room_file)])
        result = runner.invoke(main, ["scene", "place", str(scene_file), "room.glb"])
        assert result.exit_code == 0

        item_id = _read(scene_file)["items"][0]["id"]
        result = runner.invoke(
            main, ["scene", "move", str(scene_file), item_id, "--position", "1", "2", "3"]
        )
        assert result.exit_code == 0
        assert _read(scene_file)["items"][0]["position"] == [1.0, 2.0, 3.0]

        result = runner.invoke(main, ["scene", "delete", str(scene_file), item_id])
        assert result.exit_code == 0
        assert _read(scene_file)["items"] == []

    def test_move_mode_filter(self, runner, scene_file, room_file):
        """Test that --mode limits the update to one field."""
        runner.invoke(main, ["scene", "add-asset", str(scene_file), str(room_file)])
        runner.invoke(main, ["scene", "place", str(scene_file), "room.glb"])
        item_id = _read(scene_file)["items"][0]["id"]

        runner.invoke(main, [
            "scene", "move", str(scene_file), item_id,
            "--position", "1", "2", "3", "--scale", "2", "2", "2", "--mode", "scale",
        ])
        item = _read(scene_file)["items"][0]
        assert item["scale"] == [2.0, 2.0, 2.0]
        assert item["position"] == [0.0, 1.0, 0.0]

    def test_remove_asset_cascades(self, runner, scene_file, room_file):
        """Test that removing an asset removes its placed items."""
        runner.invoke(main, ["scene", "add-asset", str(scene_file), str(room_file)])
        runner.invoke(main, ["scene", "place", str(scene_file), "room.glb"])
        runner.invoke(main, ["scene", "place", str(scene_file), "room.glb"])

        result = runner.invoke(main, ["scene", "remove-asset", str(scene_file), "room.glb"])
        assert result.exit_code == 0
        data = _read(scene_file)
        assert data["library"] == []
        assert data["items"] == []

    def test_set(self, runner, scene_file):
        """Test changing lighting settings."""
        result = runner.invoke(main, [
            "scene", "set", str(scene_file),
            "--room-preset", "sunset", "--room-intensity", "4", "--brightness", "2",
        ])
        assert result.exit_code == 0
        assert "outside the usual" in result.output

        data = _read(scene_file)
        assert data["roomLightingPreset"] == "sunset"
        assert data["roomLightIntensity"] == 4.0
        assert data["roomMaterialBrightness"] == 2.0

    def test_info_with_room(self, runner, scene_file, room_file):
        """Test that info resolves the room rig from the placed room."""
        runner.invoke(main, ["scene", "add-asset", str(scene_file), str(room_file), "--embed"])
        runner.invoke(main, ["scene", "place", str(scene_file), "room.glb"])

        result = runner.invoke(main, ["scene", "info", str(scene_file)])
        assert result.exit_code == 0
        assert "embedded" in result.output
        assert "Point lights" in result.output

    def test_export(self, runner, scene_file, room_file, tmp_path):
        """Test that the info export carries no payloads."""
        runner.invoke(main, ["scene", "add-asset", str(scene_file), str(room_file), "--embed"])
        runner.invoke(main, ["scene", "place", str(scene_file), "room.glb"])

        output = tmp_path / "info.json"
        result = runner.invoke(main, ["scene", "export", str(scene_file), str(output)])
        assert result.exit_code == 0

        data = _read(output)
        assert "library" not in data
        assert "url" not in data["items"][0]

    def test_corrupted_scene(self, runner, tmp_path):
        """Test the message for an unreadable scene file."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        result = runner.invoke(main, ["scene", "info", str(path)])
        assert result.exit_code != 0
        assert "It may be corrupted" in result.output
