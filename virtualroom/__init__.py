"""VirtualRoom - Interactive 3D room composition.

A Python library and command-line tool for arranging imported glTF assets in
a room, lighting the room from its own geometry with named presets, and
saving or exporting the resulting scene.
"""

__version__ = "0.1.0"

from .core.config import StudioConfig
from .lighting import (
    RoomBounds,
    calculate_room_bounds,
    resolve_furniture_lighting,
    resolve_room_lighting,
)
from .mesh.loader import AssetLoader, load_asset
from .mesh.materials import MaterialBrightnessAdjuster
from .scene import SceneDocument, SceneStore, build_frame

__all__ = [
    "StudioConfig",
    "RoomBounds",
    "calculate_room_bounds",
    "resolve_furniture_lighting",
    "resolve_room_lighting",
    "AssetLoader",
    "load_asset",
    "MaterialBrightnessAdjuster",
    "SceneDocument",
    "SceneStore",
    "build_frame",
]
