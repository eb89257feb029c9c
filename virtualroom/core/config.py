"""Configuration management for VirtualRoom.

This module defines all configuration models using Pydantic for validation.
Configuration can be loaded from JSON files or constructed programmatically.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field


class RigGeometry(BaseModel):
    """Geometric factors used to derive room lights from room bounds.

    Lights hang just below the ceiling and are pulled from the room center
    toward the horizontal extremes. Falloff distances scale with the larger
    horizontal extent of the room.
    """

    ceiling_factor: float = Field(
        default=0.9, gt=0, le=1.0,
        description="Fraction of max Y at which ceiling lights hang"
    )
    corner_blend: float = Field(
        default=0.8, ge=0, le=1.0,
        description="Blend from room center toward each corner"
    )
    distance_factor: float = Field(
        default=0.8, gt=0,
        description="Falloff distance as a fraction of the larger horizontal extent"
    )
    falloff_exponent: float = Field(default=2.0, ge=0, description="Light decay exponent")
    intimate_drop: float = Field(
        default=0.5, ge=0,
        description="How far below the ceiling intimate presets hang their center light"
    )


class DocumentDefaults(BaseModel):
    """Values used for any field missing from a loaded scene document."""

    environment: str = Field(default="studio", description="Environment map preset")
    room_lighting_preset: str = Field(default="warm-evening", description="Room lighting preset")
    furniture_lighting_preset: str = Field(default="default", description="Furniture lighting preset")
    room_light_intensity: float = Field(default=1.0, description="Room light multiplier")
    furniture_light_intensity: float = Field(default=1.0, description="Furniture light multiplier")
    room_material_brightness: float = Field(default=1.0, description="Room material brightness")


class PlacementDefaults(BaseModel):
    """Initial transform for items added to the scene."""

    position: tuple[float, float, float] = Field(
        default=(0.0, 1.0, 0.0),
        description="Initial XYZ position"
    )
    rotation: tuple[float, float, float] = Field(
        default=(0.0, 0.0, 0.0),
        description="Initial XYZ euler rotation in radians"
    )
    scale: tuple[float, float, float] = Field(
        default=(1.0, 1.0, 1.0),
        description="Initial per-axis scale"
    )


class StudioConfig(BaseModel):
    """Main configuration container."""

    rig: RigGeometry = Field(default_factory=RigGeometry)
    defaults: DocumentDefaults = Field(default_factory=DocumentDefaults)
    placement: PlacementDefaults = Field(default_factory=PlacementDefaults)

    room_asset_name: str = Field(
        default="room.glb",
        description="Asset name (case-insensitive) treated as the room shell"
    )
    allowed_asset_suffixes: tuple[str, ...] = Field(
        default=(".glb",),
        description="File extensions accepted into the library"
    )
    document_suffix: str = Field(default=".json", description="Scene document extension")

    # Range hints for interactive controls; the store does not enforce them
    intensity_range: tuple[float, float] = Field(default=(0.0, 3.0))
    brightness_range: tuple[float, float] = Field(default=(0.5, 3.0))

    def is_room_asset(self, name: str | None) -> bool:
        """Check whether an item name designates the room shell."""
        return bool(name) and name.lower() == self.room_asset_name.lower()

    @classmethod
    def from_file(cls, path: Path | str) -> StudioConfig:
        """Load configuration from a JSON file."""
        path = Path(path)
        with open(path) as f:
            data = json.load(f)
        return cls.model_validate(data)

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

    @classmethod
    def default(cls) -> StudioConfig:
        """Create a default configuration."""
        return cls()
