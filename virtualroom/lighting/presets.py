"""Static lighting preset tables.

Room presets describe where lights go relative to the room (corner or center
anchors) and how they look; the resolver turns anchors into coordinates once
the room bounds are known. Furniture presets are complete rigs since they do
not depend on any geometry.

Preset identifiers arriving as strings are coerced in exactly one place,
``parse_room_preset`` / ``parse_furniture_preset``. Unknown identifiers fall
back to ``off`` and ``default`` respectively.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .rig import AmbientLight, DirectionalLight, FurnitureLightingRig

logger = logging.getLogger(__name__)


class RoomLightingPreset(str, Enum):
    OFF = "off"
    WARM_EVENING = "warm-evening"
    BRIGHT_DAY = "bright-day"
    COZY_NIGHT = "cozy-night"
    STUDIO_NEUTRAL = "studio-neutral"
    SUNSET = "sunset"


class FurnitureLightingPreset(str, Enum):
    DEFAULT = "default"
    BRIGHT = "bright"
    SOFT = "soft"
    DRAMATIC = "dramatic"


class Anchor(str, Enum):
    """Horizontal placement of a room light.

    Corners are named by the X and Z extreme they lean toward.
    """

    CORNER_MAX_X_MAX_Z = "corner_max_x_max_z"
    CORNER_MIN_X_MAX_Z = "corner_min_x_max_z"
    CORNER_MIN_X_MIN_Z = "corner_min_x_min_z"
    CORNER_MAX_X_MIN_Z = "corner_max_x_min_z"
    CENTER = "center"


CORNERS = (
    Anchor.CORNER_MAX_X_MAX_Z,
    Anchor.CORNER_MIN_X_MAX_Z,
    Anchor.CORNER_MIN_X_MIN_Z,
    Anchor.CORNER_MAX_X_MIN_Z,
)


@dataclass(frozen=True)
class PointLightSpec:
    """One room light before it is placed in a concrete room.

    Attributes:
        anchor: Horizontal placement
        color: Hex color
        intensity: Base intensity
        distance_scale: Multiplier on the room's shared falloff distance
        lowered: Hang below the ceiling by the configured drop
    """

    anchor: Anchor
    color: str
    intensity: float
    distance_scale: float = 1.0
    lowered: bool = False


@dataclass(frozen=True)
class HemisphereSpec:
    sky_color: str
    ground_color: str
    intensity: float


@dataclass(frozen=True)
class RoomPresetSpec:
    """Complete description of a room preset."""

    ambient_color: str
    ambient_intensity: float
    hemisphere: HemisphereSpec | None
    lights: tuple[PointLightSpec, ...]


def _four_corners_and_center(
    corner_colors: tuple[str, str, str, str],
    corner_intensity: float,
    center_color: str,
    center_intensity: float,
    center_distance_scale: float = 1.2,
) -> tuple[PointLightSpec, ...]:
    """Build the standard five-light layout: four corners plus a center light."""
    corners = tuple(
        PointLightSpec(anchor=anchor, color=color, intensity=corner_intensity)
        for anchor, color in zip(CORNERS, corner_colors)
    )
    center = PointLightSpec(
        anchor=Anchor.CENTER,
        color=center_color,
        intensity=center_intensity,
        distance_scale=center_distance_scale,
    )
    return corners + (center,)


ROOM_PRESETS: dict[RoomLightingPreset, RoomPresetSpec] = {
    RoomLightingPreset.WARM_EVENING: RoomPresetSpec(
        ambient_color="#fff5e6",
        ambient_intensity=0.3,
        hemisphere=HemisphereSpec("#fff5e6", "#8B7355", 0.4),
        lights=_four_corners_and_center(("#ffdb99",) * 4, 1.2, "#ffe4b3", 1.5),
    ),
    RoomLightingPreset.BRIGHT_DAY: RoomPresetSpec(
        ambient_color="#ffffff",
        ambient_intensity=0.6,
        hemisphere=HemisphereSpec("#87CEEB", "#f0f0f0", 0.7),
        lights=_four_corners_and_center(("#ffffff",) * 4, 1.8, "#f5f5f5", 2.2),
    ),
    RoomLightingPreset.COZY_NIGHT: RoomPresetSpec(
        ambient_color="#ffd699",
        ambient_intensity=0.15,
        hemisphere=HemisphereSpec("#ffd699", "#4a3728", 0.2),
        # Two opposite corners and a lowered center lamp with a short reach
        lights=(
            PointLightSpec(Anchor.CORNER_MAX_X_MAX_Z, "#ffb366", 0.8, distance_scale=0.7),
            PointLightSpec(Anchor.CORNER_MIN_X_MIN_Z, "#ffb366", 0.8, distance_scale=0.7),
            PointLightSpec(Anchor.CENTER, "#ffcc80", 1.0, distance_scale=0.6, lowered=True),
        ),
    ),
    RoomLightingPreset.STUDIO_NEUTRAL: RoomPresetSpec(
        ambient_color="#ffffff",
        ambient_intensity=0.4,
        hemisphere=HemisphereSpec("#ffffff", "#cccccc", 0.5),
        lights=_four_corners_and_center(("#ffffff",) * 4, 1.4, "#ffffff", 1.8),
    ),
    RoomLightingPreset.SUNSET: RoomPresetSpec(
        ambient_color="#ffcc99",
        ambient_intensity=0.25,
        hemisphere=HemisphereSpec("#ff9966", "#8B6347", 0.35),
        lights=_four_corners_and_center(
            ("#ff9966", "#ffaa77", "#ff9966", "#ffaa77"), 1.0, "#ffbb88", 1.3
        ),
    ),
}


def _furniture_rig(
    ambient_intensity: float,
    color: str,
    intensity: float,
    position: tuple[float, float, float] = (5.0, 10.0, 7.0),
) -> FurnitureLightingRig:
    return FurnitureLightingRig(
        ambient=AmbientLight(color="#ffffff", intensity=ambient_intensity),
        directional=DirectionalLight(
            color=color,
            position=position,
            intensity=intensity,
            casts_shadow=True,
            shadow_map_size=(2048, 2048),
        ),
    )


FURNITURE_PRESETS: dict[FurnitureLightingPreset, FurnitureLightingRig] = {
    FurnitureLightingPreset.DEFAULT: _furniture_rig(0.1, "#fff1e0", 1.8),
    FurnitureLightingPreset.BRIGHT: _furniture_rig(0.3, "#ffffff", 2.5),
    FurnitureLightingPreset.SOFT: _furniture_rig(0.4, "#fff5e6", 1.2),
    FurnitureLightingPreset.DRAMATIC: _furniture_rig(
        0.05, "#ffffff", 3.0, position=(8.0, 15.0, 10.0)
    ),
}

ROOM_PRESET_LABELS = {
    RoomLightingPreset.OFF: "Off",
    RoomLightingPreset.WARM_EVENING: "Warm Evening",
    RoomLightingPreset.BRIGHT_DAY: "Bright Day",
    RoomLightingPreset.COZY_NIGHT: "Cozy Night",
    RoomLightingPreset.STUDIO_NEUTRAL: "Studio Neutral",
    RoomLightingPreset.SUNSET: "Sunset",
}

FURNITURE_PRESET_LABELS = {
    FurnitureLightingPreset.DEFAULT: "Default",
    FurnitureLightingPreset.BRIGHT: "Bright",
    FurnitureLightingPreset.SOFT: "Soft",
    FurnitureLightingPreset.DRAMATIC: "Dramatic",
}

ENVIRONMENT_PRESETS = ("studio", "city", "dawn", "sunset", "apartment")


def parse_room_preset(value: RoomLightingPreset | str | None) -> RoomLightingPreset:
    """Coerce a room preset identifier, mapping unknown values to ``off``."""
    if isinstance(value, RoomLightingPreset):
        return value
    try:
        return RoomLightingPreset(value)
    except ValueError:
        logger.warning("Unknown room lighting preset %r; lighting is off", value)
        return RoomLightingPreset.OFF


def parse_furniture_preset(
    value: FurnitureLightingPreset | str | None,
) -> FurnitureLightingPreset:
    """Coerce a furniture preset identifier, mapping unknown values to ``default``."""
    if isinstance(value, FurnitureLightingPreset):
        return value
    try:
        return FurnitureLightingPreset(value)
    except ValueError:
        logger.warning("Unknown furniture lighting preset %r; using default", value)
        return FurnitureLightingPreset.DEFAULT


def list_presets() -> list[dict[str, str]]:
    """List all presets with their region and display label."""
    presets = [
        {"region": "room", "name": p.value, "label": ROOM_PRESET_LABELS[p]}
        for p in RoomLightingPreset
    ]
    presets += [
        {"region": "furniture", "name": p.value, "label": FURNITURE_PRESET_LABELS[p]}
        for p in FurnitureLightingPreset
    ]
    return presets
