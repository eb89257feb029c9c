"""Lighting preset resolvers.

Both resolvers are pure: the rig is a function of the preset and (for the
room) the bounds, and is rebuilt from scratch on every change.

Room lights are placed as follows:
    ceiling_y      = max_y * 0.9
    corner_x       = center_x + (extreme_x - center_x) * 0.8   (same for Z)
    light_distance = max(max_x - min_x, max_z - min_z) * 0.8

Each light's falloff is ``light_distance`` times its preset-specific scale.
"""

from __future__ import annotations

import logging

from .bounds import RoomBounds
from .presets import (
    FURNITURE_PRESETS,
    ROOM_PRESETS,
    Anchor,
    FurnitureLightingPreset,
    PointLightSpec,
    RoomLightingPreset,
    parse_furniture_preset,
    parse_room_preset,
)
from .rig import AmbientLight, FurnitureLightingRig, HemisphereLight, PointLight, RoomLightingRig
from ..core.config import RigGeometry

logger = logging.getLogger(__name__)


class RoomAnchors:
    """Concrete light anchor coordinates for one room."""

    def __init__(self, bounds: RoomBounds, geometry: RigGeometry | None = None):
        self.bounds = bounds
        self.geometry = geometry or RigGeometry()

        blend = self.geometry.corner_blend
        self.ceiling_y = bounds.max_y * self.geometry.ceiling_factor
        self.light_distance = bounds.horizontal_span * self.geometry.distance_factor

        near_max_x = bounds.center_x + (bounds.max_x - bounds.center_x) * blend
        near_min_x = bounds.center_x + (bounds.min_x - bounds.center_x) * blend
        near_max_z = bounds.center_z + (bounds.max_z - bounds.center_z) * blend
        near_min_z = bounds.center_z + (bounds.min_z - bounds.center_z) * blend

        self._horizontal = {
            Anchor.CORNER_MAX_X_MAX_Z: (near_max_x, near_max_z),
            Anchor.CORNER_MIN_X_MAX_Z: (near_min_x, near_max_z),
            Anchor.CORNER_MIN_X_MIN_Z: (near_min_x, near_min_z),
            Anchor.CORNER_MAX_X_MIN_Z: (near_max_x, near_min_z),
            Anchor.CENTER: (bounds.center_x, bounds.center_z),
        }

    def position(self, spec: PointLightSpec) -> tuple[float, float, float]:
        x, z = self._horizontal[spec.anchor]
        y = self.ceiling_y - self.geometry.intimate_drop if spec.lowered else self.ceiling_y
        return (x, y, z)

    def place(self, spec: PointLightSpec) -> PointLight:
        return PointLight(
            position=self.position(spec),
            color=spec.color,
            intensity=spec.intensity,
            falloff_distance=self.light_distance * spec.distance_scale,
            falloff_exponent=self.geometry.falloff_exponent,
            casts_shadow=True,
        )


def resolve_room_lighting(
    preset: RoomLightingPreset | str | None,
    bounds: RoomBounds | None,
    geometry: RigGeometry | None = None,
) -> RoomLightingRig | None:
    """Resolve the room lighting rig for a preset and room bounds.

    Args:
        preset: Room preset identifier; unknown identifiers behave like ``off``
        bounds: Room bounds, or None when no room is loaded
        geometry: Placement factors (defaults reproduce the standard layout)

    Returns:
        The rig with base intensities, or None for ``off``/unknown presets
        or when there is no room
    """
    if bounds is None:
        return None

    spec = ROOM_PRESETS.get(parse_room_preset(preset))
    if spec is None:
        return None

    anchors = RoomAnchors(bounds, geometry)

    hemisphere = None
    if spec.hemisphere is not None:
        hemisphere = HemisphereLight(
            sky_color=spec.hemisphere.sky_color,
            ground_color=spec.hemisphere.ground_color,
            intensity=spec.hemisphere.intensity,
            position=(bounds.center_x, anchors.ceiling_y, bounds.center_z),
        )

    return RoomLightingRig(
        ambient=AmbientLight(color=spec.ambient_color, intensity=spec.ambient_intensity),
        hemisphere=hemisphere,
        lights=tuple(anchors.place(light) for light in spec.lights),
    )


def resolve_furniture_lighting(
    preset: FurnitureLightingPreset | str | None,
) -> FurnitureLightingRig:
    """Resolve the furniture lighting rig; unknown presets use ``default``."""
    return FURNITURE_PRESETS[parse_furniture_preset(preset)]
