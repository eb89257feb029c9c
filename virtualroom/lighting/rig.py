"""Lighting rig descriptors.

A rig is the resolved set of light sources for one region of the scene. Rigs
are immutable; any change of preset, bounds or multiplier produces a new rig.
Intensities in a resolved rig are base values and ``scaled()`` is the only
place a runtime multiplier is applied.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

Vec3 = tuple[float, float, float]


class AmbientLight(BaseModel):
    """Uniform fill light."""

    color: str = Field(description="Hex color")
    intensity: float

    model_config = {"frozen": True}

    def scaled(self, multiplier: float) -> AmbientLight:
        return self.model_copy(update={"intensity": self.intensity * multiplier})


class HemisphereLight(BaseModel):
    """Sky/ground gradient light for ceiling and floor color bounce."""

    sky_color: str
    ground_color: str
    intensity: float
    position: Vec3

    model_config = {"frozen": True}

    def scaled(self, multiplier: float) -> HemisphereLight:
        return self.model_copy(update={"intensity": self.intensity * multiplier})


class PointLight(BaseModel):
    """Omnidirectional light with distance falloff."""

    position: Vec3
    color: str
    intensity: float
    falloff_distance: float = Field(ge=0, description="Distance at which the light reaches zero")
    falloff_exponent: float = Field(default=2.0, ge=0, description="Decay exponent")
    casts_shadow: bool = True

    model_config = {"frozen": True}

    def scaled(self, multiplier: float) -> PointLight:
        return self.model_copy(update={"intensity": self.intensity * multiplier})


class DirectionalLight(BaseModel):
    """Sun-like key light shining from ``position`` toward the origin."""

    color: str
    position: Vec3
    intensity: float
    casts_shadow: bool = True
    shadow_map_size: tuple[int, int] = Field(
        default=(2048, 2048),
        description="Shadow map resolution hint (width, height)"
    )

    model_config = {"frozen": True}

    def scaled(self, multiplier: float) -> DirectionalLight:
        return self.model_copy(update={"intensity": self.intensity * multiplier})


class RoomLightingRig(BaseModel):
    """Lights derived from the room bounds for a room preset."""

    ambient: AmbientLight
    hemisphere: HemisphereLight | None = None
    lights: tuple[PointLight, ...] = ()

    model_config = {"frozen": True}

    def scaled(self, multiplier: float) -> RoomLightingRig:
        """Return a copy with every intensity multiplied by ``multiplier``."""
        return RoomLightingRig(
            ambient=self.ambient.scaled(multiplier),
            hemisphere=self.hemisphere.scaled(multiplier) if self.hemisphere else None,
            lights=tuple(light.scaled(multiplier) for light in self.lights),
        )


class FurnitureLightingRig(BaseModel):
    """Bounds-independent lights for furniture items."""

    ambient: AmbientLight
    directional: DirectionalLight

    model_config = {"frozen": True}

    def scaled(self, multiplier: float) -> FurnitureLightingRig:
        """Return a copy with every intensity multiplied by ``multiplier``."""
        return FurnitureLightingRig(
            ambient=self.ambient.scaled(multiplier),
            directional=self.directional.scaled(multiplier),
        )
