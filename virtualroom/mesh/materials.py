"""Room material brightness adjustment.

The room shell can be pushed toward overexposure by scaling its base colors
and adding emissive glow. Each material keeps the values it had when first
seen; every adjustment is recomputed from that baseline, so applying the
same brightness twice is a no-op and switching brightness never drifts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import numpy as np
import trimesh
from pydantic import BaseModel, Field, PrivateAttr

logger = logging.getLogger(__name__)

RGB = tuple[float, float, float]

# Emissive intensity added per unit of brightness above 1.0
GLOW_PER_BRIGHTNESS = 0.5


@dataclass(frozen=True)
class MaterialBaseline:
    """Material values captured before any brightness adjustment."""

    color: RGB
    emissive: RGB | None
    emissive_intensity: float


class SurfaceMaterial(BaseModel):
    """Render-facing material state of one room mesh material.

    Attributes:
        name: Material name from the asset
        color: Base color, RGB in 0-1
        emissive: Emissive color, or None if the material has no emissive channel
        emissive_intensity: Emissive strength
    """

    name: str = Field(default="")
    color: RGB = Field(default=(1.0, 1.0, 1.0))
    emissive: RGB | None = Field(default=(0.0, 0.0, 0.0))
    emissive_intensity: float = Field(default=0.0)

    # Captured once, on first adjustment (not serialized)
    _baseline: MaterialBaseline | None = PrivateAttr(default=None)

    model_config = {"frozen": False}

    @property
    def baseline(self) -> MaterialBaseline | None:
        return self._baseline

    def capture_baseline(self) -> MaterialBaseline:
        """Record the current values as baseline unless already recorded."""
        if self._baseline is None:
            self._baseline = MaterialBaseline(
                color=self.color,
                emissive=self.emissive,
                emissive_intensity=self.emissive_intensity,
            )
        return self._baseline

    def apply_brightness(self, brightness: float) -> None:
        """Rescale color and glow from the baseline for ``brightness``."""
        baseline = self.capture_baseline()

        self.color = tuple(min(channel * brightness, 1.0) for channel in baseline.color)

        if self.emissive is not None:
            if baseline.emissive is not None:
                self.emissive = baseline.emissive
            glow = max(brightness - 1.0, 0.0) * GLOW_PER_BRIGHTNESS
            self.emissive_intensity = baseline.emissive_intensity + glow


def _to_unit_rgb(values: Iterable[float] | None) -> RGB | None:
    """Normalize a color array (uint8 or float) to RGB floats in 0-1."""
    if values is None:
        return None
    arr = np.asarray(values)
    if arr.size < 3:
        return None
    rgb = arr[:3].astype(np.float64)
    if arr.dtype.kind in "ui":
        rgb = rgb / 255.0
    return (float(rgb[0]), float(rgb[1]), float(rgb[2]))


def _from_trimesh_material(material: object, fallback_name: str) -> SurfaceMaterial:
    name = getattr(material, "name", None) or fallback_name

    if isinstance(material, trimesh.visual.material.PBRMaterial):
        color = _to_unit_rgb(material.baseColorFactor) or (1.0, 1.0, 1.0)
        emissive = _to_unit_rgb(material.emissiveFactor) or (0.0, 0.0, 0.0)
        return SurfaceMaterial(name=name, color=color, emissive=emissive)

    # SimpleMaterial and friends carry a diffuse color but no emissive channel
    color = _to_unit_rgb(getattr(material, "diffuse", None)) or (1.0, 1.0, 1.0)
    return SurfaceMaterial(name=name, color=color, emissive=None)


def extract_materials(
    geometry: trimesh.Scene | trimesh.Trimesh | None,
) -> dict[str, SurfaceMaterial]:
    """Collect one SurfaceMaterial per distinct material instance.

    Meshes that share a material share the SurfaceMaterial, so the material
    is adjusted (and its baseline captured) exactly once.

    Returns:
        Mapping of mesh name to its SurfaceMaterial
    """
    if isinstance(geometry, trimesh.Trimesh):
        meshes = {"mesh": geometry}
    elif isinstance(geometry, trimesh.Scene):
        meshes = {
            name: geom for name, geom in geometry.geometry.items()
            if isinstance(geom, trimesh.Trimesh)
        }
    else:
        return {}

    by_instance: dict[int, SurfaceMaterial] = {}
    result: dict[str, SurfaceMaterial] = {}
    for mesh_name, mesh in meshes.items():
        source = getattr(mesh.visual, "material", None)
        if source is None:
            continue
        key = id(source)
        if key not in by_instance:
            by_instance[key] = _from_trimesh_material(source, fallback_name=mesh_name)
        result[mesh_name] = by_instance[key]
    return result


class MaterialBrightnessAdjuster:
    """Apply a brightness multiplier to a set of room materials."""

    def __init__(self, materials: dict[str, SurfaceMaterial] | None = None):
        self.materials = materials or {}
        self.brightness: float | None = None

    @classmethod
    def from_geometry(
        cls, geometry: trimesh.Scene | trimesh.Trimesh | None
    ) -> MaterialBrightnessAdjuster:
        return cls(extract_materials(geometry))

    def unique_materials(self) -> list[SurfaceMaterial]:
        seen: dict[int, SurfaceMaterial] = {}
        for material in self.materials.values():
            seen.setdefault(id(material), material)
        return list(seen.values())

    def apply(self, brightness: float) -> None:
        """Adjust every material to ``brightness``."""
        materials = self.unique_materials()
        for material in materials:
            material.apply_brightness(brightness)
        self.brightness = brightness
        logger.debug("Applied brightness %.2f to %d materials", brightness, len(materials))
