"""Tests for room material brightness adjustment."""

import pytest
import trimesh

from virtualroom.mesh.materials import (
    MaterialBrightnessAdjuster,
    SurfaceMaterial,
    extract_materials,
)


@pytest.fixture
def material() -> SurfaceMaterial:
    return SurfaceMaterial(
        name="wall",
        color=(0.5, 0.25, 0.8),
        emissive=(0.1, 0.0, 0.0),
        emissive_intensity=0.2,
    )


def _pbr_box(color, emissive=None) -> trimesh.Trimesh:
    box = trimesh.creation.box(extents=[1, 1, 1])
    box.visual = trimesh.visual.TextureVisuals(
        material=trimesh.visual.material.PBRMaterial(
            baseColorFactor=color,
            emissiveFactor=emissive,
        )
    )
    return box


class TestSurfaceMaterial:
    """Test brightness adjustment of a single material."""

    def test_scales_and_clamps_color(self, material):
        """Test that channels scale and never exceed 1."""
        material.apply_brightness(1.5)
        assert material.color == pytest.approx((0.75, 0.375, 1.0))

    def test_glow_above_one(self, material):
        """Test that emissive intensity grows only above brightness 1."""
        material.apply_brightness(2.0)
        assert material.emissive_intensity == pytest.approx(0.7)

        material.apply_brightness(0.5)
        assert material.emissive_intensity == pytest.approx(0.2)
        assert material.color == pytest.approx((0.25, 0.125, 0.4))

    def test_emissive_color_restored(self, material):
        """Test that emissive color stays at its baseline."""
        material.emissive = (0.9, 0.9, 0.9)
        material.capture_baseline()
        material.apply_brightness(2.0)
        assert material.emissive == (0.9, 0.9, 0.9)

    def test_idempotent(self, material):
        """Test that repeating a brightness changes nothing."""
        material.apply_brightness(1.5)
        once = (material.color, material.emissive_intensity)
        material.apply_brightness(1.5)
        assert (material.color, material.emissive_intensity) == once

    def test_no_drift(self, material):
        """Test that 1.5 then 2.0 equals 2.0 directly."""
        other = material.model_copy()

        material.apply_brightness(1.5)
        material.apply_brightness(2.0)
        other.apply_brightness(2.0)

        assert material.color == pytest.approx(other.color)
        assert material.emissive_intensity == pytest.approx(other.emissive_intensity)

    def test_baseline_captured_once(self, material):
        """Test that the baseline is the pre-adjustment state."""
        material.apply_brightness(3.0)
        material.apply_brightness(1.0)
        assert material.baseline.color == (0.5, 0.25, 0.8)
        assert material.color == pytest.approx((0.5, 0.25, 0.8))

    def test_without_emissive_channel(self):
        """Test materials that have no emissive channel."""
        plain = SurfaceMaterial(color=(0.4, 0.4, 0.4), emissive=None)
        plain.apply_brightness(2.0)
        assert plain.color == pytest.approx((0.8, 0.8, 0.8))
        assert plain.emissive is None
        assert plain.emissive_intensity == 0.0


class TestExtractMaterials:
    """Test reading materials from trimesh geometry."""

    def test_pbr_material(self):
        """Test reading base color and emissive from a PBR material."""
        box = _pbr_box([128, 64, 255, 255], emissive=[0.2, 0.0, 0.0])
        materials = extract_materials(trimesh.Scene({"wall": box}))

        wall = materials["wall"]
        assert wall.color == pytest.approx((128 / 255, 64 / 255, 1.0))
        assert wall.emissive == pytest.approx((0.2, 0.0, 0.0))

    def test_shared_material_instance(self):
        """Test that meshes sharing a material share one SurfaceMaterial."""
        a = _pbr_box([200, 200, 200, 255])
        b = trimesh.creation.box(extents=[1, 1, 1])
        b.visual = trimesh.visual.TextureVisuals(material=a.visual.material)

        materials = extract_materials(trimesh.Scene({"a": a, "b": b}))
        assert materials["a"] is materials["b"]

    def test_no_geometry(self):
        """Test extracting from nothing."""
        assert extract_materials(None) == {}


class TestMaterialBrightnessAdjuster:
    """Test adjusting a whole room."""

    def test_apply_to_geometry(self):
        """Test adjusting materials extracted from a scene."""
        scene = trimesh.Scene({"wall": _pbr_box([102, 102, 102, 255])})
        adjuster = MaterialBrightnessAdjuster.from_geometry(scene)

        adjuster.apply(2.0)
        assert adjuster.brightness == 2.0
        assert adjuster.materials["wall"].color == pytest.approx((0.8, 0.8, 0.8))

    def test_shared_material_adjusted_once(self, material):
        """Test that a shared material is not scaled twice."""
        adjuster = MaterialBrightnessAdjuster({"a": material, "b": material})
        adjuster.apply(1.5)
        assert len(adjuster.unique_materials()) == 1
        assert material.color == pytest.approx((0.75, 0.375, 1.0))
