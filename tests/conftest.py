"""Shared fixtures for VirtualRoom tests."""

import pytest
import trimesh

from virtualroom.lighting.bounds import RoomBounds


@pytest.fixture
def room_bounds() -> RoomBounds:
    """A 10 x 4 x 10 room centered on the origin, floor at Y=0."""
    return RoomBounds(
        min_x=-5.0, max_x=5.0,
        min_y=0.0, max_y=4.0,
        min_z=-5.0, max_z=5.0,
        center_x=0.0, center_y=2.0, center_z=0.0,
    )


@pytest.fixture
def room_geometry() -> trimesh.Scene:
    """Box room geometry matching the room_bounds fixture."""
    box = trimesh.creation.box(extents=[10, 4, 10])
    box.apply_translation([0.0, 2.0, 0.0])
    return trimesh.Scene(box)


@pytest.fixture
def glb_bytes(room_geometry: trimesh.Scene) -> bytes:
    """The room geometry encoded as binary glTF."""
    return room_geometry.export(file_type="glb")
