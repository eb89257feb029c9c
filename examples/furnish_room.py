#!/usr/bin/env python3
"""Example: Furnish a box-shaped room and light it.

This script demonstrates the basic workflow for VirtualRoom:
1. Add a room shell and a piece of furniture to the library
2. Place both in the scene and deliver the room geometry
3. Switch presets and inspect the resolved lighting

Run with: python examples/furnish_room.py
"""

import trimesh

from virtualroom import SceneStore, build_frame


def create_test_room(width: float = 10.0, height: float = 4.0) -> trimesh.Scene:
    """Create a box room standing on the floor plane."""
    room = trimesh.creation.box(extents=[width, height, width])
    room.apply_translation([0.0, height / 2, 0.0])
    return trimesh.Scene(room)


def main():
    store = SceneStore()

    print("VirtualRoom - Furnish Room Example")
    print("=" * 40)

    print("\n1. Building library...")
    store.add_asset("room.glb", "assets/room.glb")
    store.add_asset("chair.glb", "assets/chair.glb")
    print(f"   Library: {[asset.name for asset in store.library]}")

    print("\n2. Placing items...")
    room = store.add_item("room.glb")
    chair = store.add_item("chair.glb")
    store.update_item(chair.id, position=(2.0, 0.0, -1.5))

    # Geometry normally arrives from the renderer's loader
    ticket = store.begin_load(room.id)
    store.complete_load(ticket, create_test_room())
    print(f"   Room bounds size: {store.room_bounds.size}")

    print("\n3. Lighting...")
    for preset in ("warm-evening", "cozy-night", "off"):
        store.set_room_lighting_preset(preset)
        rig = store.room_lighting()
        count = len(rig.lights) if rig else 0
        print(f"   {preset}: {count} point lights")

    store.set_room_lighting_preset("warm-evening")
    store.set_room_light_intensity(1.5)
    frame = build_frame(store)
    center = frame.room_lighting.lights[-1]
    print(f"   Center light at {center.position}, intensity {center.intensity:.2f}")

    print("\n4. Export...")
    print(store.to_info().to_json())


if __name__ == "__main__":
    main()
