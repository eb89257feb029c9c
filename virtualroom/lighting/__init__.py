"""Room and furniture lighting.

Bounds of the room asset feed the room resolver, which places preset lights
under the ceiling. Furniture lighting is independent of any geometry.
"""

from .bounds import RoomBounds, calculate_room_bounds
from .presets import (
    ENVIRONMENT_PRESETS,
    FurnitureLightingPreset,
    RoomLightingPreset,
    list_presets,
    parse_furniture_preset,
    parse_room_preset,
)
from .resolver import resolve_furniture_lighting, resolve_room_lighting
from .rig import (
    AmbientLight,
    DirectionalLight,
    FurnitureLightingRig,
    HemisphereLight,
    PointLight,
    RoomLightingRig,
)

__all__ = [
    "RoomBounds",
    "calculate_room_bounds",
    "ENVIRONMENT_PRESETS",
    "FurnitureLightingPreset",
    "RoomLightingPreset",
    "list_presets",
    "parse_furniture_preset",
    "parse_room_preset",
    "resolve_furniture_lighting",
    "resolve_room_lighting",
    "AmbientLight",
    "DirectionalLight",
    "FurnitureLightingRig",
    "HemisphereLight",
    "PointLight",
    "RoomLightingRig",
]
