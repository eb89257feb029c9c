"""Core modules for VirtualRoom."""

from .config import DocumentDefaults, PlacementDefaults, RigGeometry, StudioConfig

__all__ = ["DocumentDefaults", "PlacementDefaults", "RigGeometry", "StudioConfig"]
