"""Asset loading and material modules for VirtualRoom."""

from .loader import AssetLoader, decode_data_url, encode_data_url, load_asset
from .materials import MaterialBrightnessAdjuster, SurfaceMaterial, extract_materials

__all__ = [
    "AssetLoader",
    "decode_data_url",
    "encode_data_url",
    "load_asset",
    "MaterialBrightnessAdjuster",
    "SurfaceMaterial",
    "extract_materials",
]
