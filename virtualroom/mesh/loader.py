"""Asset loading utilities using trimesh.

Library assets reference their geometry either by a file path or by an
embedded ``data:`` URL holding the base64-encoded binary glTF. This module
turns either form into a ``trimesh.Scene``.
"""

from __future__ import annotations

import base64
import binascii
import io
from pathlib import Path

import numpy as np
import trimesh

GLB_MEDIA_TYPE = "model/gltf-binary"


def encode_data_url(path: str | Path, media_type: str = GLB_MEDIA_TYPE) -> str:
    """Embed a file as a base64 ``data:`` URL.

    Args:
        path: File to embed
        media_type: Media type recorded in the URL header

    Returns:
        The data URL string
    """
    data = Path(path).read_bytes()
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(url: str) -> bytes:
    """Decode a base64 ``data:`` URL into raw bytes.

    Raises:
        ValueError: If the URL is not a base64 data URL
    """
    header, sep, payload = url.partition(",")
    if not url.startswith("data:") or not sep or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URL")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def is_data_url(url: str) -> bool:
    return url.startswith("data:")


class AssetLoader:
    """Load a library asset payload into a trimesh scene."""

    SUPPORTED_FORMATS = {".glb", ".gltf", ".obj", ".stl", ".ply", ".off"}

    def __init__(self, url: str, base_dir: Path | None = None):
        """Load an asset.

        Args:
            url: File path or base64 data URL of a binary glTF
            base_dir: Base directory for relative file paths
        """
        self.url = url

        if is_data_url(url):
            self.source = "embedded"
            data = decode_data_url(url)
            self._scene = trimesh.load(io.BytesIO(data), file_type="glb", force="scene")
        else:
            path = Path(url)
            if not path.is_absolute() and base_dir is not None:
                path = base_dir / path
            if not path.exists():
                raise FileNotFoundError(f"Asset file not found: {path}")
            if path.suffix.lower() not in self.SUPPORTED_FORMATS:
                raise ValueError(
                    f"Unsupported format: {path.suffix}. "
                    f"Supported: {self.SUPPORTED_FORMATS}"
                )
            self.source = str(path)
            self._scene = trimesh.load(str(path), force="scene")

    @property
    def scene(self) -> trimesh.Scene:
        """Return the loaded scene."""
        return self._scene

    @property
    def meshes(self) -> list[trimesh.Trimesh]:
        """Return every triangle mesh in the scene."""
        return [
            geom for geom in self._scene.geometry.values()
            if isinstance(geom, trimesh.Trimesh)
        ]

    @property
    def num_vertices(self) -> int:
        return sum(len(mesh.vertices) for mesh in self.meshes)

    @property
    def num_faces(self) -> int:
        return sum(len(mesh.faces) for mesh in self.meshes)

    def stats(self) -> dict:
        """Return statistics about the asset."""
        bounds = self._scene.bounds
        return {
            "source": self.source,
            "num_meshes": len(self.meshes),
            "num_vertices": self.num_vertices,
            "num_faces": self.num_faces,
            "bounds_min": np.asarray(bounds[0]).tolist() if bounds is not None else None,
            "bounds_max": np.asarray(bounds[1]).tolist() if bounds is not None else None,
        }

    def __repr__(self) -> str:
        return (
            f"AssetLoader({self.source}, "
            f"{len(self.meshes)} meshes, "
            f"{self.num_faces} faces)"
        )


def load_asset(url: str, base_dir: Path | None = None) -> trimesh.Scene:
    """Convenience function to load an asset payload directly.

    Args:
        url: File path or data URL

    Returns:
        trimesh.Scene object
    """
    return AssetLoader(url, base_dir).scene
