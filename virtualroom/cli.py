"""Command-line interface for VirtualRoom.

Usage:
    virtualroom presets
    virtualroom lighting room warm-evening --room room.glb
    virtualroom lighting furniture dramatic
    virtualroom scene create scene.json
    virtualroom scene add-asset scene.json chair.glb
    virtualroom scene info scene.json
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .core.config import StudioConfig
from .lighting.bounds import RoomBounds, calculate_room_bounds
from .lighting.presets import (
    ENVIRONMENT_PRESETS,
    FurnitureLightingPreset,
    RoomLightingPreset,
    list_presets,
)
from .lighting.resolver import resolve_furniture_lighting, resolve_room_lighting
from .lighting.rig import FurnitureLightingRig, RoomLightingRig
from .mesh.loader import AssetLoader, encode_data_url, is_data_url
from .scene.document import DocumentError, SceneDocument
from .scene.models import TransformMode
from .scene.store import SceneStore

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich output."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False)],
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    default=None,
    help="Path to configuration file",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """VirtualRoom - Interactive 3D room composition."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = StudioConfig.from_file(config) if config else StudioConfig.default()
    setup_logging(verbose)


def _config(ctx: click.Context) -> StudioConfig:
    return ctx.obj["config"]


def _fmt_vec(values: tuple[float, ...], precision: int = 2) -> str:
    return "(" + ", ".join(f"{v:.{precision}f}" for v in values) + ")"


def _print_room_rig(rig: RoomLightingRig | None, bounds: RoomBounds) -> None:
    console.print(
        f"[cyan]Room bounds:[/cyan] min {_fmt_vec((bounds.min_x, bounds.min_y, bounds.min_z))} "
        f"max {_fmt_vec((bounds.max_x, bounds.max_y, bounds.max_z))}"
    )
    if rig is None:
        console.print("[yellow]Room lighting is off[/yellow]")
        return

    console.print(f"[cyan]Ambient:[/cyan] {rig.ambient.color} @ {rig.ambient.intensity:.2f}")
    if rig.hemisphere is not None:
        hemi = rig.hemisphere
        console.print(
            f"[cyan]Hemisphere:[/cyan] sky {hemi.sky_color} / ground {hemi.ground_color} "
            f"@ {hemi.intensity:.2f} at {_fmt_vec(hemi.position)}"
        )

    table = Table(title="Point lights")
    table.add_column("#", style="dim")
    table.add_column("Position", style="green")
    table.add_column("Color", style="cyan")
    table.add_column("Intensity", style="yellow")
    table.add_column("Distance", style="magenta")
    table.add_column("Decay", style="dim")

    for index, light in enumerate(rig.lights):
        table.add_row(
            str(index),
            _fmt_vec(light.position),
            light.color,
            f"{light.intensity:.2f}",
            f"{light.falloff_distance:.2f}",
            f"{light.falloff_exponent:g}",
        )
    console.print(table)


def _print_furniture_rig(rig: FurnitureLightingRig) -> None:
    key = rig.directional
    console.print(f"[cyan]Ambient:[/cyan] {rig.ambient.color} @ {rig.ambient.intensity:.2f}")
    console.print(
        f"[cyan]Directional:[/cyan] {key.color} @ {key.intensity:.2f} "
        f"from {_fmt_vec(key.position, 0)}, shadows "
        f"{'on' if key.casts_shadow else 'off'} ({key.shadow_map_size[0]}x{key.shadow_map_size[1]})"
    )


@main.command()
def presets() -> None:
    """List available lighting and environment presets."""
    console.print("\n[bold]Lighting Presets[/bold]\n")

    table = Table()
    table.add_column("Region", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Label", style="white")

    for preset in list_presets():
        table.add_row(preset["region"], preset["name"], preset["label"])

    console.print(table)
    console.print(f"\n[cyan]Environments:[/cyan] {', '.join(ENVIRONMENT_PRESETS)}")


@main.command()
@click.option(
    "--output", "-o",
    type=click.Path(),
    default="virtualroom_config.json",
    help="Output path for config file",
)
@click.pass_context
def init_config(ctx: click.Context, output: str) -> None:
    """Generate a default configuration file."""
    try:
        _config(ctx).to_file(output)
        console.print(f"[green]Created config file: {output}[/green]")
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise click.Abort()


@main.group()
def lighting() -> None:
    """Inspect resolved lighting rigs."""
    pass


@lighting.command("room")
@click.argument("preset")
@click.option(
    "--room", "room_path",
    type=click.Path(exists=True),
    default=None,
    help="Room asset to derive bounds from",
)
@click.option(
    "--bounds",
    nargs=6, type=float,
    default=None,
    help="Explicit bounds: MIN_X MAX_X MIN_Y MAX_Y MIN_Z MAX_Z",
)
@click.option("--intensity", "-i", type=float, default=1.0, help="Intensity multiplier")
@click.pass_context
def lighting_room(
    ctx: click.Context,
    preset: str,
    room_path: str | None,
    bounds: tuple[float, ...] | None,
    intensity: float,
) -> None:
    """Show the room lighting rig for PRESET.

    Bounds come from a room asset (--room) or are given directly (--bounds).
    """
    if room_path is not None:
        try:
            room_bounds = calculate_room_bounds(AssetLoader(room_path).scene)
        except (OSError, ValueError) as e:
            console.print(f"[red]Error loading room: {e}[/red]")
            raise click.Abort()
    elif bounds:
        min_x, max_x, min_y, max_y, min_z, max_z = bounds
        room_bounds = RoomBounds.from_extents((min_x, min_y, min_z), (max_x, max_y, max_z))
    else:
        console.print("[red]Provide --room or --bounds[/red]")
        raise click.Abort()

    rig = resolve_room_lighting(preset, room_bounds, _config(ctx).rig)
    if rig is not None:
        rig = rig.scaled(intensity)

    console.print(f"\n[bold]Room lighting: {preset}[/bold]\n")
    _print_room_rig(rig, room_bounds)


@lighting.command("furniture")
@click.argument("preset")
@click.option("--intensity", "-i", type=float, default=1.0, help="Intensity multiplier")
def lighting_furniture(preset: str, intensity: float) -> None:
    """Show the furniture lighting rig for PRESET."""
    rig = resolve_furniture_lighting(preset).scaled(intensity)
    console.print(f"\n[bold]Furniture lighting: {preset}[/bold]\n")
    _print_furniture_rig(rig)


@main.group()
def scene() -> None:
    """Scene document commands."""
    pass


def _open_scene(ctx: click.Context, scene_file: str) -> SceneStore:
    """Load a scene document into a fresh store."""
    store = SceneStore(_config(ctx))
    try:
        store.load_document(SceneDocument.load(scene_file))
    except DocumentError as e:
        console.print("[red]Error loading scene file. It may be corrupted.[/red]")
        console.print(f"[dim]{e}[/dim]")
        raise click.Abort()
    return store


def _save_scene(store: SceneStore, scene_file: str) -> None:
    store.to_document().save(scene_file)


@scene.command("create")
@click.argument("output", type=click.Path())
@click.pass_context
def scene_create(ctx: click.Context, output: str) -> None:
    """Create a new empty scene file.

    OUTPUT: Path for the new scene document (.json)
    """
    output_path = Path(output)
    if not output_path.suffix:
        output_path = output_path.with_suffix(_config(ctx).document_suffix)

    store = SceneStore(_config(ctx))
    _save_scene(store, str(output_path))
    console.print(f"[green]Created scene: {output_path}[/green]")


@scene.command("add-asset")
@click.argument("scene_file", type=click.Path(exists=True))
@click.argument("model_path", type=click.Path(exists=True))
@click.option("--embed", is_flag=True, help="Embed the asset in the scene file")
@click.pass_context
def scene_add_asset(ctx: click.Context, scene_file: str, model_path: str, embed: bool) -> None:
    """Add a model file to the scene library.

    SCENE_FILE: Path to the scene file
    MODEL_PATH: Path to the .glb file
    """
    cfg = _config(ctx)
    path = Path(model_path)
    if path.suffix.lower() not in cfg.allowed_asset_suffixes:
        console.print(f"[red]Please select a {' or '.join(cfg.allowed_asset_suffixes)} file.[/red]")
        raise click.Abort()

    store = _open_scene(ctx, scene_file)
    if store.has_asset(path.name):
        console.print(f"[yellow]{path.name} is already in the library.[/yellow]")
        raise click.Abort()

    url = encode_data_url(path) if embed else str(path.resolve())
    store.add_asset(path.name, url)
    _save_scene(store, scene_file)

    console.print(f"[green]Added {path.name} to library[/green]")
    console.print(f"Library now has {len(store.library)} asset(s)")


@scene.command("remove-asset")
@click.argument("scene_file", type=click.Path(exists=True))
@click.argument("name")
@click.pass_context
def scene_remove_asset(ctx: click.Context, scene_file: str, name: str) -> None:
    """Remove an asset and every item placed from it."""
    store = _open_scene(ctx, scene_file)
    before = len(store.items)

    if not store.remove_asset(name):
        console.print(f"[red]Asset {name} not found in library[/red]")
        raise click.Abort()

    _save_scene(store, scene_file)
    console.print(f"[green]Removed {name}[/green] ({before - len(store.items)} item(s) removed)")


@scene.command("place")
@click.argument("scene_file", type=click.Path(exists=True))
@click.argument("name")
@click.pass_context
def scene_place(ctx: click.Context, scene_file: str, name: str) -> None:
    """Place a new item from library asset NAME."""
    store = _open_scene(ctx, scene_file)
    try:
        item = store.add_item(name)
    except KeyError:
        console.print(f"[red]Asset {name} not found in library[/red]")
        raise click.Abort()

    _save_scene(store, scene_file)
    console.print(f"[green]Placed {item.name}[/green]")
    console.print(f"  ID: {item.id}")
    console.print(f"  Position: {_fmt_vec(item.position)}")


@scene.command("move")
@click.argument("scene_file", type=click.Path(exists=True))
@click.argument("item_id")
@click.option("--position", "-p", nargs=3, type=float, default=None, help="XYZ position")
@click.option("--rotation", "-r", nargs=3, type=float, default=None, help="XYZ rotation in radians")
@click.option("--scale", "-s", nargs=3, type=float, default=None, help="XYZ scale")
@click.option(
    "--mode", "-m",
    type=click.Choice([m.value for m in TransformMode]),
    default=None,
    help="Only apply the field edited by this gizmo mode",
)
@click.pass_context
def scene_move(
    ctx: click.Context,
    scene_file: str,
    item_id: str,
    position: tuple[float, float, float] | None,
    rotation: tuple[float, float, float] | None,
    scale: tuple[float, float, float] | None,
    mode: str | None,
) -> None:
    """Update the transform of an item."""
    changes = {
        key: value
        for key, value in (("position", position), ("rotation", rotation), ("scale", scale))
        if value
    }
    if mode is not None:
        field_for_mode = {
            TransformMode.TRANSLATE: "position",
            TransformMode.ROTATE: "rotation",
            TransformMode.SCALE: "scale",
        }[TransformMode(mode)]
        changes = {k: v for k, v in changes.items() if k == field_for_mode}

    if not changes:
        console.print("[yellow]Nothing to update[/yellow]")
        return

    store = _open_scene(ctx, scene_file)
    item = store.update_item(item_id, **changes)
    if item is None:
        console.print(f"[red]Item {item_id} not found in scene[/red]")
        raise click.Abort()

    _save_scene(store, scene_file)
    t = item.transform
    console.print(
        f"[green]Updated {item.name}[/green] pos {_fmt_vec(t.position)} "
        f"rot {_fmt_vec(t.rotation_degrees(), 1)}° scale {_fmt_vec(t.scale)}"
    )


@scene.command("delete")
@click.argument("scene_file", type=click.Path(exists=True))
@click.argument("item_id")
@click.pass_context
def scene_delete(ctx: click.Context, scene_file: str, item_id: str) -> None:
    """Delete an item from the scene."""
    store = _open_scene(ctx, scene_file)
    if not store.delete_item(item_id):
        console.print(f"[red]Item {item_id} not found in scene[/red]")
        raise click.Abort()

    _save_scene(store, scene_file)
    console.print(f"[green]Deleted item {item_id}[/green]")
    console.print(f"Scene now has {len(store.items)} item(s)")


@scene.command("set")
@click.argument("scene_file", type=click.Path(exists=True))
@click.option("--environment", "-e", default=None, help="Environment map preset")
@click.option(
    "--room-preset",
    type=click.Choice([p.value for p in RoomLightingPreset]),
    default=None,
    help="Room lighting preset",
)
@click.option(
    "--furniture-preset",
    type=click.Choice([p.value for p in FurnitureLightingPreset]),
    default=None,
    help="Furniture lighting preset",
)
@click.option("--room-intensity", type=float, default=None, help="Room light multiplier")
@click.option("--furniture-intensity", type=float, default=None, help="Furniture light multiplier")
@click.option("--brightness", type=float, default=None, help="Room material brightness")
@click.pass_context
def scene_set(
    ctx: click.Context,
    scene_file: str,
    environment: str | None,
    room_preset: str | None,
    furniture_preset: str | None,
    room_intensity: float | None,
    furniture_intensity: float | None,
    brightness: float | None,
) -> None:
    """Change environment and lighting settings."""
    cfg = _config(ctx)
    store = _open_scene(ctx, scene_file)

    if environment is not None:
        store.set_environment(environment)
    if room_preset is not None:
        store.set_room_lighting_preset(room_preset)
    if furniture_preset is not None:
        store.set_furniture_lighting_preset(furniture_preset)
    if room_intensity is not None:
        store.set_room_light_intensity(room_intensity)
    if furniture_intensity is not None:
        store.set_furniture_light_intensity(furniture_intensity)
    if brightness is not None:
        store.set_room_material_brightness(brightness)

    low, high = cfg.intensity_range
    for label, value in (("Room intensity", room_intensity), ("Furniture intensity", furniture_intensity)):
        if value is not None and not low <= value <= high:
            console.print(f"[yellow]{label} {value} is outside the usual {low}-{high} range[/yellow]")
    low, high = cfg.brightness_range
    if brightness is not None and not low <= brightness <= high:
        console.print(f"[yellow]Brightness {brightness} is outside the usual {low}-{high} range[/yellow]")

    _save_scene(store, scene_file)
    console.print("[green]Scene settings updated[/green]")


@scene.command("info")
@click.argument("scene_file", type=click.Path(exists=True))
@click.pass_context
def scene_info(ctx: click.Context, scene_file: str) -> None:
    """Show information about a scene.

    SCENE_FILE: Path to the scene file
    """
    store = _open_scene(ctx, scene_file)
    base_dir = Path(scene_file).resolve().parent

    console.print(f"\n[bold]Scene: {Path(scene_file).name}[/bold]\n")

    console.print("[cyan]Lighting:[/cyan]")
    console.print(f"  Environment: {store.environment}")
    console.print(
        f"  Room: {store.room_lighting_preset.value} x{store.room_light_intensity:.1f}, "
        f"brightness x{store.room_material_brightness:.1f}"
    )
    console.print(
        f"  Furniture: {store.furniture_lighting_preset.value} x{store.furniture_light_intensity:.1f}"
    )

    console.print(f"\n[cyan]Library ({len(store.library)}):[/cyan]")
    for asset in store.library:
        source = "embedded" if is_data_url(asset.url) else asset.url
        console.print(f"  {asset.name} [dim]{source}[/dim]")

    if not store.items:
        console.print("\n[yellow]No items in scene[/yellow]")
        return

    table = Table(title=f"Items ({len(store.items)})")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Position", style="green")
    table.add_column("Rotation (deg)", style="yellow")
    table.add_column("Scale", style="magenta")

    for item in store.items:
        t = item.transform
        table.add_row(
            item.id[:8],
            item.name,
            _fmt_vec(t.position),
            _fmt_vec(t.rotation_degrees(), 1),
            _fmt_vec(t.scale),
        )
    console.print(table)

    room_items = [item for item in store.items if store.is_room_item(item)]
    if not room_items:
        return

    try:
        store.load_item_geometry(room_items[-1].id, base_dir)
    except (OSError, ValueError) as e:
        console.print(f"\n[yellow]Could not load room asset: {e}[/yellow]")
        return

    console.print()
    _print_room_rig(store.room_lighting(), store.room_bounds)


@scene.command("export")
@click.argument("scene_file", type=click.Path(exists=True))
@click.argument("output", type=click.Path())
@click.pass_context
def scene_export(ctx: click.Context, scene_file: str, output: str) -> None:
    """Export item transforms and lighting without asset payloads."""
    store = _open_scene(ctx, scene_file)
    store.to_info().save(output)
    console.print(f"[green]Exported scene info: {output}[/green]")
    console.print(f"  {len(store.items)} item(s)")


if __name__ == "__main__":
    main()
