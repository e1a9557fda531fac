"""Command-line interface for theme-forge."""

import json
import logging
import random
import sys
from enum import Enum
from pathlib import Path
from typing import Dict, Type

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table
from rich.text import Text

from .config import Config, get_config
from .contrast_control import contrast_control
from .engine.audit import summarize
from .engine.converters import hex_to_hsl, to_display
from .engine.inference import InferenceCancelled
from .engine.theme_engine import ThemeEngine
from .export import ExportFormat, ExportManager
from .presets import (
    THEMATIC_PRESETS,
    PresetRegistry,
    apply_preset,
    apply_thematic_preset,
    chaos,
    invert_base,
    randomize,
)
from .schema import (
    HSL,
    ColorSpace,
    HarmonyRule,
    OutputFormat,
    SeedColor,
    SeedName,
    ThemeMode,
    ThemeParameters,
    VariantStrategy,
    is_hex_color,
)


console = Console()


def resolve_enum(enum_cls: Type[Enum], text: str):
    """Match an enum by value, by name, or by value without its "(n)" suffix."""
    wanted = text.strip().lower()
    for member in enum_cls:
        value = member.value.lower()
        if wanted in (value, member.name.lower(), value.split(" (")[0]):
            return member
    raise click.BadParameter(f"Unknown {enum_cls.__name__}: {text}")


def get_engine() -> ThemeEngine:
    """Get a theme engine sized from config."""
    return ThemeEngine.from_config(get_config())


def generation_options(func):
    """Shared generation parameter options."""
    options = [
        click.option("--hue", type=float, help="Base hue (0-360)"),
        click.option("--saturation", type=float, help="Base saturation (0-100)"),
        click.option("--lightness", type=float, help="Base lightness (0-100)"),
        click.option("--harmony", "-h", help="Harmony rule, e.g. 'Triadic'"),
        click.option("--spread", type=float, help="Spread angle (0-180)"),
        click.option("--strategy", "-s", help="Variant strategy, e.g. 'Vibrant'"),
        click.option("--count", type=int, help="Variant steps per side (1-12)"),
        click.option("--brightness", type=float, help="Brightness for the active mode"),
        click.option("--contrast", type=float, help="Contrast for the active mode"),
        click.option("--space", help="Generation color space"),
        click.option("--output-format", help="Display format"),
        click.option("--mode", "-m", type=click.Choice(['light', 'dark']), help="Theme mode"),
        click.option("--name", help="Theme name"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_parameters(hue=None, saturation=None, lightness=None, harmony=None,
                     spread=None, strategy=None, count=None, brightness=None,
                     contrast=None, space=None, output_format=None, mode=None,
                     name=None) -> ThemeParameters:
    """Parameters from config defaults overlaid with command options."""
    params = get_config().to_parameters()
    base = params.base_color
    update: Dict[str, object] = {
        'base_color': HSL.normalized(
            base.h if hue is None else hue,
            base.s if saturation is None else saturation,
            base.l if lightness is None else lightness,
        ),
    }
    if harmony:
        update['harmony'] = resolve_enum(HarmonyRule, harmony)
    if spread is not None:
        update['spread'] = max(0.0, min(180.0, spread))
    if strategy:
        update['strategy'] = resolve_enum(VariantStrategy, strategy)
    if count is not None:
        update['variant_count'] = max(1, min(12, count))
    if space:
        update['color_space'] = resolve_enum(ColorSpace, space)
    if output_format:
        update['output_format'] = resolve_enum(OutputFormat, output_format)
    if mode:
        update['mode'] = ThemeMode(mode)
    if name:
        update['theme_name'] = name

    params = params.model_copy(update=update)
    prefix = params.mode.value
    if brightness is not None:
        params = params.model_copy(update={f'{prefix}_brightness': max(0.0, min(100.0, brightness))})
    if contrast is not None:
        params = params.model_copy(update={f'{prefix}_contrast': max(0.0, min(100.0, contrast))})
    return params


def swatch(hex_color: str, width: int = 3) -> Text:
    """A colored block for a hex color."""
    if not is_hex_color(hex_color):
        return Text(hex_color)
    return Text(" " * width, style=f"on {hex_color}")


def render_parameters(params: ThemeParameters) -> Panel:
    base = params.base_color
    lines = [
        f"[bold]Name:[/bold] {params.theme_name}",
        f"[bold]Base:[/bold] h={base.h:.1f} s={base.s:.1f} l={base.l:.1f}",
        f"[bold]Harmony:[/bold] {params.harmony.value}  [bold]Spread:[/bold] {params.spread:g}",
        f"[bold]Strategy:[/bold] {params.strategy.value}  [bold]Variants:[/bold] {params.variant_count}",
        f"[bold]Space:[/bold] {params.color_space.value}  [bold]Output:[/bold] {params.output_format.value}",
        f"[bold]Mode:[/bold] {params.mode.value}",
    ]
    return Panel("\n".join(lines), title="Parameters", border_style="blue")


def seeds_table(seeds, output: OutputFormat = OutputFormat.SRGB) -> Table:
    table = Table(title="Seeds", show_header=True, header_style="bold magenta")
    table.add_column("", width=3)
    table.add_column("Seed", style="cyan")
    table.add_column("Hex")
    table.add_column("HSL", style="dim")
    if output != OutputFormat.SRGB:
        table.add_column(output.value)
    for seed in seeds:
        row = [
            swatch(seed.hex),
            seed.name.value,
            seed.hex,
            f"{seed.hsl.h:.0f}, {seed.hsl.s:.0f}%, {seed.hsl.l:.0f}%",
        ]
        if output != OutputFormat.SRGB:
            row.append(to_display(seed.hsl, ColorSpace.HSL, output))
        table.add_row(*row)
    return table


@click.group(invoke_without_command=True)
@click.option("--config", type=click.Path(), help="Path to config file")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def main(ctx, config, verbose):
    """theme-forge - generate accessible color themes."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Load configuration
    if config:
        cfg = Config.reload(Path(config))
    else:
        cfg = get_config()
    if cfg.no_color:
        console.no_color = True

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@generation_options
@click.option("--randomize", "randomize_", is_flag=True, help="Randomize the parameters")
@click.option("--chaos", "chaos_", is_flag=True, help="Extreme random parameters")
@click.option("--invert", is_flag=True, help="Invert the base color")
@click.option("--seed", "rng_seed", type=int, help="Random seed for --randomize/--chaos")
def generate(randomize_, chaos_, invert, rng_seed, **options):
    """Generate and show the harmony palette."""
    try:
        params = build_parameters(**options)
        rng = random.Random(rng_seed)
        if randomize_:
            params = randomize(params, rng)
        if chaos_:
            params = chaos(params, rng)
        if invert:
            params = invert_base(params)

        theme = get_engine().build(params)

        console.print(render_parameters(params))
        table = Table(title="Palette", show_header=True, header_style="bold magenta")
        table.add_column("#", style="dim", width=3)
        table.add_column("Base")
        table.add_column("Ramp")
        for idx, group in enumerate(theme.palette):
            ramp = Text()
            for stop in group.variants:
                ramp.append_text(swatch(stop.hex, 2))
            marker = " *" if group.base.is_base else ""
            table.add_row(str(idx + 1), Text(group.base.display_string + marker), ramp)
        console.print(table)
    except click.BadParameter:
        raise
    except Exception as e:
        console.print(f"[red]Error generating palette: {e}[/red]")
        sys.exit(1)


@main.command()
@generation_options
def seeds(**options):
    """Show the nine semantic seeds."""
    try:
        params = build_parameters(**options)
        theme = get_engine().build(params)
        console.print(seeds_table(theme.seeds, params.output_format))
    except click.BadParameter:
        raise
    except Exception as e:
        console.print(f"[red]Error generating seeds: {e}[/red]")
        sys.exit(1)


@main.command()
@generation_options
@click.option("--filter", "-f", "prefix", help="Only tokens starting with this prefix")
@click.option("--json", "as_json", is_flag=True, help="Print the token map as JSON")
def tokens(prefix, as_json, **options):
    """Show the synthesized design tokens."""
    try:
        params = build_parameters(**options)
        theme = get_engine().build(params)
        token_map = {k: v for k, v in theme.tokens.items() if not prefix or k.startswith(prefix)}

        if as_json:
            click.echo(json.dumps(token_map, indent=2))
            return

        table = Table(title=f"Tokens ({params.mode.value})", show_header=True, header_style="bold magenta")
        table.add_column("", width=3)
        table.add_column("Token", style="cyan")
        table.add_column("Value")
        for token, value in token_map.items():
            table.add_row(swatch(value), token, value)
        console.print(table)
        console.print(f"[dim]{len(token_map)} tokens[/dim]")
    except click.BadParameter:
        raise
    except Exception as e:
        console.print(f"[red]Error synthesizing tokens: {e}[/red]")
        sys.exit(1)


@main.command()
@generation_options
@click.option("--all", "show_all", is_flag=True, help="Show passing pairs too")
@click.option("--category", "-c", help="Only categories containing this text")
def audit(show_all, category, **options):
    """Run the WCAG contrast audit."""
    try:
        params = build_parameters(**options)
        pairs = get_engine().audit(params)
        if category:
            pairs = [p for p in pairs if category.upper() in p.category]

        shown = pairs if show_all else [p for p in pairs if not p.score.passed]
        table = Table(title="Contrast audit", show_header=True, header_style="bold magenta")
        table.add_column("Category", style="dim")
        table.add_column("Pair", style="cyan")
        table.add_column("", width=3)
        table.add_column("Ratio", justify="right")
        table.add_column("Level")
        table.add_column("Result")
        for pair in shown:
            result = "[green]pass[/green]" if pair.score.passed else "[red]fail[/red]"
            sample = Text("Aa", style=f"{pair.fg} on {pair.bg}")
            table.add_row(pair.category, pair.label, sample, f"{pair.score.ratio:.2f}",
                          pair.score.level.value, result)
        if shown:
            console.print(table)

        summary = summarize(pairs)
        color = "green" if summary['failed'] == 0 else "yellow"
        console.print(Panel(
            f"Pairs: {summary['total']}  Passed: {summary['passed']}  Failed: {summary['failed']}",
            title="Summary", border_style=color,
        ))
    except click.BadParameter:
        raise
    except Exception as e:
        console.print(f"[red]Error running audit: {e}[/red]")
        sys.exit(1)


@main.command()
@generation_options
@click.option("--by-hue", is_flag=True, help="Search hue instead of lightness")
@click.option("--json", "as_json", is_flag=True, help="Print the fixes as JSON")
def fix(by_hue, as_json, **options):
    """Suggest token overrides that fix failing pairs."""
    try:
        params = build_parameters(**options)
        fixes = get_engine().fix(params, by_hue=by_hue)

        if as_json:
            click.echo(json.dumps(fixes, indent=2))
            return

        if not fixes:
            console.print("[green]No fixes needed[/green]")
            return

        theme = get_engine().build(params)
        table = Table(title="Suggested fixes", show_header=True, header_style="bold magenta")
        table.add_column("Token", style="cyan")
        table.add_column("Current")
        table.add_column("", width=3)
        table.add_column("Fixed")
        table.add_column("", width=3)
        for token, fixed in fixes.items():
            current = theme.tokens.get(token, "")
            table.add_row(token, current, swatch(current), fixed, swatch(fixed))
        console.print(table)
    except click.BadParameter:
        raise
    except Exception as e:
        console.print(f"[red]Error computing fixes: {e}[/red]")
        sys.exit(1)


def load_observed_seeds(path: Path, mode: ThemeMode):
    """Seeds from a JSON file: a seed map or an exported theme document."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if mode.value in data and isinstance(data[mode.value], dict):
        data = data[mode.value].get("seeds", {})

    observed = []
    for name in SeedName:
        value = data.get(name.value)
        if is_hex_color(value):
            observed.append(SeedColor(name=name, hsl=hex_to_hsl(value), hex=value))
    if not observed:
        raise ValueError(f"No seed colors found in {path}")
    return observed


@main.command()
@click.argument("seeds_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--mode", "-m", type=click.Choice(['light', 'dark']), default="dark", help="Mode to read from a theme document")
@click.option("--prioritize", is_flag=True, help="Search the likeliest candidates first")
def infer(seeds_file, mode, prioritize):
    """Infer harmony, spread and strategy from a seed file."""
    try:
        observed = load_observed_seeds(Path(seeds_file), ThemeMode(mode))
        engine = get_engine()

        with Progress(TextColumn("{task.description}"), BarColumn(), TextColumn("{task.completed}/{task.total}"),
                      console=console, transient=True) as progress:
            task = progress.add_task("coarse", total=None)

            def report(current, total, phase):
                progress.update(task, description=phase, completed=current, total=total)

            result = engine.inference.run(observed, progress=report, prioritize=prioritize)

        console.print(Panel(
            f"[bold]Harmony:[/bold] {result.harmony.value}\n"
            f"[bold]Spread:[/bold] {result.spread:g}\n"
            f"[bold]Strategy:[/bold] {result.strategy.value}\n"
            f"[bold]Brightness:[/bold] {result.brightness:g}\n"
            f"[bold]Error:[/bold] {result.error:.3f}",
            title="Inferred parameters", border_style="green",
        ))
    except InferenceCancelled as e:
        console.print(f"[yellow]Inference cancelled: {e}[/yellow]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error inferring parameters: {e}[/red]")
        sys.exit(1)


@main.command()
@generation_options
@click.option("--format", "-f", "fmt", type=click.Choice(['json', 'yaml']), default="json", help="Export format")
@click.option("--output", "-o", type=click.Path(), help="Output file (prints to stdout if omitted)")
@click.option("--sync", is_flag=True, help="Write to the configured sync location")
def export(fmt, output, sync, **options):
    """Export the theme document for both modes."""
    try:
        params = build_parameters(**options)
        manager = ExportManager(get_engine())
        export_format = ExportFormat(fmt)

        if sync:
            sync_config = get_config().sync
            if not sync_config.enabled:
                console.print("[yellow]Sync is disabled in the configuration[/yellow]")
                return
            output = str(sync_config.get_file_path())

        content = manager.export_theme(params, export_format, output)
        if output:
            console.print(f"[green]Exported '{params.theme_name}' to {output}[/green]")
        else:
            click.echo(content)
    except click.BadParameter:
        raise
    except Exception as e:
        console.print(f"[red]Error exporting theme: {e}[/red]")
        sys.exit(1)


def get_registry() -> PresetRegistry:
    return PresetRegistry(get_config().get_presets_dir())


@main.command()
def presets():
    """List named and thematic presets."""
    try:
        table = Table(title="Presets", show_header=True, header_style="bold magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Type")
        table.add_column("Description")
        for info in get_registry().list_presets():
            table.add_row(info['name'], info['type'], info['description'])
        for name, preset in THEMATIC_PRESETS.items():
            table.add_row(name, "thematic", f"{preset.harmony.value} / {preset.strategy.value}")
        console.print(table)
    except Exception as e:
        console.print(f"[red]Error listing presets: {e}[/red]")
        sys.exit(1)


@main.command("apply-preset")
@click.argument("name")
@click.option("--mode", "-m", type=click.Choice(['light', 'dark']), help="Mode the overrides apply to")
@click.option("--seed", "rng_seed", type=int, help="Random seed for thematic presets")
def apply_preset_command(name, mode, rng_seed):
    """Apply a named or thematic preset and show the result."""
    try:
        params = build_parameters(mode=mode)
        registry = get_registry()
        if registry.exists(name):
            params = apply_preset(params, registry.load(name), params.mode)
        elif name in THEMATIC_PRESETS:
            params = apply_thematic_preset(params, name, random.Random(rng_seed))
        else:
            console.print(f"[red]Error: Preset '{name}' not found[/red]")
            sys.exit(1)

        theme = get_engine().build(params)
        console.print(render_parameters(params))
        console.print(seeds_table(theme.seeds, params.output_format))
        overrides = params.token_overrides.for_mode(params.mode)
        if overrides:
            console.print(f"[dim]{len(overrides)} token overrides applied[/dim]")
    except Exception as e:
        console.print(f"[red]Error applying preset: {e}[/red]")
        sys.exit(1)


@main.command()
@click.argument("intensity", type=click.FloatRange(0, 100))
@click.option("--mode", "-m", type=click.Choice(['light', 'dark']), default="dark", help="Theme mode")
@click.option("--lightness", type=float, default=50.0, help="Base lightness for the ramp preview")
@click.option("--steps", type=int, default=7, help="Ramp preview steps")
def contrast(intensity, mode, lightness, steps):
    """Show the contrast values for an intensity."""
    is_dark = mode == "dark"
    light, dark = contrast_control.calculate_contrast(intensity, is_dark)
    ramp = [
        contrast_control.calculate_variant_lightness(lightness, i, steps, intensity, is_dark)
        for i in range(steps)
    ]
    console.print(Panel(
        f"[bold]{contrast_control.get_contrast_description(intensity)}[/bold]\n"
        f"Light contrast: {light:.1f}\n"
        f"Dark contrast: {dark:.1f}\n"
        f"Ramp lightness: {', '.join(f'{v:.0f}' for v in ramp)}",
        title=f"Contrast {intensity:g}%", border_style="blue",
    ))


if __name__ == "__main__":
    main()
