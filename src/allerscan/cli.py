"""
AllerScan CLI
=============

Command-line interface for AllerScan.
"""

from __future__ import annotations

import click

from allerscan import __version__


def _load(config: str | None):
    from allerscan.utils import ConfigError, load_config, setup_logging

    try:
        cfg = load_config(config)
    except (FileNotFoundError, ConfigError) as e:
        raise click.BadParameter(str(e), param_hint="--config")

    setup_logging(cfg.logging)
    return cfg


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """AllerScan - Live allergen label scanner."""
    pass


@main.command()
@click.option("--config", "-f", default=None, help="Path to config file")
@click.option("--allergen", "-a", multiple=True, help="Allergen keyword (repeatable)")
@click.option("--debug", is_flag=True, help="Show the diagnostics panel")
def run(config: str | None, allergen: tuple[str, ...], debug: bool) -> None:
    """Open the scanner window."""
    cfg = _load(config)
    cfg.allergens = [*cfg.allergens, *allergen]

    from allerscan.app.app import main as run_app

    run_app(cfg, show_debug=debug)


@main.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@click.option("--allergen", "-a", multiple=True, help="Allergen keyword (repeatable)")
@click.option("--output", "-o", default=None, help="Write the annotated image here")
@click.option("--config", "-f", default=None, help="Path to config file")
@click.pass_context
def scan(
    ctx: click.Context,
    image: str,
    allergen: tuple[str, ...],
    output: str | None,
    config: str | None,
) -> None:
    """Scan a single image file for allergens.

    Exits with status 1 when any allergen is found.
    """
    from pathlib import Path

    import cv2

    from allerscan.ocr import TesseractEngine, encode_frame
    from allerscan.overlay import OverlayRenderer
    from allerscan.scanner import KeywordStore, match_regions
    from allerscan.utils import RecognitionError

    cfg = _load(config)
    keywords = KeywordStore([*cfg.allergens, *allergen])
    if not len(keywords):
        raise click.UsageError("No allergens given; use --allergen or the config file")

    frame = cv2.imread(image)
    if frame is None:
        raise click.BadParameter(f"Cannot read image: {image}", param_hint="IMAGE")

    engine = TesseractEngine.from_config(cfg.scan)
    try:
        result = engine.recognize(frame)
    except RecognitionError as e:
        raise click.ClickException(str(e))

    match = match_regions(result.regions, keywords.snapshot())

    click.echo(f"🔍 {len(result.regions)} text regions in {image}")
    if match.found:
        click.echo("⚠️  Warning: Allergens Found!")
        for allergen_name in match.allergens:
            click.echo(f"   - {allergen_name}")
        for annotation in match.annotations:
            box = annotation.region.bbox
            click.echo(f"     {annotation.region.text!r} at ({box.x0}, {box.y0})-({box.x1}, {box.y1})")
    else:
        click.echo("✅ No allergens found")

    if output:
        output_path = Path(output)
        renderer = OverlayRenderer.from_config(cfg.overlay)
        renderer.resize(frame.shape[1], frame.shape[0])
        renderer.draw(match.annotations)
        try:
            payload = encode_frame(renderer.composite(frame), output_path.suffix or ".png")
        except RecognitionError as e:
            raise click.BadParameter(str(e), param_hint="--output")
        output_path.write_bytes(payload)
        click.echo(f"💾 Annotated image saved to {output}")

    ctx.exit(1 if match.found else 0)


@main.command()
@click.option("--config", "-f", default=None, help="Path to config file")
def info(config: str | None) -> None:
    """Show configuration and system information."""
    import sys

    from allerscan.ocr import TesseractEngine

    cfg = _load(config)

    click.echo("🥜 AllerScan Configuration")
    click.echo("=" * 40)
    click.echo(f"Version: {__version__}")
    click.echo(f"Python: {sys.version}")
    click.echo(f"Platform: {sys.platform}")
    click.echo(f"Tesseract: {TesseractEngine.version() or 'not found'}")
    click.echo()
    click.echo("Camera:")
    click.echo(f"  Index: {cfg.camera.index}")
    click.echo(f"  Resolution: {cfg.camera.width}x{cfg.camera.height}")
    click.echo()
    click.echo("Scan:")
    click.echo(f"  Interval: {cfg.scan.interval}s")
    click.echo(f"  Language: {cfg.scan.language}")
    click.echo(f"  Granularity: {cfg.scan.granularity}")
    click.echo()
    click.echo(f"Allergens: {', '.join(cfg.allergens) or '(none)'}")


if __name__ == "__main__":
    main()
