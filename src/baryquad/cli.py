"""Click CLI entry point for baryquad."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from baryquad import __version__
from baryquad.errors import BaryquadError
from baryquad.exporter import DEFAULT_OUTPUT, export_glb
from baryquad.inspection import inspect_glb, render_text
from baryquad.manifest import build_manifest


@click.group()
@click.version_option(version=__version__, prog_name="baryquad")
def main() -> None:
    """Baryquad: writes a quad with barycentric vertex attributes as GLB."""


@main.command()
@click.option(
    "-o",
    "--output",
    type=click.Path(path_type=Path),
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="Output GLB file path.",
)
@click.option(
    "--emit-manifest",
    "emit_manifest",
    type=click.Path(path_type=Path),
    default=None,
    help="Write a JSON build manifest to this path after a successful build.",
)
def build(output: Path, emit_manifest: Path | None = None) -> None:
    """Build the quad and write it as a GLB file."""
    try:
        container = export_glb(output)
        if emit_manifest is not None:
            manifest = build_manifest(
                output_path=output,
                container=container,
                command_args=sys.argv[1:],
            )
            emit_manifest.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    except BaryquadError as e:
        raise click.ClickException(str(e))
    except OSError as e:
        raise click.ClickException(f"Cannot write manifest to {emit_manifest}: {e}") from e
    click.echo(f"Wrote: {output} ({container.length} bytes)")


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Inspection output format.",
)
def inspect(input_file: Path, output_format: str = "text") -> None:
    """Decode the header, views and accessors of a GLB file."""
    try:
        payload = inspect_glb(input_file.read_bytes())
    except OSError as e:
        raise click.ClickException(f"Cannot read {input_file}: {e}") from e
    except BaryquadError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo(render_text(payload), nl=False)
