"""Build manifest for baryquad output."""

from __future__ import annotations

import hashlib
import sys
from datetime import datetime, timezone
from pathlib import Path

from baryquad import __version__
from baryquad.container import Container


def build_manifest(
    *,
    output_path: Path,
    container: Container,
    command_args: list[str] | None = None,
) -> dict:
    """Build a manifest dict describing a build run.

    Should be called *after* the output GLB has been written.
    """
    manifest: dict = {
        "manifest_version": 1,
        "tool": {
            "name": "baryquad",
            "version": __version__,
            "python": sys.version.split()[0],
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "output": {
            "path": str(output_path),
            "sha256": hashlib.sha256(output_path.read_bytes()).hexdigest(),
            "length": container.length,
            "json_chunk_length": len(container.document_bytes),
            "bin_chunk_length": len(container.buffer_bytes),
        },
    }

    if command_args is not None:
        manifest["command_args"] = command_args

    return manifest
