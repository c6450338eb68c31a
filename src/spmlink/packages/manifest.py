"""Parse package manifests (YAML) that override the compiled-in package set."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from spmlink.packages.coordinates import (
    DEFAULT_PACKAGES,
    DEFAULT_REQUIREMENT_KIND,
    DEFAULT_TARGETS,
    PackageCoordinate,
    expand,
)


@dataclass
class Manifest:
    """The packages to declare and the targets to link them into."""

    packages: list[PackageCoordinate] = field(default_factory=lambda: list(DEFAULT_PACKAGES))
    targets: list[str] = field(default_factory=lambda: list(DEFAULT_TARGETS))
    source: str = "<built-in>"

    def summary(self) -> str:
        lines = [f"Manifest: {self.source}", f"  Targets: {', '.join(self.targets) or '(none)'}"]
        by_url: dict[str, list[PackageCoordinate]] = {}
        for coord in self.packages:
            by_url.setdefault(coord.repository_url, []).append(coord)
        for url, coords in by_url.items():
            first = coords[0]
            products = ", ".join(c.product_name for c in coords)
            lines.append(f"  {url} ({first.requirement_kind} {first.minimum_version}): {products}")
        return "\n".join(lines)


def read_manifest(path: Path | str) -> Manifest:
    """Read and parse a package manifest.

    Each ``packages`` entry needs ``url``, ``version`` and ``products``;
    ``kind`` defaults to upToNextMajorVersion. ``targets`` falls back to the
    built-in target list when omitted.

    Args:
        path: Path to the manifest YAML.

    Returns:
        Parsed Manifest.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
        ValueError: If an entry is missing fields or has a bad requirement kind.
    """
    manifest_path = Path(path)
    with open(manifest_path) as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"manifest at {manifest_path} is not a YAML mapping")

    packages: list[PackageCoordinate] = []
    for i, entry in enumerate(data.get("packages", []) or []):
        if not isinstance(entry, dict):
            raise ValueError(f"{manifest_path}: packages[{i}] is not a mapping")
        missing = [k for k in ("url", "version", "products") if not entry.get(k)]
        if missing:
            raise ValueError(f"{manifest_path}: packages[{i}] missing {', '.join(missing)}")
        products = entry["products"]
        if isinstance(products, str):
            products = [products]
        packages.extend(expand(
            str(entry["url"]),
            str(entry["version"]),
            [str(p) for p in products],
            entry.get("kind", DEFAULT_REQUIREMENT_KIND),
        ))

    targets = data.get("targets")
    if targets is None:
        targets = list(DEFAULT_TARGETS)
    elif isinstance(targets, str):
        targets = [targets]

    return Manifest(
        packages=packages,
        targets=[str(t) for t in targets],
        source=str(manifest_path),
    )


def resolve_manifest(path: Path | str | None = None) -> Manifest:
    """Manifest at *path*, else the configured one, else the built-in set."""
    from spmlink.paths import manifest_path

    chosen = Path(path) if path else manifest_path()
    if chosen is None:
        return Manifest()
    return read_manifest(chosen)
