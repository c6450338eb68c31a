"""Manifest CLI commands."""

import argparse

from spmlink.packages.manifest import resolve_manifest


def cmd_manifest_show(args: argparse.Namespace) -> int:
    manifest = resolve_manifest(args.manifest)
    print(manifest.summary())
    print(f"\n  {len(manifest.packages)} product(s)")
    return 0
