"""Integrate CLI command: project and Podfile in one step.

The two artifacts are handled independently; a failure on the project
side is reported and the Podfile is still patched.
"""

import argparse
from pathlib import Path

import yaml

from spmlink.errors import SpmlinkError
from spmlink.packages.integrate import integrate_project
from spmlink.packages.manifest import resolve_manifest
from spmlink.paths import find_project_file, ios_dir, podfile_path
from spmlink.podfile.patcher import patch_podfile


def _integrate_project(base: Path, args: argparse.Namespace) -> bool:
    project = find_project_file(base)
    if project is None:
        print(f"ERROR: No .xcodeproj with a project descriptor found in {base}")
        return False

    try:
        manifest = resolve_manifest(args.manifest)
        result = integrate_project(
            project,
            coordinates=manifest.packages,
            targets=manifest.targets,
            dry_run=args.dry_run,
        )
    except (SpmlinkError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"ERROR: {e}")
        return False
    print(result.summary())
    return True


def cmd_integrate(args: argparse.Namespace) -> int:
    base = Path(args.ios_dir) if args.ios_dir else ios_dir()

    print("Swift Package Integration")
    print("─" * 40)
    project_ok = _integrate_project(base, args)

    action = patch_podfile(podfile_path(base), dry_run=args.dry_run)
    print(f"  Podfile: {action}")

    if args.dry_run:
        print("\n[DRY RUN] No files were modified.")
    return 0 if project_ok else 1
