"""Podfile CLI commands."""

import argparse

from spmlink.paths import podfile_path
from spmlink.podfile.patcher import patch_podfile


def cmd_podfile_patch(args: argparse.Namespace) -> int:
    path = args.podfile or podfile_path()
    action = patch_podfile(path, dry_run=args.dry_run)
    print(f"  Podfile {path}: {action}")
    if args.dry_run and action == "updated":
        print("\n[DRY RUN] Podfile was not modified.")
    return 0
