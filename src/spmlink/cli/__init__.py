"""Command-line interface for spmlink.

Usage:
    spmlink project apply --project <path> [--manifest <yaml>] [--target T]... [--dry-run]
    spmlink project validate --project <path>
    spmlink project show --project <path>
    spmlink podfile patch [--podfile <path>] [--dry-run]
    spmlink manifest show [--manifest <yaml>]
    spmlink integrate [--ios-dir <dir>] [--manifest <yaml>] [--dry-run]
"""

import argparse
import logging
import sys

import yaml

from spmlink.cli.integrate import cmd_integrate
from spmlink.cli.manifest import cmd_manifest_show
from spmlink.cli.podfile import cmd_podfile_patch
from spmlink.cli.project import cmd_project_apply, cmd_project_show, cmd_project_validate
from spmlink.errors import SpmlinkError

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spmlink",
        description="Wire Swift Package Manager dependencies into Xcode projects and Podfiles",
    )
    parser.add_argument(
        "--log-level", default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    # project
    proj = sub.add_parser("project", help="Project descriptor operations")
    proj_sub = proj.add_subparsers(dest="subcommand")

    apply = proj_sub.add_parser("apply", help="Declare packages and link products")
    apply.add_argument("--project", required=True, help="Path to project descriptor")
    apply.add_argument("--manifest", default=None, help="Package manifest YAML")
    apply.add_argument(
        "--target", action="append", default=None,
        help="Target to link into (repeatable; default: manifest targets)",
    )
    apply.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )

    val = proj_sub.add_parser("validate", help="Validate package wiring")
    val.add_argument("--project", required=True, help="Path to project descriptor")

    show = proj_sub.add_parser("show", help="Show declared packages and links")
    show.add_argument("--project", required=True, help="Path to project descriptor")

    # podfile
    pod = sub.add_parser("podfile", help="Podfile operations")
    pod_sub = pod.add_subparsers(dest="subcommand")
    patch = pod_sub.add_parser("patch", help="Insert configuration into post_install")
    patch.add_argument(
        "--podfile", default=None,
        help="Path to Podfile (default: $SPMLINK_IOS_DIR/Podfile)",
    )
    patch.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )

    # manifest
    man = sub.add_parser("manifest", help="Package manifest operations")
    man_sub = man.add_subparsers(dest="subcommand")
    man_show = man_sub.add_parser("show", help="Show packages and targets")
    man_show.add_argument("--manifest", default=None, help="Package manifest YAML")

    # integrate (top-level)
    integ = sub.add_parser("integrate", help="Apply packages and patch the Podfile")
    integ.add_argument(
        "--ios-dir", default=None,
        help="iOS project directory (default: $SPMLINK_IOS_DIR or ./ios)",
    )
    integ.add_argument("--manifest", default=None, help="Package manifest YAML")
    integ.add_argument(
        "--dry-run", action="store_true",
        help="Report changes without writing",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    if not args.command:
        parser.print_help()
        return 0

    dispatch = {
        ("project", "apply"): cmd_project_apply,
        ("project", "validate"): cmd_project_validate,
        ("project", "show"): cmd_project_show,
        ("podfile", "patch"): cmd_podfile_patch,
        ("manifest", "show"): cmd_manifest_show,
    }

    if args.command == "integrate":
        handler = cmd_integrate
    else:
        subcommand: str | None = getattr(args, "subcommand", None)
        handler = dispatch.get((args.command, subcommand or ""))
    if not handler:
        parser.parse_args([args.command, "--help"])
        return 0

    try:
        return handler(args)
    except (SpmlinkError, OSError, ValueError, yaml.YAMLError) as e:
        print(f"ERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
