"""Path resolution for the iOS project being wired.

Uses environment variables when available, falls back to conventional
defaults relative to the current directory.

Environment variables:
    SPMLINK_IOS_DIR: iOS project directory (default: ./ios)
    SPMLINK_MANIFEST: package manifest YAML (default: built-in package set)
"""

from __future__ import annotations

import os
from pathlib import Path

_DEFAULT_IOS_DIR = Path("ios")

# Preferred descriptor encodings inside an .xcodeproj bundle, in order
_PROJECT_FILENAMES = ("project.json", "project.pbxproj")


def ios_dir() -> Path:
    """Return the iOS project directory."""
    return Path(os.environ.get("SPMLINK_IOS_DIR", str(_DEFAULT_IOS_DIR)))


def podfile_path(base: Path | str | None = None) -> Path:
    """Return the path to the Podfile."""
    return (Path(base) if base else ios_dir()) / "Podfile"


def manifest_path() -> Path | None:
    """Return the configured manifest path, or None for the built-in set."""
    env = os.environ.get("SPMLINK_MANIFEST")
    return Path(env) if env else None


def find_project_file(base: Path | str | None = None) -> Path | None:
    """Find the project descriptor inside the first ``*.xcodeproj`` bundle.

    Pods.xcodeproj is skipped; it is regenerated by every ``pod install``.
    """
    root = Path(base) if base else ios_dir()
    if not root.is_dir():
        return None
    for bundle in sorted(root.glob("*.xcodeproj")):
        if bundle.name == "Pods.xcodeproj":
            continue
        for filename in _PROJECT_FILENAMES:
            candidate = bundle / filename
            if candidate.is_file():
                return candidate
    return None
