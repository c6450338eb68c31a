"""Load and save project descriptors.

Two on-disk encodings are supported:

- JSON (``*.json``), as produced by ``plutil -convert json project.pbxproj``
- property lists (anything else), XML or binary, via plistlib

Xcode's own old-style ASCII format is not parsed; convert it first with
``plutil -convert xml1 project.pbxproj``. Xcode reads the XML form back
without complaint.
"""

from __future__ import annotations

import json
import plistlib
from pathlib import Path
from xml.parsers.expat import ExpatError

from spmlink.errors import ProjectIOError
from spmlink.project.ids import IdGenerator
from spmlink.project.store import ProjectGraph, load


def _is_json(path: Path) -> bool:
    return path.suffix.lower() == ".json"


def load_project(path: Path | str, ids: IdGenerator | None = None) -> ProjectGraph:
    """Load a project descriptor from disk.

    Args:
        path: Path to the descriptor file.
        ids: Optional id generator for records created later.

    Returns:
        ProjectGraph over the parsed document.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ProjectIOError: If the file can't be parsed as a project document.
    """
    project_path = Path(path)
    raw = project_path.read_bytes()

    if _is_json(project_path):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ProjectIOError(f"{project_path}: invalid JSON ({e})") from e
    else:
        if raw.lstrip().startswith(b"// !$*UTF8*$!"):
            raise ProjectIOError(
                f"{project_path}: old-style ASCII plist; convert it first with "
                f"'plutil -convert xml1 {project_path.name}'"
            )
        try:
            data = plistlib.loads(raw)
        except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
            raise ProjectIOError(f"{project_path}: invalid property list ({e})") from e

    if not isinstance(data, dict):
        raise ProjectIOError(f"{project_path}: top level is not a mapping")

    return load(data, ids)


def dump_project(graph: ProjectGraph, path: Path | str) -> bytes:
    """Serialize a project in the encoding chosen by *path*'s suffix."""
    if _is_json(Path(path)):
        return (json.dumps(graph.data, indent=2) + "\n").encode("utf-8")
    return plistlib.dumps(graph.data, fmt=plistlib.FMT_XML, sort_keys=False)


def save_project(graph: ProjectGraph, path: Path | str) -> None:
    """Write a project back to disk.

    The full document is serialized before the file is opened, so a
    serialization failure leaves the existing file untouched.

    Args:
        graph: Project to write.
        path: Destination; the suffix selects JSON or XML plist.
    """
    project_path = Path(path)
    try:
        payload = dump_project(graph, project_path)
    except (TypeError, ValueError, OverflowError) as e:
        raise ProjectIOError(f"{project_path}: cannot serialize project ({e})") from e
    project_path.write_bytes(payload)
