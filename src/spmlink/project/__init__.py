"""Project module: load, query, validate, and save Xcode project descriptors."""

from spmlink.project.loader import load_project, save_project
from spmlink.project.store import ProjectGraph
from spmlink.project.validator import validate_project

__all__ = [
    "load_project",
    "save_project",
    "ProjectGraph",
    "validate_project",
]
