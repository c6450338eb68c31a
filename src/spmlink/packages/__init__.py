"""Packages module: declare Swift packages and link their products into targets."""

from spmlink.packages.coordinates import DEFAULT_PACKAGES, DEFAULT_TARGETS, PackageCoordinate
from spmlink.packages.declarator import declare_dependency, declare_dependencies
from spmlink.packages.integrate import apply_packages, integrate_project
from spmlink.packages.linker import link_product_to_target

__all__ = [
    "DEFAULT_PACKAGES",
    "DEFAULT_TARGETS",
    "PackageCoordinate",
    "declare_dependency",
    "declare_dependencies",
    "link_product_to_target",
    "apply_packages",
    "integrate_project",
]
