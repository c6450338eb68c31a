"""Declare remote Swift packages and their products on a project.

For each coordinate the project ends up with exactly one
XCRemoteSwiftPackageReference per repository URL (registered on the root
project) and exactly one XCSwiftPackageProductDependency per
(package, product). Existing records are reused, so declaring the same
coordinates again is a no-op.
"""

from __future__ import annotations

import logging

from spmlink.packages.coordinates import PackageCoordinate
from spmlink.project.records import PackageReference, ProductDependency
from spmlink.project.store import ProjectGraph

logger = logging.getLogger(__name__)


def ensure_package_reference(graph: ProjectGraph, coordinate: PackageCoordinate) -> str:
    """Return the id of the package reference for *coordinate*'s URL, creating it if needed."""
    # Resolve the root first: a project without one must not gain orphan records
    root = graph.root

    existing = graph.find(
        PackageReference, lambda ref: ref.repository_url == coordinate.repository_url,
    )
    if existing is not None:
        if root.add_package_reference(existing.id):
            logger.info("Registered existing package %s on root project", coordinate.repo_name)
        return existing.id

    ref = PackageReference.create(graph.new_id(), coordinate.repository_url, coordinate.requirement)
    graph.insert(ref)
    root.add_package_reference(ref.id)
    logger.info(
        "Added package reference %s (%s %s)",
        coordinate.repo_name, coordinate.requirement_kind, coordinate.minimum_version,
    )
    return ref.id


def ensure_product_dependency(graph: ProjectGraph, package_id: str, product_name: str) -> str:
    """Return the id of the product dependency on *package_id*, creating it if needed."""
    existing = graph.find(
        ProductDependency,
        lambda dep: dep.package == package_id and dep.product_name == product_name,
    )
    if existing is not None:
        logger.debug("Product %s already declared", product_name)
        return existing.id

    dep = ProductDependency.create(graph.new_id(), package_id, product_name)
    graph.insert(dep)
    logger.info("Added product dependency %s", product_name)
    return dep.id


def declare_dependency(graph: ProjectGraph, coordinate: PackageCoordinate) -> str:
    """Declare one package product on the project.

    Args:
        graph: Project graph (mutated in place).
        coordinate: Package and product to declare.

    Returns:
        Id of the XCSwiftPackageProductDependency for the product.

    Raises:
        StructuralError: If the project has no root object.
    """
    package_id = ensure_package_reference(graph, coordinate)
    return ensure_product_dependency(graph, package_id, coordinate.product_name)


def declare_dependencies(
    graph: ProjectGraph,
    coordinates: list[PackageCoordinate],
) -> dict[PackageCoordinate, str]:
    """Declare every coordinate, returning ``{coordinate: product dependency id}`` in input order."""
    return {coord: declare_dependency(graph, coord) for coord in coordinates}
