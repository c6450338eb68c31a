"""Link declared package products into build targets.

Linking means adding a PBXBuildFile that references the product
dependency to the target's frameworks build phase. Each (target, product)
pair is linked at most once no matter how often this runs. Targets that
don't exist in a given project (e.g. the pod target before ``pod
install``) are skipped with a warning.
"""

from __future__ import annotations

import logging

from spmlink.errors import LookupWarning
from spmlink.project.records import (
    BuildFileEntry,
    BuildTarget,
    LinkPhase,
    ProductDependency,
)
from spmlink.project.store import ProjectGraph

logger = logging.getLogger(__name__)

ADDED = "added"
PRESENT = "present"
SKIPPED = "skipped"


def find_target(graph: ProjectGraph, name: str) -> BuildTarget | None:
    return graph.find(BuildTarget, lambda t: t.name == name)


def find_link_phase(graph: ProjectGraph, target: BuildTarget) -> LinkPhase | None:
    """Return the target's frameworks build phase, if it has one."""
    for phase_id in target.build_phases:
        phase = graph.get(phase_id)
        if isinstance(phase, LinkPhase):
            return phase
    return None


def linked_product_names(graph: ProjectGraph, phase: LinkPhase) -> set[str]:
    """Names of the package products already linked by *phase*."""
    names = set()
    for file_id in phase.files:
        entry = graph.get(file_id)
        if not isinstance(entry, BuildFileEntry) or not entry.product_ref:
            continue
        product = graph.get(entry.product_ref)
        if isinstance(product, ProductDependency):
            names.add(product.product_name)
    return names


def link_product_to_target(
    graph: ProjectGraph,
    target_name: str,
    product_dependency_id: str,
    warnings: list[LookupWarning] | None = None,
) -> str:
    """Link a declared product into the named target's frameworks phase.

    Args:
        graph: Project graph (mutated in place).
        target_name: Exact name of the PBXNativeTarget.
        product_dependency_id: Id returned by ``declare_dependency``.
        warnings: Optional list that collects a LookupWarning when the
            target or its link phase is missing.

    Returns:
        ``"added"``, ``"present"`` (already linked), or ``"skipped"``.
    """
    product = graph.get(product_dependency_id)
    if not isinstance(product, ProductDependency):
        raise ValueError(f"'{product_dependency_id}' is not a product dependency")
    product_name = product.product_name

    target = find_target(graph, target_name)
    if target is None:
        warning = LookupWarning(target_name, f"target not found for {product_name}")
        logger.warning("Target '%s' not found for %s", target_name, product_name)
        if warnings is not None:
            warnings.append(warning)
        return SKIPPED

    phase = find_link_phase(graph, target)
    if phase is None:
        warning = LookupWarning(target_name, "no frameworks build phase")
        logger.warning("No frameworks build phase found for target '%s'", target_name)
        if warnings is not None:
            warnings.append(warning)
        return SKIPPED

    if product_name in linked_product_names(graph, phase):
        logger.debug("%s already linked into %s", product_name, target_name)
        return PRESENT

    entry = BuildFileEntry.create(graph.new_id(), product.id)
    graph.insert(entry)
    phase.append_file(entry.id)
    target.add_package_product(product.id)
    logger.info("Added %s to %s target", product_name, target_name)
    return ADDED
