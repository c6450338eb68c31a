"""Full integration pass: declare every package, then link every product.

The pass:
1. Declare all coordinates (package references + product dependencies)
2. Link each declared product into each requested target
3. Write the project back only if the pass succeeded and something changed
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path

from spmlink.errors import LookupWarning
from spmlink.packages.coordinates import DEFAULT_PACKAGES, DEFAULT_TARGETS, PackageCoordinate
from spmlink.packages.declarator import declare_dependencies
from spmlink.packages.linker import ADDED, PRESENT, link_product_to_target
from spmlink.project.ids import IdGenerator
from spmlink.project.loader import load_project, save_project
from spmlink.project.store import ProjectGraph

logger = logging.getLogger(__name__)


@dataclass
class IntegrationResult:
    """Outcome of one integration pass."""

    declared: list[str] = field(default_factory=list)
    linked: list[tuple[str, str]] = field(default_factory=list)
    already_linked: list[tuple[str, str]] = field(default_factory=list)
    warnings: list[LookupWarning] = field(default_factory=list)
    changed: bool = False
    written: bool = False
    dry_run: bool = False

    def summary(self) -> str:
        lines = [
            f"Integration: {len(self.declared)} products declared, "
            f"{len(self.linked)} links added, {len(self.already_linked)} already present",
        ]
        for target, product in self.linked:
            lines.append(f"  + {product} -> {target}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  {w}")
        if not self.changed:
            lines.append("Project already up to date.")
        return "\n".join(lines)


def apply_packages(
    graph: ProjectGraph,
    coordinates: list[PackageCoordinate] | None = None,
    targets: list[str] | None = None,
) -> IntegrationResult:
    """Declare *coordinates* and link each product into every target in *targets*.

    Args:
        graph: Project graph (mutated in place).
        coordinates: Packages to declare. Defaults to DEFAULT_PACKAGES.
        targets: Target names to link into. Defaults to DEFAULT_TARGETS.

    Returns:
        IntegrationResult describing what changed.

    Raises:
        StructuralError: If the project has no root object.
    """
    coordinates = DEFAULT_PACKAGES if coordinates is None else coordinates
    targets = DEFAULT_TARGETS if targets is None else targets
    result = IntegrationResult()
    before = copy.deepcopy(graph.data)

    logger.info("Adding %d Swift package products...", len(coordinates))
    declared = declare_dependencies(graph, coordinates)
    result.declared = [coord.product_name for coord in declared]

    for target_name in targets:
        for coord, dep_id in declared.items():
            action = link_product_to_target(graph, target_name, dep_id, result.warnings)
            if action == ADDED:
                result.linked.append((target_name, coord.product_name))
            elif action == PRESENT:
                result.already_linked.append((target_name, coord.product_name))

    result.changed = graph.data != before
    return result


def integrate_project(
    path: Path | str,
    coordinates: list[PackageCoordinate] | None = None,
    targets: list[str] | None = None,
    dry_run: bool = False,
    ids: IdGenerator | None = None,
) -> IntegrationResult:
    """Load the project at *path*, apply packages, and save it back.

    Nothing is written when the pass raises, when nothing changed, or in
    dry-run mode.
    """
    graph = load_project(path, ids)
    result = apply_packages(graph, coordinates, targets)
    result.dry_run = dry_run
    if result.changed and not dry_run:
        save_project(graph, path)
        result.written = True
        logger.info("Saved %s", path)
    return result
