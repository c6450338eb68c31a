"""Validate the package wiring inside a project graph."""

from collections import Counter
from dataclasses import dataclass, field

from spmlink.errors import StructuralError
from spmlink.project.records import (
    BuildFileEntry,
    BuildTarget,
    LinkPhase,
    PackageReference,
    ProductDependency,
)
from spmlink.project.store import ProjectGraph


@dataclass
class ProjectValidationResult:
    """Result of a project validation run."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    package_references: int = 0
    product_dependencies: int = 0
    linked_files: int = 0

    @property
    def passed(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = [
            f"Project Validation: {self.package_references} package references, "
            f"{self.product_dependencies} product dependencies, "
            f"{self.linked_files} linked products",
        ]
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  {w}")
        if self.passed and not self.warnings:
            lines.append("All checks passed.")
        return "\n".join(lines)


def validate_project(graph: ProjectGraph) -> ProjectValidationResult:
    """Check every package-related edge in the graph resolves.

    Checks:
    - Root anchor exists
    - Root packageReferences resolve to XCRemoteSwiftPackageReference
    - Product dependencies point at a known package reference
    - Link phase files resolve, and package build files point at a known product
    - No duplicate package references per URL
    - No product linked twice into the same phase

    Args:
        graph: Loaded project graph.

    Returns:
        ProjectValidationResult with errors and warnings.
    """
    result = ProjectValidationResult()

    try:
        root = graph.root
    except StructuralError as e:
        result.errors.append(str(e))
        return result

    refs = graph.records_of_type(PackageReference)
    products = graph.records_of_type(ProductDependency)
    build_files = graph.records_of_type(BuildFileEntry)
    result.package_references = len(refs)
    result.product_dependencies = len(products)

    for ref_id in root.package_references:
        if ref_id not in refs:
            result.errors.append(f"Root package reference '{ref_id}' does not resolve")

    for ref_id, ref in refs.items():
        if ref_id not in root.package_references:
            result.warnings.append(
                f"Package reference {ref.repository_url} is not registered on the root project"
            )

    url_counts = Counter(ref.repository_url for ref in refs.values())
    for url, n in sorted(url_counts.items()):
        if n > 1:
            result.warnings.append(f"{n} package references for {url}")

    for dep_id, dep in products.items():
        if dep.package not in refs:
            result.errors.append(
                f"Product '{dep.product_name}' ({dep_id}) points at unknown package '{dep.package}'"
            )

    for target in graph.records_of_type(BuildTarget).values():
        for phase_id in target.build_phases:
            phase = graph.get(phase_id)
            if phase is None:
                result.errors.append(f"{target.name}: build phase '{phase_id}' does not resolve")
                continue
            if not isinstance(phase, LinkPhase):
                continue
            seen: Counter[str] = Counter()
            for file_id in phase.files:
                entry = build_files.get(file_id)
                if entry is None:
                    result.errors.append(f"{target.name}: build file '{file_id}' does not resolve")
                    continue
                if not entry.product_ref:
                    continue
                product = products.get(entry.product_ref)
                if product is None:
                    result.errors.append(
                        f"{target.name}: build file '{file_id}' links unknown product "
                        f"'{entry.product_ref}'"
                    )
                    continue
                result.linked_files += 1
                seen[product.product_name] += 1
            for name, n in sorted(seen.items()):
                if n > 1:
                    result.warnings.append(f"{target.name}: {name} linked {n} times")

    return result
