"""Project CLI commands."""

import argparse

from spmlink.packages.integrate import integrate_project
from spmlink.packages.linker import find_link_phase, linked_product_names
from spmlink.packages.manifest import resolve_manifest
from spmlink.project.loader import load_project
from spmlink.project.records import BuildTarget, PackageReference, ProductDependency
from spmlink.project.validator import validate_project


def cmd_project_apply(args: argparse.Namespace) -> int:
    manifest = resolve_manifest(args.manifest)
    targets = args.target or manifest.targets
    result = integrate_project(
        args.project,
        coordinates=manifest.packages,
        targets=targets,
        dry_run=args.dry_run,
    )
    print(result.summary())
    if result.written:
        print(f"  Project saved: {args.project}")
    elif result.dry_run and result.changed:
        print("\n[DRY RUN] Project was not modified.")
    return 0


def cmd_project_validate(args: argparse.Namespace) -> int:
    graph = load_project(args.project)
    result = validate_project(graph)
    print(result.summary())
    return 0 if result.passed else 1


def cmd_project_show(args: argparse.Namespace) -> int:
    graph = load_project(args.project)
    refs = graph.records_of_type(PackageReference)
    products = graph.records_of_type(ProductDependency)

    if not refs:
        print("No Swift packages declared.")
    for ref_id, ref in refs.items():
        req = ref.requirement
        version = req.get("minimumVersion") or req.get("version") or "?"
        print(f"\n  {ref.repository_url}")
        print(f"  {'─' * max(len(ref.repository_url), 40)}")
        print(f"  {'Requirement:':<20}{req.get('kind', '?')} {version}")
        names = sorted(p.product_name for p in products.values() if p.package == ref_id)
        print(f"  {'Products:':<20}{', '.join(names) or '(none)'}")

    print()
    for target in graph.records_of_type(BuildTarget).values():
        phase = find_link_phase(graph, target)
        linked = sorted(linked_product_names(graph, phase)) if phase else []
        print(f"  {target.name:<35} {', '.join(linked) or '-'}")
    print()
    return 0
