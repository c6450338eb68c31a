"""Tests for the packages module (coordinates, manifest, declarator, linker, integrate)."""

import copy
import json
import random
from collections import Counter
from pathlib import Path

import pytest
import yaml

from spmlink.errors import LookupWarning, StructuralError
from spmlink.packages.coordinates import (
    DEFAULT_PACKAGES,
    DEFAULT_TARGETS,
    PackageCoordinate,
    repo_name_from_url,
)
from spmlink.packages.declarator import declare_dependencies, declare_dependency
from spmlink.packages.integrate import apply_packages, integrate_project
from spmlink.packages.linker import (
    ADDED,
    PRESENT,
    SKIPPED,
    find_link_phase,
    find_target,
    link_product_to_target,
    linked_product_names,
)
from spmlink.packages.manifest import Manifest, read_manifest, resolve_manifest
from spmlink.project.ids import sequential_ids
from spmlink.project.records import (
    BuildFileEntry,
    BuildTarget,
    PackageReference,
    ProductDependency,
)
from spmlink.project.store import ProjectGraph
from spmlink.project.validator import validate_project

FIXTURES = Path(__file__).parent / "fixtures"

MLX = PackageCoordinate("https://github.com/ml-explore/mlx-swift", "MLX", "0.25.6")
MLX_NN = PackageCoordinate("https://github.com/ml-explore/mlx-swift", "MLXNN", "0.25.6")
JINJA = PackageCoordinate("https://github.com/maiqingqiang/Jinja", "Jinja", "1.3.0")


def shape(graph: ProjectGraph) -> dict:
    """Id-independent summary of the package wiring in a graph."""
    refs = graph.records_of_type(PackageReference)
    products = graph.records_of_type(ProductDependency)
    links = Counter()
    for target in graph.records_of_type(BuildTarget).values():
        phase = find_link_phase(graph, target)
        if phase is None:
            continue
        for file_id in phase.files:
            entry = graph.get(file_id)
            if isinstance(entry, BuildFileEntry) and entry.product_ref in products:
                links[(target.name, products[entry.product_ref].product_name)] += 1
    return {
        "refs": sorted(r.repository_url for r in refs.values()),
        "registered": sorted(refs[i].repository_url for i in graph.root.package_references),
        "products": sorted(
            (refs[p.package].repository_url, p.product_name) for p in products.values()
        ),
        "links": sorted(links.items()),
        "objects": len(graph.objects),
    }


class TestCoordinates:
    def test_repo_name_from_url(self):
        assert repo_name_from_url("https://github.com/ml-explore/mlx-swift") == "mlx-swift"
        assert repo_name_from_url("https://github.com/maiqingqiang/Jinja.git") == "Jinja"
        assert repo_name_from_url("https://github.com/huggingface/swift-transformers/") == "swift-transformers"

    def test_repo_name_derived(self):
        assert MLX.repo_name == "mlx-swift"

    def test_requirement_shape(self):
        assert MLX.requirement == {"kind": "upToNextMajorVersion", "minimumVersion": "0.25.6"}
        exact = PackageCoordinate(MLX.repository_url, "MLX", "0.25.6", "exactVersion")
        assert exact.requirement == {"kind": "exactVersion", "version": "0.25.6"}

    def test_invalid_kind_rejected(self):
        with pytest.raises(ValueError):
            PackageCoordinate(MLX.repository_url, "MLX", "1.0", "branch")

    def test_missing_product_rejected(self):
        with pytest.raises(ValueError):
            PackageCoordinate(MLX.repository_url, "", "1.0")

    def test_coordinates_are_hashable_and_immutable(self):
        assert len({MLX, MLX, MLX_NN}) == 2
        with pytest.raises(AttributeError):
            MLX.product_name = "Other"

    def test_default_package_set(self):
        assert len(DEFAULT_PACKAGES) == 8
        assert len({c.repository_url for c in DEFAULT_PACKAGES}) == 4
        assert DEFAULT_TARGETS == ["example", "react-native-fastvlm-ios"]


class TestManifest:
    def test_read_manifest(self):
        manifest = read_manifest(FIXTURES / "manifest.yaml")
        assert manifest.targets == ["example", "missing-target"]
        assert [c.product_name for c in manifest.packages] == ["MLX", "MLXNN", "Jinja"]
        jinja = manifest.packages[-1]
        assert jinja.requirement_kind == "exactVersion"
        assert jinja.repo_name == "Jinja"

    def test_missing_targets_default(self, tmp_path):
        path = tmp_path / "m.yaml"
        path.write_text("packages:\n  - url: https://x/y\n    version: '1.0.0'\n    products: [Y]\n")
        assert read_manifest(path).targets == DEFAULT_TARGETS

    def test_entry_missing_fields(self, tmp_path):
        path = tmp_path / "m.yaml"
        path.write_text("packages:\n  - url: https://x/y\n")
        with pytest.raises(ValueError, match="version, products"):
            read_manifest(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "m.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            read_manifest(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "m.yaml"
        path.write_text("packages: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            read_manifest(path)

    def test_resolve_builtin(self, monkeypatch):
        monkeypatch.delenv("SPMLINK_MANIFEST", raising=False)
        manifest = resolve_manifest()
        assert manifest.source == "<built-in>"
        assert manifest.packages == DEFAULT_PACKAGES

    def test_resolve_from_env(self, monkeypatch):
        monkeypatch.setenv("SPMLINK_MANIFEST", str(FIXTURES / "manifest.yaml"))
        assert len(resolve_manifest().packages) == 3

    def test_summary_groups_by_package(self):
        text = Manifest().summary()
        assert "mlx-swift (upToNextMajorVersion 0.25.6): MLX, MLXFast, MLXNN, MLXRandom" in text


class TestDeclarator:
    def test_declare_creates_reference_and_product(self, project):
        dep_id = declare_dependency(project, MLX)
        refs = project.records_of_type(PackageReference)
        assert len(refs) == 1
        ref = next(iter(refs.values()))
        assert ref.repository_url == MLX.repository_url
        assert ref.requirement == MLX.requirement
        assert project.root.package_references == [ref.id]

        dep = project.get(dep_id)
        assert isinstance(dep, ProductDependency)
        assert dep.package == ref.id
        assert dep.product_name == "MLX"

    def test_declare_is_idempotent(self, project):
        first = declare_dependency(project, MLX)
        snapshot = copy.deepcopy(project.data)
        assert declare_dependency(project, MLX) == first
        assert project.data == snapshot

    def test_products_share_one_reference(self, project):
        a = declare_dependency(project, MLX)
        b = declare_dependency(project, MLX_NN)
        assert a != b
        assert project.count(PackageReference) == 1
        assert project.get(a).package == project.get(b).package

    def test_reuses_reference_from_existing_project(self, project):
        project.insert(PackageReference.create("EXISTING", MLX.repository_url, {"kind": "exactVersion", "version": "0.1.0"}))
        project.root.add_package_reference("EXISTING")
        dep_id = declare_dependency(project, MLX)
        assert project.get(dep_id).package == "EXISTING"
        assert project.count(PackageReference) == 1
        # the existing requirement is left alone
        assert project.get("EXISTING").requirement["version"] == "0.1.0"

    def test_registers_unlisted_existing_reference(self, project):
        project.insert(PackageReference.create("ORPHAN", MLX.repository_url, MLX.requirement))
        declare_dependency(project, MLX)
        assert project.root.package_references == ["ORPHAN"]

    def test_root_listed_with_comment_not_appended_twice(self, project):
        project.insert(PackageReference.create("REF", MLX.repository_url, MLX.requirement))
        project.root.raw["packageReferences"] = ['REF /* XCRemoteSwiftPackageReference "mlx-swift" */']
        declare_dependency(project, MLX)
        assert len(project.root.raw["packageReferences"]) == 1

    def test_missing_root_aborts_without_mutation(self):
        graph = ProjectGraph({"objects": {}}, ids=sequential_ids())
        with pytest.raises(StructuralError):
            declare_dependency(graph, MLX)
        assert graph.objects == {}

    def test_declare_dependencies_preserves_order(self, project):
        result = declare_dependencies(project, [JINJA, MLX, MLX_NN])
        assert list(result) == [JINJA, MLX, MLX_NN]
        assert project.count(PackageReference) == 2
        assert project.count(ProductDependency) == 3

    def test_sequential_ids_used(self, project):
        dep_id = declare_dependency(project, MLX)
        assert project.root.package_references == ["ID0001"]
        assert dep_id == "ID0002"


class TestLinker:
    def test_link_adds_build_file(self, project):
        dep_id = declare_dependency(project, MLX)
        assert link_product_to_target(project, "example", dep_id) == ADDED

        target = find_target(project, "example")
        phase = find_link_phase(project, target)
        assert "MLX" in linked_product_names(project, phase)
        assert phase.files[0] == "96905EF65AED1B983A6B3ABC"
        assert target.package_product_dependencies == [dep_id]

    def test_link_twice_is_present(self, project):
        dep_id = declare_dependency(project, MLX)
        link_product_to_target(project, "example", dep_id)
        snapshot = copy.deepcopy(project.data)
        assert link_product_to_target(project, "example", dep_id) == PRESENT
        assert project.data == snapshot

    def test_missing_target_skips_and_warns(self, project, caplog):
        dep_id = declare_dependency(project, MLX)
        snapshot = copy.deepcopy(project.data)
        warnings: list[LookupWarning] = []
        with caplog.at_level("WARNING"):
            action = link_product_to_target(project, "react-native-fastvlm-ios", dep_id, warnings)
        assert action == SKIPPED
        assert project.data == snapshot
        assert warnings[0].target == "react-native-fastvlm-ios"
        assert "not found" in caplog.text

    def test_target_without_link_phase_skips(self, project):
        dep_id = declare_dependency(project, MLX)
        warnings: list[LookupWarning] = []
        assert link_product_to_target(project, "exampleTests", dep_id, warnings) == SKIPPED
        assert "frameworks build phase" in warnings[0].reason

    def test_unknown_product_id_rejected(self, project):
        with pytest.raises(ValueError):
            link_product_to_target(project, "example", "13B07F961A680F5B00A75B9A")

    def test_dedup_by_product_name_across_packages(self, project):
        """A product with the same name from a fork still counts as linked."""
        fork = PackageCoordinate("https://github.com/someone/mlx-swift-fork", "MLX", "0.25.6")
        link_product_to_target(project, "example", declare_dependency(project, MLX))
        assert link_product_to_target(project, "example", declare_dependency(project, fork)) == PRESENT


class TestIntegrationPass:
    def test_apply_defaults(self, project):
        result = apply_packages(project)
        assert len(result.declared) == 8
        assert len(result.linked) == 8
        assert all(target == "example" for target, _ in result.linked)
        # pod target is absent from the app project
        assert {w.target for w in result.warnings} == {"react-native-fastvlm-ios"}
        assert result.changed
        assert validate_project(project).passed

    def test_reference_uniqueness(self, project):
        apply_packages(project, DEFAULT_PACKAGES + DEFAULT_PACKAGES[:3])
        s = shape(project)
        assert len(s["refs"]) == len(set(s["refs"])) == 4
        assert len(s["products"]) == len(set(s["products"])) == 8

    def test_idempotent(self, project):
        apply_packages(project)
        once = shape(project)
        snapshot = copy.deepcopy(project.data)

        second = apply_packages(project)
        assert shape(project) == once
        assert project.data == snapshot
        assert not second.changed
        assert second.linked == []
        assert len(second.already_linked) == 8

    def test_confluent(self, project):
        other = ProjectGraph(copy.deepcopy(project.data), ids=sequential_ids("X"))
        shuffled = list(DEFAULT_PACKAGES)
        random.Random(7).shuffle(shuffled)

        apply_packages(project, DEFAULT_PACKAGES, ["example"])
        apply_packages(other, shuffled, ["example"])
        assert shape(project) == shape(other)

    def test_missing_target_does_not_block_others(self, project):
        result = apply_packages(project, [MLX], ["nope", "example", "also-nope"])
        assert result.linked == [("example", "MLX")]
        assert len(result.warnings) == 2

    def test_structural_error_propagates(self):
        graph = ProjectGraph({"objects": {}, "rootObject": "GONE"})
        with pytest.raises(StructuralError):
            apply_packages(graph, [MLX], ["example"])

    def test_summary(self, project):
        text = apply_packages(project, [MLX], ["example"]).summary()
        assert "+ MLX -> example" in text


class TestIntegrateProject:
    def test_writes_once(self, project_file):
        result = integrate_project(project_file, ids=sequential_ids())
        assert result.written
        data = json.loads(project_file.read_text())
        assert len(data["objects"]["83CBB9F71A601CBA00E9B192"]["packageReferences"]) == 4

        first_text = project_file.read_text()
        again = integrate_project(project_file)
        assert not again.written
        assert project_file.read_text() == first_text

    def test_dry_run_leaves_file(self, project_file):
        before = project_file.read_text()
        result = integrate_project(project_file, dry_run=True)
        assert result.changed
        assert not result.written
        assert project_file.read_text() == before

    def test_failed_pass_leaves_file(self, tmp_path):
        path = tmp_path / "project.json"
        content = json.dumps({"objects": {}, "rootObject": "GONE"})
        path.write_text(content)
        with pytest.raises(StructuralError):
            integrate_project(path, [MLX], ["example"])
        assert path.read_text() == content
