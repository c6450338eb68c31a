"""Typed views over the objects table of a project descriptor.

Every object in the table is a mapping with an ``isa`` tag. The classes
here wrap that mapping by reference, so reading a property reads the
document and mutating through a method mutates the document. Objects
with an ``isa`` not listed in ``RECORD_TYPES`` load as a plain ``Record``
and round-trip untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar

# Xcode's ASCII writer annotates references as "ID /* comment */"
_COMMENT_RE = re.compile(r"\s*/\*.*?\*/\s*")


def strip_comment(ref: str) -> str:
    """Return the bare object id from a possibly annotated reference."""
    return _COMMENT_RE.sub("", ref).strip()


@dataclass
class Record:
    """Any object in the table."""

    id: str
    raw: dict[str, Any] = field(default_factory=dict)

    isa: ClassVar[str] = ""

    @property
    def kind(self) -> str:
        return self.raw.get("isa", "")

    def _refs(self, key: str) -> list[str]:
        return [strip_comment(r) for r in self.raw.get(key) or []]

    def _append_ref(self, key: str, ref: str) -> bool:
        """Append *ref* to the list under *key* unless already present."""
        if ref in self._refs(key):
            return False
        self.raw.setdefault(key, []).append(ref)
        return True


@dataclass
class ProjectRoot(Record):
    """The PBXProject object that ``rootObject`` points at."""

    isa: ClassVar[str] = "PBXProject"

    @property
    def package_references(self) -> list[str]:
        return self._refs("packageReferences")

    @property
    def targets(self) -> list[str]:
        return self._refs("targets")

    def add_package_reference(self, ref_id: str) -> bool:
        return self._append_ref("packageReferences", ref_id)


@dataclass
class PackageReference(Record):
    isa: ClassVar[str] = "XCRemoteSwiftPackageReference"

    @classmethod
    def create(cls, ref_id: str, repository_url: str, requirement: dict) -> PackageReference:
        return cls(ref_id, {
            "isa": cls.isa,
            "repositoryURL": repository_url,
            "requirement": dict(requirement),
        })

    @property
    def repository_url(self) -> str:
        return self.raw.get("repositoryURL", "")

    @property
    def requirement(self) -> dict:
        return self.raw.get("requirement") or {}


@dataclass
class ProductDependency(Record):
    isa: ClassVar[str] = "XCSwiftPackageProductDependency"

    @classmethod
    def create(cls, dep_id: str, package_id: str, product_name: str) -> ProductDependency:
        return cls(dep_id, {
            "isa": cls.isa,
            "package": package_id,
            "productName": product_name,
        })

    @property
    def package(self) -> str:
        ref = self.raw.get("package")
        return strip_comment(ref) if ref else ""

    @property
    def product_name(self) -> str:
        return self.raw.get("productName", "")


@dataclass
class BuildTarget(Record):
    isa: ClassVar[str] = "PBXNativeTarget"

    @property
    def name(self) -> str:
        return self.raw.get("name", "")

    @property
    def build_phases(self) -> list[str]:
        return self._refs("buildPhases")

    @property
    def package_product_dependencies(self) -> list[str]:
        return self._refs("packageProductDependencies")

    def add_package_product(self, dep_id: str) -> bool:
        return self._append_ref("packageProductDependencies", dep_id)


@dataclass
class LinkPhase(Record):
    """A PBXFrameworksBuildPhase: the phase that links libraries into a target."""

    isa: ClassVar[str] = "PBXFrameworksBuildPhase"

    @property
    def files(self) -> list[str]:
        return self._refs("files")

    def append_file(self, file_id: str) -> bool:
        return self._append_ref("files", file_id)


@dataclass
class BuildFileEntry(Record):
    isa: ClassVar[str] = "PBXBuildFile"

    @classmethod
    def create(cls, file_id: str, product_ref: str) -> BuildFileEntry:
        return cls(file_id, {"isa": cls.isa, "productRef": product_ref})

    @property
    def product_ref(self) -> str:
        ref = self.raw.get("productRef")
        return strip_comment(ref) if ref else ""


RECORD_TYPES: dict[str, type[Record]] = {
    cls.isa: cls
    for cls in (
        ProjectRoot,
        PackageReference,
        ProductDependency,
        BuildTarget,
        LinkPhase,
        BuildFileEntry,
    )
}


def make_record(obj_id: str, raw: dict) -> Record:
    """Wrap a raw object in the view class matching its ``isa`` tag."""
    cls = RECORD_TYPES.get(raw.get("isa", ""), Record)
    return cls(obj_id, raw)
