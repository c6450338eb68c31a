"""In-memory project graph: typed access to the descriptor's objects table."""

from __future__ import annotations

from typing import Callable, TypeVar

from spmlink.errors import StructuralError
from spmlink.project.ids import IdGenerator, xcode_ids
from spmlink.project.records import ProjectRoot, Record, make_record, strip_comment

R = TypeVar("R", bound=Record)

# Give up rather than spin forever on a broken generator
_MAX_ID_ATTEMPTS = 100


class ProjectGraph:
    """Handle over a parsed project document.

    The document is kept as-is so that unknown keys and object types
    survive a load/save cycle. Lookups are linear scans; a project holds
    tens to a few thousand objects and the pass touches each kind once
    per coordinate.
    """

    def __init__(self, data: dict, ids: IdGenerator | None = None):
        self.data = data
        self._ids = ids or xcode_ids()

    @property
    def objects(self) -> dict[str, dict]:
        objects = self.data.get("objects")
        if not isinstance(objects, dict):
            raise StructuralError("Project has no 'objects' table")
        return objects

    @property
    def root(self) -> ProjectRoot:
        """Return the root PBXProject, raising StructuralError if absent."""
        root_ref = self.data.get("rootObject")
        if not root_ref:
            raise StructuralError("Project has no 'rootObject'")
        root_id = strip_comment(root_ref)
        raw = self.objects.get(root_id)
        if raw is None or raw.get("isa") != ProjectRoot.isa:
            raise StructuralError(f"rootObject '{root_id}' is not a {ProjectRoot.isa}")
        return ProjectRoot(root_id, raw)

    def get(self, obj_id: str) -> Record | None:
        obj_id = strip_comment(obj_id)
        raw = self.objects.get(obj_id)
        if not isinstance(raw, dict):
            return None
        return make_record(obj_id, raw)

    def records_of_type(self, kind: type[R] | str) -> dict[str, R]:
        """Return ``{id: record}`` for every object of the given kind."""
        isa = kind if isinstance(kind, str) else kind.isa
        return {
            obj_id: make_record(obj_id, raw)
            for obj_id, raw in self.objects.items()
            if isinstance(raw, dict) and raw.get("isa") == isa
        }

    def find(self, kind: type[R] | str, predicate: Callable[[R], bool]) -> R | None:
        """Return the first record of *kind* matching *predicate*, or None."""
        for record in self.records_of_type(kind).values():
            if predicate(record):
                return record
        return None

    def insert(self, record: Record) -> None:
        objects = self.objects
        if record.id in objects:
            raise ValueError(f"Object id '{record.id}' already exists")
        objects[record.id] = record.raw

    def new_id(self) -> str:
        """Return an id from the generator that no existing object uses."""
        objects = self.objects
        for _ in range(_MAX_ID_ATTEMPTS):
            candidate = self._ids()
            if candidate not in objects:
                return candidate
        raise RuntimeError("Id generator keeps producing colliding ids")

    def count(self, kind: type[Record] | str) -> int:
        return len(self.records_of_type(kind))


def load(data: dict, ids: IdGenerator | None = None) -> ProjectGraph:
    """Wrap a parsed project document in a ProjectGraph."""
    return ProjectGraph(data, ids)
