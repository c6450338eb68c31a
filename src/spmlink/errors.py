"""Exception hierarchy shared across spmlink."""


class SpmlinkError(Exception):
    """Base class for all spmlink failures."""


class StructuralError(SpmlinkError):
    """The project graph is missing a required anchor (objects table or root project)."""


class ProjectIOError(OSError):
    """A project descriptor could not be parsed or serialized."""


class LookupWarning(UserWarning):
    """A named target or its link phase was not found. Never raised, only collected."""

    def __init__(self, target: str, reason: str):
        super().__init__(f"{target}: {reason}")
        self.target = target
        self.reason = reason
