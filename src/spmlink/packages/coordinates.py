"""Package coordinates and the compiled-in package set.

The default set is everything the react-native-fastvlm-ios pod needs from
Swift Package Manager: MLX and its examples (for the VLM runtime),
swift-transformers (tokenizers), and Jinja (chat templates).
"""

from __future__ import annotations

from dataclasses import dataclass, field

REQUIREMENT_KINDS = {"upToNextMajorVersion", "upToNextMinorVersion", "exactVersion"}
DEFAULT_REQUIREMENT_KIND = "upToNextMajorVersion"


def repo_name_from_url(url: str) -> str:
    """Last path segment of a repository URL, without a ``.git`` suffix."""
    name = url.rstrip("/").rsplit("/", 1)[-1]
    return name[:-4] if name.endswith(".git") else name


@dataclass(frozen=True)
class PackageCoordinate:
    """One product of one remote Swift package, pinned by a version requirement."""

    repository_url: str
    product_name: str
    minimum_version: str
    requirement_kind: str = DEFAULT_REQUIREMENT_KIND
    repo_name: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if self.requirement_kind not in REQUIREMENT_KINDS:
            raise ValueError(
                f"Invalid requirement kind '{self.requirement_kind}' "
                f"(valid: {', '.join(sorted(REQUIREMENT_KINDS))})"
            )
        if not self.repository_url or not self.product_name:
            raise ValueError("Package coordinate needs a repository URL and a product name")
        if not self.repo_name:
            object.__setattr__(self, "repo_name", repo_name_from_url(self.repository_url))

    @property
    def requirement(self) -> dict[str, str]:
        """Requirement mapping in the shape Xcode persists it."""
        if self.requirement_kind == "exactVersion":
            return {"kind": self.requirement_kind, "version": self.minimum_version}
        return {"kind": self.requirement_kind, "minimumVersion": self.minimum_version}


def expand(url: str, version: str, products: list[str], kind: str = DEFAULT_REQUIREMENT_KIND) -> list[PackageCoordinate]:
    """One coordinate per product of a single package."""
    return [PackageCoordinate(url, product, version, kind) for product in products]


DEFAULT_PACKAGES: list[PackageCoordinate] = [
    *expand("https://github.com/ml-explore/mlx-swift", "0.25.6",
            ["MLX", "MLXFast", "MLXNN", "MLXRandom"]),
    *expand("https://github.com/ml-explore/mlx-swift-examples", "2.25.7",
            ["MLXLMCommon", "MLXVLM"]),
    *expand("https://github.com/huggingface/swift-transformers", "0.1.24",
            ["Transformers"]),
    *expand("https://github.com/maiqingqiang/Jinja", "1.3.0",
            ["Jinja"]),
]

# Main app target and the pod target
DEFAULT_TARGETS: list[str] = ["example", "react-native-fastvlm-ios"]
