# ABOUTME: Defines the data contracts shared by the build, selection and recording layers.
# ABOUTME: Models cargo build-event messages and the artifact/test descriptors derived from them.
"""Shared contracts for cargo-rr components."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

LIB_KINDS = frozenset({"lib", "rlib", "dylib", "cdylib", "staticlib", "proc-macro"})


class ArtifactCategory(str, Enum):
    BIN = "bin"
    EXAMPLE = "example"
    LIB = "lib"
    INTEGRATION_TEST = "integration-test"
    UNIT_TEST = "unit-test"
    DOC_TEST = "doc-test"
    BENCH = "bench"


RUN_CATEGORIES = frozenset({ArtifactCategory.BIN, ArtifactCategory.EXAMPLE})
TEST_CATEGORIES = frozenset(
    {ArtifactCategory.UNIT_TEST, ArtifactCategory.INTEGRATION_TEST, ArtifactCategory.BENCH}
)


class TestKind(str, Enum):
    __test__ = False

    UNIT = "unit"
    INTEGRATION = "integration"
    DOC = "doc"
    BENCH = "bench"


class CargoTarget(BaseModel):
    name: str
    kind: list[str] = Field(default_factory=list)
    src_path: str


class CargoProfile(BaseModel):
    test: bool = False


class CompilerArtifact(BaseModel):
    """A `compiler-artifact` message from `cargo --message-format=json`."""

    reason: Literal["compiler-artifact"]
    package_id: str
    target: CargoTarget
    profile: CargoProfile = Field(default_factory=CargoProfile)
    executable: str | None = None
    fresh: bool = False

    def category(self) -> ArtifactCategory | None:
        kinds = set(self.target.kind)
        in_test_mode = self.profile.test
        if "test" in kinds:
            return ArtifactCategory.INTEGRATION_TEST
        if "bench" in kinds:
            return ArtifactCategory.BENCH
        if kinds & LIB_KINDS:
            return ArtifactCategory.UNIT_TEST if in_test_mode else ArtifactCategory.LIB
        if "bin" in kinds:
            return ArtifactCategory.UNIT_TEST if in_test_mode else ArtifactCategory.BIN
        if "example" in kinds:
            return ArtifactCategory.UNIT_TEST if in_test_mode else ArtifactCategory.EXAMPLE
        return None


class WorkspaceMetadata(BaseModel):
    """The subset of `cargo metadata --no-deps` output cargo-rr relies on."""

    workspace_root: Path
    target_directory: Path
    workspace_members: list[str] = Field(default_factory=list)

    def is_member(self, package_id: str) -> bool:
        return package_id in self.workspace_members

    def relative_label(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.workspace_root))
        except ValueError:
            return str(path)


class ArtifactDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    executable: Path
    category: ArtifactCategory
    package_id: str
    src_path: Path
    target_name: str
    target_kinds: tuple[str, ...] = ()

    @classmethod
    def from_message(cls, message: CompilerArtifact) -> ArtifactDescriptor | None:
        category = message.category()
        if message.executable is None or category is None:
            return None
        return cls(
            executable=Path(message.executable),
            category=category,
            package_id=message.package_id,
            src_path=Path(message.target.src_path),
            target_name=message.target.name,
            target_kinds=tuple(message.target.kind),
        )

    def default_test_kind(self) -> TestKind:
        if self.category is ArtifactCategory.INTEGRATION_TEST:
            return TestKind.INTEGRATION
        if self.category is ArtifactCategory.BENCH:
            return TestKind.BENCH
        if self.category is ArtifactCategory.DOC_TEST:
            return TestKind.DOC
        return TestKind.UNIT


class TestFunction(BaseModel):
    __test__ = False

    name: str
    kind: TestKind


class TestSpec(BaseModel):
    __test__ = False
    model_config = ConfigDict(frozen=True)

    artifact: ArtifactDescriptor
    test: TestFunction

    def label(self) -> str:
        return f"{self.artifact.target_name}::{self.test.name} ({self.test.kind.value})"
