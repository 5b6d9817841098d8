# ABOUTME: Request filters (features, test name, test target type) and their cargo flag renderings.
# ABOUTME: Conflicting combinations fail with InputConflictError before anything is built.
"""Build and test filters for cargo-rr requests."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict

from cargo_rr.contracts import LIB_KINDS, ArtifactCategory, TestKind, TestSpec
from cargo_rr.errors import InputConflictError


class FeatureMode(str, Enum):
    DEFAULT = "default"
    ALL = "all"
    EXPLICIT = "explicit"
    NO_DEFAULT = "no-default"


class FeatureSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: FeatureMode = FeatureMode.DEFAULT
    features: tuple[str, ...] = ()

    @classmethod
    def from_flags(
        cls,
        *,
        features: Iterable[str] | None = None,
        all_features: bool = False,
        no_default_features: bool = False,
    ) -> FeatureSpec:
        names: list[str] = []
        for entry in features or []:
            # cargo accepts both `--features a,b` and `--features "a b"`.
            names.extend(part for part in entry.replace(",", " ").split() if part)
        if all_features and (names or no_default_features):
            raise InputConflictError(
                "--all-features cannot be combined with --features or --no-default-features"
            )
        if all_features:
            return cls(mode=FeatureMode.ALL)
        if no_default_features:
            return cls(mode=FeatureMode.NO_DEFAULT, features=tuple(names))
        if names:
            return cls(mode=FeatureMode.EXPLICIT, features=tuple(names))
        return cls()

    def cargo_args(self) -> list[str]:
        if self.mode is FeatureMode.ALL:
            return ["--all-features"]
        args: list[str] = []
        if self.mode is FeatureMode.NO_DEFAULT:
            args.append("--no-default-features")
        if self.features:
            args.extend(["--features", ",".join(self.features)])
        return args


class NameMode(str, Enum):
    ANY = "any"
    EXACT = "exact"
    SUBSTRING = "substring"


class NameSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    mode: NameMode = NameMode.ANY
    value: str = ""

    @classmethod
    def from_flags(cls, name: str | None, *, exact: bool = False) -> NameSpec:
        if not name:
            if exact:
                raise InputConflictError("--exact requires a test name")
            return cls()
        return cls(mode=NameMode.EXACT if exact else NameMode.SUBSTRING, value=name)

    def matches(self, test_name: str) -> bool:
        if self.mode is NameMode.EXACT:
            return test_name == self.value
        if self.mode is NameMode.SUBSTRING:
            return self.value in test_name
        return True


class TargetType(str, Enum):
    UNSPECIFIED = "unspecified"
    LIB = "lib"
    BIN = "bin"
    BINS = "bins"
    INTEGRATION = "test"
    INTEGRATIONS = "tests"
    EXAMPLE = "example"
    EXAMPLES = "examples"
    DOC = "doc"


_NAMED_TYPES = {TargetType.BIN, TargetType.INTEGRATION, TargetType.EXAMPLE}


class TypeSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: TargetType = TargetType.UNSPECIFIED
    target: str | None = None

    @classmethod
    def from_flags(
        cls,
        *,
        lib: bool = False,
        bin: str | None = None,
        bins: bool = False,
        test: str | None = None,
        tests: bool = False,
        example: str | None = None,
        examples: bool = False,
        doc: bool = False,
    ) -> TypeSpec:
        requested: list[TypeSpec] = []
        if lib:
            requested.append(cls(kind=TargetType.LIB))
        if bin is not None:
            requested.append(cls(kind=TargetType.BIN, target=bin))
        if bins:
            requested.append(cls(kind=TargetType.BINS))
        if test is not None:
            requested.append(cls(kind=TargetType.INTEGRATION, target=test))
        if tests:
            requested.append(cls(kind=TargetType.INTEGRATIONS))
        if example is not None:
            requested.append(cls(kind=TargetType.EXAMPLE, target=example))
        if examples:
            requested.append(cls(kind=TargetType.EXAMPLES))
        if doc:
            requested.append(cls(kind=TargetType.DOC))

        if len(requested) > 1:
            flags = ", ".join(spec.flag() for spec in requested)
            raise InputConflictError(f"Only one test target type may be selected, got: {flags}")
        return requested[0] if requested else cls()

    def flag(self) -> str:
        if self.kind in _NAMED_TYPES:
            return f"--{self.kind.value} {self.target}"
        return f"--{self.kind.value}"

    def cargo_args(self) -> list[str]:
        if self.kind is TargetType.UNSPECIFIED:
            return []
        if self.kind in _NAMED_TYPES:
            return [f"--{self.kind.value}", str(self.target)]
        return [f"--{self.kind.value}"]

    def matches(self, spec: TestSpec) -> bool:
        artifact = spec.artifact
        kinds = set(artifact.target_kinds)
        is_unit = artifact.category is ArtifactCategory.UNIT_TEST
        named = self.target is None or artifact.target_name == self.target

        if self.kind is TargetType.UNSPECIFIED:
            return True
        if self.kind is TargetType.DOC:
            return spec.test.kind is TestKind.DOC
        if self.kind is TargetType.LIB:
            return is_unit and bool(kinds & LIB_KINDS)
        if self.kind in (TargetType.BIN, TargetType.BINS):
            return is_unit and "bin" in kinds and named
        if self.kind in (TargetType.INTEGRATION, TargetType.INTEGRATIONS):
            return artifact.category is ArtifactCategory.INTEGRATION_TEST and named
        if self.kind in (TargetType.EXAMPLE, TargetType.EXAMPLES):
            return "example" in kinds and named
        return False
