"""Structured `run` / `test` requests and the cargo invocations they imply."""

from __future__ import annotations

from pydantic import BaseModel, Field

from cargo_rr.build.filters import FeatureSpec, NameSpec, TypeSpec
from cargo_rr.contracts import RUN_CATEGORIES, TEST_CATEGORIES, ArtifactCategory
from cargo_rr.errors import InputConflictError


class BuildOptions(BaseModel):
    packages: list[str] = Field(default_factory=list)
    features: FeatureSpec = Field(default_factory=FeatureSpec)
    release: bool = False
    profile: str | None = None

    def cargo_args(self) -> list[str]:
        if self.release and self.profile:
            raise InputConflictError("--release cannot be combined with --profile")
        args: list[str] = []
        for package in self.packages:
            args.extend(["--package", package])
        args.extend(self.features.cargo_args())
        if self.release:
            args.append("--release")
        if self.profile:
            args.extend(["--profile", self.profile])
        return args


class RunRequest(BaseModel):
    build: BuildOptions = Field(default_factory=BuildOptions)
    bin: str | None = None
    example: str | None = None

    def validate_flags(self) -> None:
        if self.bin is not None and self.example is not None:
            raise InputConflictError("--bin and --example cannot be used together")
        self.build.cargo_args()

    def categories(self) -> frozenset[ArtifactCategory]:
        if self.bin is not None:
            return frozenset({ArtifactCategory.BIN})
        if self.example is not None:
            return frozenset({ArtifactCategory.EXAMPLE})
        return RUN_CATEGORIES

    def cargo_args(self) -> list[str]:
        self.validate_flags()
        args = ["build", *self.build.cargo_args()]
        if self.bin is not None:
            args.extend(["--bin", self.bin])
        if self.example is not None:
            args.extend(["--example", self.example])
        return args


class TestRequest(BaseModel):
    __test__ = False

    build: BuildOptions = Field(default_factory=BuildOptions)
    name: NameSpec = Field(default_factory=NameSpec)
    target_type: TypeSpec = Field(default_factory=TypeSpec)

    def categories(self) -> frozenset[ArtifactCategory]:
        return TEST_CATEGORIES

    def cargo_args(self) -> list[str]:
        return ["test", "--no-run", *self.build.cargo_args(), *self.target_type.cargo_args()]
