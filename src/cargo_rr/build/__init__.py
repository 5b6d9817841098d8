"""Build integration: cargo invocation, artifact resolution, test enumeration."""

from .artifacts import ArtifactResolver
from .cargo import Cargo, parse_messages
from .enumerator import TestEnumerator
from .filters import FeatureSpec, NameSpec, TypeSpec
from .requests import BuildOptions, RunRequest, TestRequest

__all__ = [
    "ArtifactResolver",
    "BuildOptions",
    "Cargo",
    "FeatureSpec",
    "NameSpec",
    "RunRequest",
    "TestEnumerator",
    "TestRequest",
    "TypeSpec",
    "parse_messages",
]
