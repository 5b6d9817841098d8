# ABOUTME: Filters cargo artifact messages down to workspace executables of the requested categories.
# ABOUTME: Deduplicates by source path and resolves ambiguity through an injected Picker.
"""Artifact resolution for cargo-rr."""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable

from cargo_rr.contracts import (
    ArtifactCategory,
    ArtifactDescriptor,
    CompilerArtifact,
    WorkspaceMetadata,
)
from cargo_rr.errors import NoCandidatesError
from cargo_rr.selection import Picker

logger = logging.getLogger(__name__)


class ArtifactResolver:
    def __init__(self, metadata: WorkspaceMetadata, picker: Picker) -> None:
        self.metadata = metadata
        self.picker = picker

    def candidates(
        self,
        messages: Iterable[CompilerArtifact],
        categories: Collection[ArtifactCategory],
    ) -> list[ArtifactDescriptor]:
        filtered: list[ArtifactDescriptor] = []
        for message in messages:
            if message.executable is None:
                continue
            if not self.metadata.is_member(message.package_id):
                continue
            descriptor = ArtifactDescriptor.from_message(message)
            if descriptor is None or descriptor.category not in categories:
                continue
            filtered.append(descriptor)

        # cargo may report the same target more than once.
        filtered.sort(key=lambda artifact: str(artifact.src_path))
        unique: list[ArtifactDescriptor] = []
        for artifact in filtered:
            if unique and unique[-1].src_path == artifact.src_path:
                continue
            unique.append(artifact)
        logger.debug(
            "Artifact candidates: %s", [self.metadata.relative_label(a.src_path) for a in unique]
        )
        return unique

    def choose(
        self, candidates: list[ArtifactDescriptor], prompt: str = "Pick an artifact to run"
    ) -> ArtifactDescriptor | None:
        if not candidates:
            raise NoCandidatesError("No artifacts built matching the request")
        if len(candidates) == 1:
            return candidates[0]
        labels = [self.metadata.relative_label(artifact.src_path) for artifact in candidates]
        choice = self.picker.pick(prompt, labels)
        if choice is None:
            return None
        return candidates[choice]

    def resolve(
        self,
        messages: Iterable[CompilerArtifact],
        categories: Collection[ArtifactCategory],
    ) -> ArtifactDescriptor | None:
        return self.choose(self.candidates(messages, categories))
