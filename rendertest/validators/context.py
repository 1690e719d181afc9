"""
Per-assertion execution state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..rendering import Manifest, RenderError

if TYPE_CHECKING:
    from ..snapshot import SnapshotComparer


@dataclass(frozen=True)
class ValidateContext:
    """
    Everything a validator may look at while evaluating one assertion.

    Attributes:
        manifests: Documents selected for the assertion, in index order
        negative: Flip the polarity of the expected-vs-actual match
        fail_fast: Stop at the first failing document
        strict: Strict parsing was requested for the run
        render_error: The render failure, if rendering failed
        snapshot: Snapshot comparer bound to the current job
    """
    manifests: tuple[Manifest, ...] = ()
    negative: bool = False
    fail_fast: bool = False
    strict: bool = False
    render_error: RenderError | None = None
    snapshot: SnapshotComparer | None = None

    def get_manifests(self) -> tuple[Manifest, ...]:
        return self.manifests
