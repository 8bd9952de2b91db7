"""Pipeline error types."""

from __future__ import annotations


class PipelineOrderError(Exception):
    """A step requires a field that only a later step provides."""


class PipelineConfigError(Exception):
    """Invalid pipeline wiring.

    Examples:
    - A step that does not satisfy ``StepProtocol``.
    """
