"""Generic pipeline engine: compose steps, validate wiring, run sequentially.

Public surface::

    from pipeline import (
        Pipeline,
        StepProtocol,
        StepContext,
        PipelineOrderError,
        PipelineConfigError,
    )
"""

from .context import StepContext
from .errors import PipelineConfigError, PipelineOrderError
from .pipeline import Pipeline
from .protocol import StepProtocol

__all__ = [
    "Pipeline",
    "StepProtocol",
    "StepContext",
    "PipelineOrderError",
    "PipelineConfigError",
]
