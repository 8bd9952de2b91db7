"""Core data types for ace_playbook."""

from .context import AdaptationContext, PlaybookView, ReflectionWindow
from .delta import OPERATION_TYPES, DeltaBatch, DeltaOperation, OperationType
from .environments import EnvironmentResult, Sample, SimpleEnvironment, TaskEnvironment
from .outputs import BulletTag, CuratorOutput, GeneratorOutput, ReflectorOutput
from .playbook import COUNTERS, Bullet, DeltaApplyReport, Playbook

__all__ = [
    # Playbook types
    "COUNTERS",
    "Bullet",
    "DeltaApplyReport",
    "Playbook",
    # Delta
    "OPERATION_TYPES",
    "DeltaBatch",
    "DeltaOperation",
    "OperationType",
    # Outputs
    "BulletTag",
    "CuratorOutput",
    "GeneratorOutput",
    "ReflectorOutput",
    # Context
    "AdaptationContext",
    "PlaybookView",
    "ReflectionWindow",
    # Environments
    "EnvironmentResult",
    "Sample",
    "SimpleEnvironment",
    "TaskEnvironment",
]
