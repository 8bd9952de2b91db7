"""ace_playbook: a self-improving playbook grown from generate/reflect/curate loops."""

from .adaptation import AdapterBase, AdapterStepResult, OfflineAdapter, OnlineAdapter
from .config import AdaptationConfig, LLMConfig
from .core import (
    COUNTERS,
    AdaptationContext,
    Bullet,
    BulletTag,
    CuratorOutput,
    DeltaApplyReport,
    DeltaBatch,
    DeltaOperation,
    EnvironmentResult,
    GeneratorOutput,
    OperationType,
    Playbook,
    PlaybookView,
    ReflectionWindow,
    ReflectorOutput,
    Sample,
    SimpleEnvironment,
    TaskEnvironment,
)
from .errors import InvalidTagError, ScriptExhaustedError, StructuredOutputError
from .protocols import CuratorLike, GeneratorLike, LLMClientLike, ReflectorLike
from .providers import (
    DummyLLMClient,
    LLMResponse,
    TransformersLLMClient,
    create_llm_client,
)
from .roles import Curator, Generator, Reflector

__all__ = [
    # Playbook
    "COUNTERS",
    "Bullet",
    "DeltaApplyReport",
    "Playbook",
    "PlaybookView",
    # Delta
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
    "ReflectionWindow",
    # Environments
    "EnvironmentResult",
    "Sample",
    "SimpleEnvironment",
    "TaskEnvironment",
    # Protocols
    "CuratorLike",
    "GeneratorLike",
    "LLMClientLike",
    "ReflectorLike",
    # Roles
    "Curator",
    "Generator",
    "Reflector",
    # Providers
    "DummyLLMClient",
    "LLMResponse",
    "TransformersLLMClient",
    "create_llm_client",
    # Loops
    "AdapterBase",
    "AdapterStepResult",
    "OfflineAdapter",
    "OnlineAdapter",
    # Config
    "AdaptationConfig",
    "LLMConfig",
    # Errors
    "InvalidTagError",
    "ScriptExhaustedError",
    "StructuredOutputError",
]
