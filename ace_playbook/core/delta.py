"""Delta operations: the unit of change between the Curator and the Playbook."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence

logger = logging.getLogger(__name__)

OperationType = Literal["ADD", "UPDATE", "TAG", "REMOVE"]

OPERATION_TYPES: frozenset = frozenset({"ADD", "UPDATE", "TAG", "REMOVE"})
TARGETED_TYPES: frozenset = frozenset({"UPDATE", "TAG", "REMOVE"})


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


def _coerce_count(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # json.loads accepts NaN and Infinity
        return int(value) if math.isfinite(value) else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass
class DeltaOperation:
    """Single mutation to apply to the playbook.

    ``metadata`` is read per type: initial counters for ADD, counter
    overwrites for UPDATE, counter increments for TAG.  ``type`` is kept
    as received; the playbook matches it case-insensitively.
    """

    type: str
    section: str = ""
    content: Optional[str] = None
    bullet_id: Optional[str] = None
    metadata: Dict[str, int] = field(default_factory=dict)

    @property
    def kind(self) -> str:
        """Upper-cased operation type."""
        return self.type.upper()

    def problems(self) -> List[str]:
        """Return structural problems that make this operation unappliable."""
        issues: List[str] = []
        if self.kind not in OPERATION_TYPES:
            issues.append(f"unknown operation type {self.type!r}")
        elif self.kind in TARGETED_TYPES and not self.bullet_id:
            issues.append(f"{self.kind} requires bullet_id")
        return issues

    @classmethod
    def from_json(
        cls,
        payload: Dict[str, Any],
        diagnostics: Optional[List[str]] = None,
    ) -> "DeltaOperation":
        """Decode one operation object, recording anomalies in *diagnostics*."""
        notes = diagnostics if diagnostics is not None else []

        metadata_raw = payload.get("metadata") or {}
        metadata: Dict[str, int] = {}
        if isinstance(metadata_raw, dict):
            for key, value in metadata_raw.items():
                count = _coerce_count(value)
                if count is None:
                    notes.append(f"metadata[{key!r}]={value!r} is not numeric")
                    continue
                metadata[str(key)] = count
        else:
            notes.append(f"metadata is {type(metadata_raw).__name__}, not an object")

        operation = cls(
            type=str(payload.get("type") or ""),
            section=str(payload.get("section") or ""),
            content=_optional_text(payload.get("content")),
            bullet_id=_optional_text(payload.get("bullet_id")),
            metadata=metadata,
        )
        notes.extend(operation.problems())
        return operation

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "section": self.section}
        if self.content is not None:
            data["content"] = self.content
        if self.bullet_id is not None:
            data["bullet_id"] = self.bullet_id
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


@dataclass
class DeltaBatch:
    """Bundle of curator reasoning and operations, applied in order.

    ``diagnostics`` lists whatever the decoder had to drop or flag; it is
    not part of the wire format.
    """

    reasoning: str = ""
    operations: List[DeltaOperation] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list, compare=False, repr=False)

    @classmethod
    def from_json(cls, payload: Dict[str, Any]) -> "DeltaBatch":
        diagnostics: List[str] = []
        operations: List[DeltaOperation] = []

        ops_payload = payload.get("operations")
        if isinstance(ops_payload, Sequence) and not isinstance(ops_payload, str):
            for index, item in enumerate(ops_payload):
                if not isinstance(item, dict):
                    diagnostics.append(
                        f"operations[{index}] dropped: {type(item).__name__} is not an object"
                    )
                    continue
                notes: List[str] = []
                operations.append(DeltaOperation.from_json(item, notes))
                diagnostics.extend(f"operations[{index}]: {note}" for note in notes)
        elif ops_payload is not None:
            diagnostics.append(
                f"operations is {type(ops_payload).__name__}, not a list"
            )

        for note in diagnostics:
            logger.debug("Delta decode: %s", note)

        reasoning = payload.get("reasoning")
        return cls(
            reasoning=str(reasoning) if reasoning is not None else "",
            operations=operations,
            diagnostics=diagnostics,
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "reasoning": self.reasoning,
            "operations": [op.to_json() for op in self.operations],
        }
