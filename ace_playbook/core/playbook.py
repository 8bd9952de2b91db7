"""Bullet and Playbook: the knowledge store grown by the adaptation loop."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field, fields as dataclass_fields, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union, cast

from ..errors import InvalidTagError
from .delta import DeltaBatch, DeltaOperation

logger = logging.getLogger(__name__)

COUNTERS = ("helpful", "harmful", "neutral")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Bullet
# ---------------------------------------------------------------------------


@dataclass
class Bullet:
    """Single playbook entry: a piece of advice plus usage counters."""

    id: str
    section: str
    content: str
    helpful: int = 0
    harmful: int = 0
    neutral: int = 0
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    def set_counters(self, metadata: Dict[str, int]) -> None:
        """Overwrite the counters named in *metadata*; other keys are ignored."""
        for key, value in metadata.items():
            if key in COUNTERS:
                setattr(self, key, max(0, int(value)))

    def tag(self, tag: str, increment: int = 1) -> None:
        if tag not in COUNTERS:
            raise InvalidTagError(tag)
        setattr(self, tag, max(0, getattr(self, tag) + int(increment)))
        self.updated_at = _now()

    def render(self) -> str:
        counters = (
            f"(helpful={self.helpful}, harmful={self.harmful}, neutral={self.neutral})"
        )
        return f"- [{self.id}] {self.content} {counters}"


@dataclass
class DeltaApplyReport:
    """What ``Playbook.apply_delta`` did with a batch."""

    applied: int = 0
    skipped: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Playbook
# ---------------------------------------------------------------------------


class Playbook:
    """Sectioned store of bullets.

    The playbook is the single owner of its bullet and section collections.
    All mutation goes through ``add_bullet``, ``update_bullet``,
    ``tag_bullet``, ``remove_bullet`` and ``apply_delta``.  Every Bullet
    handed out, by a read accessor or as a mutator result, is a copy.
    A section exists only while it has members.
    """

    def __init__(self) -> None:
        self._bullets: Dict[str, Bullet] = {}
        self._sections: Dict[str, List[str]] = {}
        self._next_id = 0

    def __repr__(self) -> str:
        return f"Playbook(bullets={len(self._bullets)}, sections={list(self._sections)})"

    def __str__(self) -> str:
        return self.as_prompt() or "Playbook(empty)"

    def __len__(self) -> int:
        return len(self._bullets)

    def __contains__(self, bullet_id: object) -> bool:
        return bullet_id in self._bullets

    # ------------------------------------------------------------------ #
    # CRUD
    # ------------------------------------------------------------------ #

    def add_bullet(
        self,
        section: str,
        content: str,
        bullet_id: Optional[str] = None,
        metadata: Optional[Dict[str, int]] = None,
    ) -> Bullet:
        bullet_id = bullet_id or self._generate_id(section)
        bullet = Bullet(id=bullet_id, section=section, content=content)
        bullet.set_counters(metadata or {})

        previous = self._bullets.get(bullet_id)
        if previous is not None and previous.section != section:
            self._detach(previous)
        self._bullets[bullet_id] = bullet
        members = self._sections.setdefault(section, [])
        if bullet_id not in members:
            members.append(bullet_id)
        return replace(bullet)

    def update_bullet(
        self,
        bullet_id: str,
        *,
        content: Optional[str] = None,
        metadata: Optional[Dict[str, int]] = None,
    ) -> Optional[Bullet]:
        bullet = self._bullets.get(bullet_id)
        if bullet is None:
            return None
        if content is not None:
            bullet.content = content
        if metadata:
            bullet.set_counters(metadata)
        bullet.updated_at = _now()
        return replace(bullet)

    def tag_bullet(
        self, bullet_id: str, tag: str, increment: int = 1
    ) -> Optional[Bullet]:
        """Add *increment* to one counter of a bullet.

        Raises:
            InvalidTagError: *tag* is not helpful, harmful or neutral.
        """
        if tag not in COUNTERS:
            raise InvalidTagError(tag)
        bullet = self._bullets.get(bullet_id)
        if bullet is None:
            return None
        bullet.tag(tag, increment=increment)
        return replace(bullet)

    def remove_bullet(self, bullet_id: str) -> None:
        bullet = self._bullets.pop(bullet_id, None)
        if bullet is None:
            return
        self._detach(bullet)

    def get_bullet(self, bullet_id: str) -> Optional[Bullet]:
        bullet = self._bullets.get(bullet_id)
        return replace(bullet) if bullet is not None else None

    def bullets(self) -> List[Bullet]:
        return [replace(bullet) for bullet in self._bullets.values()]

    def sections(self) -> Dict[str, List[str]]:
        return {name: list(ids) for name, ids in self._sections.items()}

    # ------------------------------------------------------------------ #
    # Serialization
    # ------------------------------------------------------------------ #

    def to_dict(self) -> Dict[str, object]:
        return {
            "bullets": {bid: asdict(bullet) for bid, bullet in self._bullets.items()},
            "sections": self.sections(),
            "nextId": self._next_id,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, object]) -> "Playbook":
        instance = cls()
        instance.restore(payload)
        return instance

    def restore(self, payload: Dict[str, object]) -> None:
        """Replace the whole in-memory state with a ``to_dict`` snapshot."""
        valid_fields = {f.name for f in dataclass_fields(Bullet)}
        bullets: Dict[str, Bullet] = {}
        bullets_payload = payload.get("bullets", {})
        if isinstance(bullets_payload, dict):
            for bullet_id, value in bullets_payload.items():
                if isinstance(value, dict):
                    data = {k: v for k, v in value.items() if k in valid_fields}
                    data.setdefault("id", bullet_id)
                    bullets[bullet_id] = Bullet(**data)

        sections: Dict[str, List[str]] = {}
        sections_payload = payload.get("sections", {})
        if isinstance(sections_payload, dict):
            for name, ids in sections_payload.items():
                if isinstance(ids, Iterable) and not isinstance(ids, str):
                    members = [str(i) for i in ids]
                    if members:
                        sections[name] = members

        next_id = payload.get("nextId", payload.get("next_id", 0))
        self._bullets = bullets
        self._sections = sections
        self._next_id = int(cast(Union[int, str], next_id)) if next_id is not None else 0

    def dumps(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)

    @classmethod
    def loads(cls, data: str) -> "Playbook":
        payload = json.loads(data)
        if not isinstance(payload, dict):
            raise ValueError("Playbook serialization must be a JSON object.")
        return cls.from_dict(payload)

    def save_to_file(self, path: Union[str, Path]) -> None:
        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with file_path.open("w", encoding="utf-8") as f:
            f.write(self.dumps())

    @classmethod
    def load_from_file(cls, path: Union[str, Path]) -> "Playbook":
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Playbook file not found: {path}")
        with file_path.open("r", encoding="utf-8") as f:
            return cls.loads(f.read())

    # ------------------------------------------------------------------ #
    # Delta application
    # ------------------------------------------------------------------ #

    def apply_delta(self, delta: DeltaBatch) -> DeltaApplyReport:
        """Apply operations in order; bad operations are skipped, not fatal."""
        report = DeltaApplyReport()
        for index, operation in enumerate(delta.operations):
            problem = self._apply_operation(operation)
            if problem is None:
                report.applied += 1
            else:
                note = f"operations[{index}] {operation.type}: {problem}"
                logger.warning("Skipping delta operation %s", note)
                report.skipped.append(note)
        return report

    def _apply_operation(self, operation: DeltaOperation) -> Optional[str]:
        problems = operation.problems()
        if problems:
            return problems[0]

        op_type = operation.kind
        bullet_id = cast(str, operation.bullet_id)
        if op_type == "ADD":
            self.add_bullet(
                section=operation.section,
                content=operation.content or "",
                bullet_id=operation.bullet_id,
                metadata=operation.metadata,
            )
        elif op_type == "UPDATE":
            if self.update_bullet(
                bullet_id, content=operation.content, metadata=operation.metadata
            ) is None:
                return f"unknown bullet {bullet_id!r}"
        elif op_type == "TAG":
            if bullet_id not in self._bullets:
                return f"unknown bullet {bullet_id!r}"
            for tag, increment in operation.metadata.items():
                if tag in COUNTERS:
                    self.tag_bullet(bullet_id, tag, increment)
                else:
                    logger.warning(
                        "Ignoring unsupported tag %r on bullet %s", tag, bullet_id
                    )
        elif op_type == "REMOVE":
            if bullet_id not in self._bullets:
                return f"unknown bullet {bullet_id!r}"
            self.remove_bullet(bullet_id)
        return None

    # ------------------------------------------------------------------ #
    # Presentation
    # ------------------------------------------------------------------ #

    def as_prompt(self) -> str:
        """Render sections in creation order with one line per bullet."""
        parts: List[str] = []
        for section, bullet_ids in self._sections.items():
            parts.append(f"## {section}")
            for bullet_id in bullet_ids:
                parts.append(self._bullets[bullet_id].render())
        return "\n".join(parts)

    def stats(self) -> Dict[str, Any]:
        return {
            "sections": len(self._sections),
            "bullets": len(self._bullets),
            "tags": {
                counter: sum(getattr(b, counter) for b in self._bullets.values())
                for counter in COUNTERS
            },
        }

    # ------------------------------------------------------------------ #
    # Internal
    # ------------------------------------------------------------------ #

    def _detach(self, bullet: Bullet) -> None:
        section_list = self._sections.get(bullet.section)
        if section_list is None:
            return
        remaining = [bid for bid in section_list if bid != bullet.id]
        if remaining:
            self._sections[bullet.section] = remaining
        else:
            del self._sections[bullet.section]

    def _generate_id(self, section: str) -> str:
        self._next_id += 1
        tokens = section.split()
        section_prefix = tokens[0].lower() if tokens else ""
        return f"{section_prefix}-{self._next_id:05d}"
