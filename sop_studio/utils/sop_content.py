"""The SOP document tree returned by the model and stored as JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# (title, attribute, wire key) in document order
SECTION_ORDER = [
    ("PURPOSE", "purpose", "purpose"),
    ("SCOPE", "scope", "scope"),
    ("RESPONSIBILITIES", "responsibilities", "responsibilities"),
    ("PROCEDURES", "procedures", "procedures"),
    ("SAFETY NOTES", "safety_notes", "safetyNotes"),
    ("REFERENCES", "references", "references"),
    ("ACCEPTANCE CRITERIA", "acceptance_criteria", "acceptanceCriteria"),
]


def _as_text_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return [str(value)]


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class ProcedureStep:
    step: int
    action: str
    details: Optional[str] = None
    warning: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], position: int) -> "ProcedureStep":
        raw_step = data.get("step")
        try:
            step = int(raw_step)
        except (TypeError, ValueError):
            step = position
        return cls(
            step=step,
            action=str(data.get("action") or "").strip(),
            details=_optional_text(data.get("details")),
            warning=_optional_text(data.get("warning")),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"step": self.step, "action": self.action}
        if self.details:
            payload["details"] = self.details
        if self.warning:
            payload["warning"] = self.warning
        return payload


@dataclass
class SOPContent:
    purpose: str = ""
    scope: str = ""
    responsibilities: List[str] = field(default_factory=list)
    procedures: List[ProcedureStep] = field(default_factory=list)
    safety_notes: List[str] = field(default_factory=list)
    references: List[str] = field(default_factory=list)
    acceptance_criteria: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SOPContent":
        if not isinstance(data, dict):
            raise ValueError("SOP content must be a JSON object")
        procedures: List[ProcedureStep] = []
        raw_procedures = data.get("procedures")
        if isinstance(raw_procedures, list):
            for idx, item in enumerate(raw_procedures, start=1):
                if isinstance(item, dict):
                    procedures.append(ProcedureStep.from_dict(item, idx))
                elif isinstance(item, str) and item.strip():
                    procedures.append(ProcedureStep(step=idx, action=item.strip()))
        return cls(
            purpose=str(data.get("purpose") or "").strip(),
            scope=str(data.get("scope") or "").strip(),
            responsibilities=_as_text_list(data.get("responsibilities")),
            procedures=procedures,
            safety_notes=_as_text_list(data.get("safetyNotes", data.get("safety_notes"))),
            references=_as_text_list(data.get("references")),
            acceptance_criteria=_as_text_list(
                data.get("acceptanceCriteria", data.get("acceptance_criteria"))
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "purpose": self.purpose,
            "scope": self.scope,
            "responsibilities": list(self.responsibilities),
            "procedures": [step.to_dict() for step in self.procedures],
            "safetyNotes": list(self.safety_notes),
            "references": list(self.references),
            "acceptanceCriteria": list(self.acceptance_criteria),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


def load_content(raw: Any) -> Any:
    """Decode stored content; strings are parsed as JSON, other values pass through."""
    if raw is None or raw == "":
        return {}
    if isinstance(raw, (dict, list)):
        return raw
    try:
        return json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise ValueError(f"Stored SOP content is not valid JSON: {exc}") from exc


def is_structured(content: Any) -> bool:
    return isinstance(content, dict) and bool(content.get("purpose"))


def dump_content(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, SOPContent):
        return content.to_json()
    return json.dumps(content if content is not None else {}, ensure_ascii=False)


__all__ = [
    "SECTION_ORDER",
    "ProcedureStep",
    "SOPContent",
    "load_content",
    "is_structured",
    "dump_content",
]
