from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

Base = declarative_base()


def _new_id() -> str:
    return uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )


class SOP(Base, TimestampMixin):
    __tablename__ = "sops"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    # JSON-encoded SOP document
    content: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    category: Mapped[Optional[str]] = mapped_column(String(200))
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="draft")
    version: Mapped[str] = mapped_column(String(32), nullable=False, default="1.0")
    industry: Mapped[str] = mapped_column(String(64), nullable=False, default="general")
    tone: Mapped[str] = mapped_column(String(64), nullable=False, default="formal")
    language: Mapped[str] = mapped_column(String(16), nullable=False, default="en")
    regulatory_framework: Mapped[Optional[str]] = mapped_column(Text)
    effective_date: Mapped[Optional[datetime]] = mapped_column(DateTime)

    def __repr__(self) -> str:
        return f"<SOP id={self.id} title={self.title!r} v{self.version}>"


class Persona(Base, TimestampMixin):
    __tablename__ = "personas"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    age: Mapped[Optional[int]] = mapped_column(Integer)
    occupation: Mapped[Optional[str]] = mapped_column(String(200))
    background: Mapped[Optional[str]] = mapped_column(Text)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(1000))
    # JSON-encoded attribute objects
    voice_profile: Mapped[Optional[str]] = mapped_column(Text)
    beliefs: Mapped[Optional[str]] = mapped_column(Text)
    tone_profile: Mapped[Optional[str]] = mapped_column(Text)
    behaviors: Mapped[Optional[str]] = mapped_column(Text)
    category: Mapped[Optional[str]] = mapped_column(String(64))
    is_prebuilt: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("0")
    )
    tags: Mapped[Optional[str]] = mapped_column(Text)
    usage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    last_used: Mapped[Optional[datetime]] = mapped_column(DateTime)

    responses: Mapped[List["PersonaResponse"]] = relationship(
        back_populates="persona",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    scenarios: Mapped[List["PersonaScenario"]] = relationship(
        back_populates="persona",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Persona id={self.id} name={self.name!r}>"


class PersonaResponse(Base):
    __tablename__ = "persona_responses"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    persona_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("personas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    response: Mapped[str] = mapped_column(Text, nullable=False)
    content_type: Mapped[str] = mapped_column(String(64), nullable=False, default="dialogue")
    scenario: Mapped[Optional[str]] = mapped_column(Text)
    target_audience: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    persona: Mapped[Persona] = relationship(back_populates="responses")


class PersonaScenario(Base):
    __tablename__ = "persona_scenarios"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    persona_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("personas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scenario_type: Mapped[str] = mapped_column(String(64), nullable=False)
    context: Mapped[Optional[str]] = mapped_column(Text)
    emotional_state: Mapped[Optional[str]] = mapped_column(String(200))
    stress_level: Mapped[Optional[int]] = mapped_column(Integer)
    response: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    persona: Mapped[Persona] = relationship(back_populates="scenarios")


__all__ = ["Base", "SOP", "Persona", "PersonaResponse", "PersonaScenario"]
