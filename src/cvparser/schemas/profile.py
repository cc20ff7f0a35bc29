from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Skill(str, Enum):
    """Closed vocabulary of skill flags detected in a résumé."""

    COMMUNICATIONS = "communications"
    CAMPAIGNS = "campaigns"
    POLICY = "policy"
    PUBLIC_AFFAIRS = "public-affairs"


class ExperienceEntry(BaseModel):
    """One employment row recovered from the résumé text."""

    title: str = ""
    employer: str = ""
    start: str | None = None
    end: str | None = None

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class CandidateProfile(BaseModel):
    """Structured candidate profile derived from a single adapter's text."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    current_title: str = ""
    current_employer: str = ""
    skills: list[Skill] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    notes: str = ""
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("skills")
    @classmethod
    def _canonical_skill_order(cls, value: list[Skill]) -> list[Skill]:
        present = set(value)
        return [skill for skill in Skill if skill in present]

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def tags(self) -> list[str]:
        return [skill.value for skill in self.skills]

    def has_skill(self, skill: Skill) -> bool:
        return skill in self.skills
