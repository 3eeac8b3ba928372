from __future__ import annotations

import logging
from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from campaign_builder.config import settings
from campaign_builder.enums import CampaignStatusEnum, TemplateMatchingModeEnum, TrustSignalKindEnum
from campaign_builder.vocabulary import DEFAULT_SEND_DAYS

logger = logging.getLogger(__name__)

MIN_SEQUENCE_STEPS = 1
MAX_SEQUENCE_STEPS = 10
MIN_GAP_DAYS = 1
MAX_GAP_DAYS = 30

DRAFT_APPROVAL_NOTICE = (
    "Campaigns are created as drafts. No email, LinkedIn or SMS message is sent "
    "until the campaign has been reviewed and approved."
)


class AgentRef(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    name: str = ""


class Template(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    name: str
    subject: str = ""
    tone: str | None = None
    structure: str | None = None
    cta_type: str | None = None
    target_seniority: list[str] = Field(default_factory=list)
    company_types: list[str] = Field(default_factory=list)
    open_rate: float | None = None
    reply_rate: float | None = None


class ValueProposition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    name: str
    description: str
    target_segments: list[str] | None = None


class TrustSignal(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1)
    kind: TrustSignalKindEnum = Field(
        validation_alias=AliasChoices("type", "kind"),
        serialization_alias="type",
    )
    content: str


class ClientProfile(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    company_name: str = ""
    value_propositions: list[ValueProposition] = Field(default_factory=list)
    trust_signals: list[TrustSignal] = Field(default_factory=list)

    @field_validator("value_propositions", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("trust_signals", mode="before")
    @classmethod
    def _drop_unknown_trust_signal_kinds(cls, value):
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        known = {kind.value for kind in TrustSignalKindEnum}
        kept = []
        for item in value:
            if isinstance(item, dict):
                kind = item.get("type", item.get("kind"))
                if isinstance(kind, str) and kind not in known:
                    logger.warning("Skipping trust signal %r with unsupported type %r", item.get("id"), kind)
                    continue
            kept.append(item)
        return kept


class TargetingFilters(BaseModel):
    industries: list[str] = Field(default_factory=list)
    company_sizes: list[str] = Field(default_factory=list)
    seniorities: list[str] = Field(default_factory=list)
    regions: list[str] = Field(default_factory=list)


class TemplateFilters(BaseModel):
    tone: str | None = None
    structure: str | None = None
    cta_type: str | None = None

    def query_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        for key in ("tone", "structure", "cta_type"):
            value = getattr(self, key)
            if value:
                params[key] = value
        return params


class TemplateSelection(BaseModel):
    mode: TemplateMatchingModeEnum = TemplateMatchingModeEnum.intelligent
    template_ids: list[str] = Field(default_factory=list)


class SequenceSettings(BaseModel):
    step_count: int = 3
    gap_days: list[int] = Field(default_factory=lambda: [settings.SEQUENCE_DEFAULT_GAP_DAYS] * 2)
    scheduled_start_at: datetime | None = None
    send_window_start: str = "09:00"
    send_window_end: str = "17:00"
    send_timezone: str = Field(default_factory=lambda: settings.DEFAULT_SEND_TIMEZONE)
    send_days: list[str] = Field(default_factory=lambda: list(DEFAULT_SEND_DAYS))


class CampaignDefinition(BaseModel):
    """In-memory campaign document mutated stage by stage.

    Intentionally lenient: a half-filled draft must be representable. The
    strict contract lives on ``CampaignCreateRequest``.
    """

    name: str = ""
    description: str = ""
    agent: AgentRef | None = None
    targeting: TargetingFilters = Field(default_factory=TargetingFilters)
    value_propositions: list[ValueProposition] = Field(default_factory=list)
    trust_signals: list[TrustSignal] = Field(default_factory=list)
    template_selection: TemplateSelection = Field(default_factory=TemplateSelection)
    sequence: SequenceSettings = Field(default_factory=SequenceSettings)


class TimelineStep(BaseModel):
    step_number: int = Field(ge=1)
    offset_days: int = Field(ge=0)
    send_at: datetime | None = None


class CampaignCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    agent_id: str | None = None
    target_industries: list[str] = Field(default_factory=list)
    target_company_sizes: list[str] = Field(default_factory=list)
    target_seniorities: list[str] = Field(default_factory=list)
    target_regions: list[str] = Field(default_factory=list)
    value_propositions: list[ValueProposition] = Field(default_factory=list)
    trust_signals: list[TrustSignal] = Field(default_factory=list)
    matching_mode: TemplateMatchingModeEnum
    selected_template_ids: list[str] = Field(default_factory=list)
    sequence_steps: int = Field(ge=MIN_SEQUENCE_STEPS, le=MAX_SEQUENCE_STEPS)
    days_between_steps: list[int] = Field(default_factory=list)
    scheduled_start_at: datetime | None = None
    send_window_start: str
    send_window_end: str
    send_timezone: str
    send_days: list[str] = Field(min_length=1)
    status: Literal[CampaignStatusEnum.draft] = CampaignStatusEnum.draft

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("name must not be blank")
        return cleaned

    @field_validator("days_between_steps")
    @classmethod
    def _validate_gaps(cls, value: list[int]) -> list[int]:
        for gap in value:
            if gap < MIN_GAP_DAYS or gap > MAX_GAP_DAYS:
                raise ValueError(
                    f"days_between_steps entries must be between {MIN_GAP_DAYS} and {MAX_GAP_DAYS}"
                )
        return value

    @model_validator(mode="after")
    def _validate_sequence_shape(self) -> "CampaignCreateRequest":
        if len(self.days_between_steps) != self.sequence_steps - 1:
            raise ValueError("days_between_steps must contain exactly sequence_steps - 1 entries")
        if self.matching_mode == TemplateMatchingModeEnum.random and not self.selected_template_ids:
            raise ValueError("random matching requires at least one selected template")
        return self

    @classmethod
    def from_definition(cls, definition: CampaignDefinition) -> "CampaignCreateRequest":
        sequence = definition.sequence
        return cls(
            name=definition.name,
            description=definition.description.strip() or None,
            agent_id=definition.agent.id if definition.agent else None,
            target_industries=list(definition.targeting.industries),
            target_company_sizes=list(definition.targeting.company_sizes),
            target_seniorities=list(definition.targeting.seniorities),
            target_regions=list(definition.targeting.regions),
            value_propositions=[item.model_copy(deep=True) for item in definition.value_propositions],
            trust_signals=[item.model_copy(deep=True) for item in definition.trust_signals],
            matching_mode=definition.template_selection.mode,
            selected_template_ids=list(definition.template_selection.template_ids),
            sequence_steps=sequence.step_count,
            days_between_steps=list(sequence.gap_days),
            scheduled_start_at=sequence.scheduled_start_at,
            send_window_start=sequence.send_window_start,
            send_window_end=sequence.send_window_end,
            send_timezone=sequence.send_timezone,
            send_days=list(sequence.send_days),
        )

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class CreatedCampaign(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)


class CampaignCreateResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    data: CreatedCampaign
