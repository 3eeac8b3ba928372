from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from campaign_builder.enums import TemplateMatchingModeEnum
from campaign_builder.schemas import DRAFT_APPROVAL_NOTICE, CampaignDefinition, TimelineStep
from campaign_builder.services.sequence import build_timeline, total_duration_days
from campaign_builder.services.targeting import TARGETING_FACETS

ALL_LABEL = "All"


class ReviewSummary(BaseModel):
    name: str
    description: str | None = None
    agent_name: str | None = None
    targeting: dict[str, list[str]] = Field(default_factory=dict)
    value_proposition_count: int = 0
    trust_signal_count: int = 0
    matching_mode: TemplateMatchingModeEnum
    template_scope: str
    step_count: int
    timeline: list[TimelineStep] = Field(default_factory=list)
    total_duration_days: int = 0
    send_window: str
    notice: str = DRAFT_APPROVAL_NOTICE


def build_review_summary(definition: CampaignDefinition, *, approved_at: datetime | None = None) -> ReviewSummary:
    sequence = definition.sequence
    template_ids = definition.template_selection.template_ids
    targeting = {
        facet: list(getattr(definition.targeting, facet)) or [ALL_LABEL] for facet in TARGETING_FACETS
    }
    return ReviewSummary(
        name=definition.name.strip(),
        description=definition.description.strip() or None,
        agent_name=definition.agent.name if definition.agent else None,
        targeting=targeting,
        value_proposition_count=len(definition.value_propositions),
        trust_signal_count=len(definition.trust_signals),
        matching_mode=definition.template_selection.mode,
        template_scope=f"{len(template_ids)} selected" if template_ids else "All eligible",
        step_count=sequence.step_count,
        timeline=build_timeline(sequence, approved_at=approved_at),
        total_duration_days=total_duration_days(sequence),
        send_window=(
            f"{sequence.send_window_start}-{sequence.send_window_end} {sequence.send_timezone} "
            f"({', '.join(sequence.send_days)})"
        ),
    )
