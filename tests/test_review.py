from __future__ import annotations

from datetime import datetime, timezone

from campaign_builder.schemas import DRAFT_APPROVAL_NOTICE, CampaignDefinition, SequenceSettings, TargetingFilters
from campaign_builder.services.review import build_review_summary


def test_review_summary_for_unfiltered_intelligent_campaign():
    definition = CampaignDefinition(
        name=" Fintech Q3 ",
        sequence=SequenceSettings(step_count=4, gap_days=[2, 4, 6]),
    )

    summary = build_review_summary(definition)

    assert summary.name == "Fintech Q3"
    assert summary.agent_name is None
    assert summary.targeting == {
        "industries": ["All"],
        "company_sizes": ["All"],
        "seniorities": ["All"],
        "regions": ["All"],
    }
    assert summary.template_scope == "All eligible"
    assert [step.offset_days for step in summary.timeline] == [0, 2, 6, 12]
    assert summary.total_duration_days == 12
    assert summary.send_window == "09:00-17:00 America/New_York (mon, tue, wed, thu, fri)"
    assert summary.notice == DRAFT_APPROVAL_NOTICE


def test_review_summary_lists_selected_facets_and_anchors_timeline():
    approved_at = datetime(2026, 4, 6, 15, 0, tzinfo=timezone.utc)
    definition = CampaignDefinition(
        name="EU Healthcare",
        targeting=TargetingFilters(industries=["Healthcare"], regions=["Europe"]),
        sequence=SequenceSettings(step_count=2, gap_days=[7]),
    )
    definition.template_selection.template_ids = ["tpl_1", "tpl_2"]

    summary = build_review_summary(definition, approved_at=approved_at)

    assert summary.targeting["industries"] == ["Healthcare"]
    assert summary.targeting["seniorities"] == ["All"]
    assert summary.template_scope == "2 selected"
    assert summary.timeline[1].send_at == datetime(2026, 4, 13, 15, 0, tzinfo=timezone.utc)
