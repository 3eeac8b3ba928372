from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from campaign_builder.enums import TrustSignalKindEnum
from campaign_builder.schemas import (
    AgentRef,
    CampaignCreateRequest,
    CampaignDefinition,
    SequenceSettings,
    TargetingFilters,
    TemplateSelection,
    TrustSignal,
    ValueProposition,
)


def _definition(**overrides) -> CampaignDefinition:
    values = {
        "name": "  Fintech Q3  ",
        "description": "",
        "agent": AgentRef(id="agent_1", name="SDR Bot"),
        "targeting": TargetingFilters(industries=["Financial Services"], regions=["Europe"]),
        "value_propositions": [ValueProposition(id="vp_1", name="Cost", description="Cut spend")],
        "trust_signals": [TrustSignal(id="ts_1", kind=TrustSignalKindEnum.logo, content="Globex")],
        "template_selection": TemplateSelection(mode="random", template_ids=["tpl_1", "tpl_2"]),
        "sequence": SequenceSettings(
            step_count=3,
            gap_days=[2, 5],
            scheduled_start_at=datetime(2026, 9, 1, 13, 0, tzinfo=timezone.utc),
        ),
    }
    values.update(overrides)
    return CampaignDefinition(**values)


def test_definition_serializes_to_wire_payload():
    payload = CampaignCreateRequest.from_definition(_definition()).to_payload()

    assert payload["name"] == "Fintech Q3"
    assert payload["description"] is None
    assert payload["agent_id"] == "agent_1"
    assert payload["target_industries"] == ["Financial Services"]
    assert payload["target_company_sizes"] == []
    assert payload["target_regions"] == ["Europe"]
    assert payload["value_propositions"] == [
        {"id": "vp_1", "name": "Cost", "description": "Cut spend", "target_segments": None}
    ]
    assert payload["trust_signals"] == [{"id": "ts_1", "type": "logo", "content": "Globex"}]
    assert payload["matching_mode"] == "random"
    assert payload["selected_template_ids"] == ["tpl_1", "tpl_2"]
    assert payload["sequence_steps"] == 3
    assert payload["days_between_steps"] == [2, 5]
    assert payload["scheduled_start_at"] == "2026-09-01T13:00:00Z"
    assert payload["send_days"] == ["mon", "tue", "wed", "thu", "fri"]
    assert payload["status"] == "draft"


def test_payload_is_a_copy_of_the_definition():
    definition = _definition()
    request = CampaignCreateRequest.from_definition(definition)

    definition.value_propositions[0].name = "Changed"
    definition.sequence.gap_days.append(9)

    assert request.value_propositions[0].name == "Cost"
    assert request.days_between_steps == [2, 5]


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"name": "   "}, "name must not be blank"),
        ({"template_selection": TemplateSelection(mode="random")}, "random matching requires"),
        ({"sequence": SequenceSettings(step_count=3, gap_days=[2])}, "exactly sequence_steps - 1"),
        ({"sequence": SequenceSettings(step_count=2, gap_days=[31])}, "between 1 and 30"),
        ({"sequence": SequenceSettings(step_count=11, gap_days=[3] * 10)}, "less than or equal to 10"),
    ],
)
def test_payload_rejects_contract_violations(overrides, message):
    with pytest.raises(ValidationError, match=message):
        CampaignCreateRequest.from_definition(_definition(**overrides))


def test_trust_signal_reads_type_or_kind():
    from_wire = TrustSignal.model_validate({"id": "ts_1", "type": "case_study", "content": "Story"})
    from_python = TrustSignal(id="ts_2", kind="metric", content="40%")

    assert from_wire.kind == TrustSignalKindEnum.case_study
    assert from_python.model_dump(by_alias=True)["type"] == TrustSignalKindEnum.metric
    with pytest.raises(ValidationError):
        TrustSignal.model_validate({"id": "ts_3", "type": "award", "content": "x"})


def test_empty_definition_defaults():
    definition = CampaignDefinition()

    assert definition.targeting.industries == []
    assert definition.template_selection.mode.value == "intelligent"
    assert definition.sequence.step_count == 3
    assert definition.sequence.gap_days == [3, 3]
    assert definition.sequence.send_timezone == "America/New_York"
