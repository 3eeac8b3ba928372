from __future__ import annotations

from collections.abc import Callable

from campaign_builder.enums import TemplateMatchingModeEnum, WizardStageEnum
from campaign_builder.schemas import CampaignDefinition
from campaign_builder.services.sequence import sequence_problems

StageGate = Callable[[CampaignDefinition], bool]


def basics_complete(definition: CampaignDefinition) -> bool:
    return bool(definition.name.strip())


def always_complete(definition: CampaignDefinition) -> bool:
    return True


def templates_complete(definition: CampaignDefinition) -> bool:
    selection = definition.template_selection
    return selection.mode == TemplateMatchingModeEnum.intelligent or bool(selection.template_ids)


def sequence_complete(definition: CampaignDefinition) -> bool:
    return not sequence_problems(definition.sequence)


STAGE_GATES: dict[WizardStageEnum, StageGate] = {
    WizardStageEnum.basics: basics_complete,
    WizardStageEnum.targeting: always_complete,
    WizardStageEnum.messaging: always_complete,
    WizardStageEnum.templates: templates_complete,
    WizardStageEnum.sequence: sequence_complete,
    WizardStageEnum.review: always_complete,
}


def stage_is_complete(stage: WizardStageEnum, definition: CampaignDefinition) -> bool:
    return STAGE_GATES[stage](definition)
