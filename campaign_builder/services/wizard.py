from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from campaign_builder.enums import WizardStageEnum
from campaign_builder.schemas import AgentRef, CampaignCreateRequest, CampaignDefinition
from campaign_builder.services.messaging import MessagingEditor, _required_text
from campaign_builder.services.sequence import SequenceEditor
from campaign_builder.services.stage_gates import stage_is_complete
from campaign_builder.services.targeting import TARGETING_FACETS, TargetingEditor
from campaign_builder.services.template_matcher import TemplateSelectionEditor
from campaign_builder.vocabulary import assert_many

logger = logging.getLogger(__name__)

STAGE_ORDER: tuple[WizardStageEnum, ...] = (
    WizardStageEnum.basics,
    WizardStageEnum.targeting,
    WizardStageEnum.messaging,
    WizardStageEnum.templates,
    WizardStageEnum.sequence,
    WizardStageEnum.review,
)

GateListener = Callable[[WizardStageEnum, bool], None]


class WizardStateError(RuntimeError):
    pass


class BasicsEditor:
    def __init__(self, definition: CampaignDefinition, *, on_change: Callable[[], None] | None = None) -> None:
        self._definition = definition
        self._on_change = on_change

    def set_name(self, name: str) -> None:
        self._definition.name = name
        self._changed()

    def set_description(self, description: str) -> None:
        self._definition.description = description
        self._changed()

    def set_agent(self, agent: AgentRef | None) -> None:
        self._definition.agent = agent.model_copy() if agent else None
        self._changed()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()


class CampaignWizard:
    """Linear six-stage state machine around one ``CampaignDefinition``.

    ``next`` is gated on the current stage being complete, ``back`` is not.
    There is no jump-to-stage. Listeners receive the live gate result after
    every field mutation and every transition.
    """

    def __init__(self, definition: CampaignDefinition | None = None) -> None:
        self._listeners: list[GateListener] = []
        self._bind(definition if definition is not None else CampaignDefinition())

    @property
    def definition(self) -> CampaignDefinition:
        return self._definition

    @property
    def stage_index(self) -> int:
        return self._index

    @property
    def current_stage(self) -> WizardStageEnum:
        return STAGE_ORDER[self._index]

    @property
    def can_advance(self) -> bool:
        if self._index >= len(STAGE_ORDER) - 1:
            return False
        return stage_is_complete(self.current_stage, self._definition)

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_submit(self) -> bool:
        if self.current_stage != WizardStageEnum.review:
            return False
        return all(stage_is_complete(stage, self._definition) for stage in STAGE_ORDER)

    def next(self) -> bool:
        if not self.can_advance:
            return False
        self._index += 1
        logger.debug("Wizard advanced to %s", self.current_stage.value)
        self._notify()
        return True

    def back(self) -> bool:
        if not self.can_go_back:
            return False
        self._index -= 1
        logger.debug("Wizard moved back to %s", self.current_stage.value)
        self._notify()
        return True

    def subscribe(self, listener: GateListener) -> Callable[[], None]:
        self._listeners.append(listener)
        listener(self.current_stage, self.can_advance)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def build_request(self) -> CampaignCreateRequest:
        if self.current_stage != WizardStageEnum.review:
            raise WizardStateError(f"Campaign can only be submitted from review, not {self.current_stage.value}")
        return CampaignCreateRequest.from_definition(self._definition)

    def discard(self) -> None:
        """Drop the in-memory campaign and restart at the first stage."""
        self._bind(CampaignDefinition())
        self._notify()

    def _bind(self, definition: CampaignDefinition) -> None:
        self._definition = definition
        self._index = 0
        self.basics = BasicsEditor(definition, on_change=self._notify)
        self.targeting = TargetingEditor(definition.targeting, on_change=self._notify)
        self.messaging = MessagingEditor(definition, on_change=self._notify)
        self.templates = TemplateSelectionEditor(definition.template_selection, on_change=self._notify)
        self.sequence = SequenceEditor(definition.sequence, on_change=self._notify)

    def _notify(self) -> None:
        stage = self.current_stage
        allowed = self.can_advance
        for listener in list(self._listeners):
            listener(stage, allowed)


def definition_from_document(document: dict[str, Any]) -> CampaignDefinition:
    """Parse a stored campaign document with the same checks the editors apply.

    Facet tokens are canonicalised against the vocabulary, messaging text must
    be non-blank, and the sequence goes through ``SequenceEditor`` so counts
    are clamped and a naive scheduled start takes the campaign timezone.
    """
    definition = CampaignDefinition.model_validate(document)

    targeting = definition.targeting
    for facet, kind in TARGETING_FACETS.items():
        setattr(targeting, facet, assert_many(kind, getattr(targeting, facet)))

    for proposition in definition.value_propositions:
        proposition.name = _required_text("Value proposition name", proposition.name)
        proposition.description = _required_text("Value proposition description", proposition.description)
    for signal in definition.trust_signals:
        signal.content = _required_text("Trust signal content", signal.content)

    sequence = definition.sequence
    editor = SequenceEditor(sequence)
    editor.set_send_timezone(sequence.send_timezone)
    editor.set_send_window(start=sequence.send_window_start, end=sequence.send_window_end)
    sequence.send_days = assert_many("send_day", sequence.send_days)
    editor.set_step_count(sequence.step_count)
    for index, days in enumerate(list(sequence.gap_days)):
        editor.set_gap_days(index, days)
    editor.set_scheduled_start(sequence.scheduled_start_at)
    return definition
