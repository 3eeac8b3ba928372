from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from campaign_builder.enums import TemplateMatchingModeEnum
from campaign_builder.schemas import Template, TemplateFilters, TemplateSelection
from campaign_builder.vocabulary import assert_token


class TemplatePoolError(ValueError):
    pass


@dataclass(frozen=True)
class CandidatePool:
    """What the send-time engine may pick from.

    An empty ``template_ids`` means the whole eligible catalog. The policy
    itself (profile-aware vs. unbiased distribution) runs downstream.
    """

    mode: TemplateMatchingModeEnum
    template_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def all_eligible(self) -> bool:
        return not self.template_ids


def build_template_filters(
    *,
    tone: str | None = None,
    structure: str | None = None,
    cta_type: str | None = None,
) -> TemplateFilters:
    return TemplateFilters(
        tone=assert_token("tone", tone) if tone else None,
        structure=assert_token("structure", structure) if structure else None,
        cta_type=assert_token("cta_type", cta_type) if cta_type else None,
    )


class TemplateSelectionEditor:
    def __init__(self, selection: TemplateSelection, *, on_change: Callable[[], None] | None = None) -> None:
        self._selection = selection
        self._on_change = on_change

    @property
    def selection(self) -> TemplateSelection:
        return self._selection

    def set_mode(self, mode: TemplateMatchingModeEnum | str) -> None:
        self._selection.mode = TemplateMatchingModeEnum(mode)
        self._changed()

    def toggle(self, template_id: str) -> bool:
        ids = self._selection.template_ids
        if template_id in ids:
            ids.remove(template_id)
            selected = False
        else:
            ids.append(template_id)
            selected = True
        self._changed()
        return selected

    def select_all(self, catalog: list[Template]) -> None:
        self._selection.template_ids = [template.id for template in catalog]
        self._changed()

    def clear_all(self) -> None:
        self._selection.template_ids = []
        self._changed()

    def candidate_pool(self) -> CandidatePool:
        return candidate_pool(self._selection)

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()


def candidate_pool(selection: TemplateSelection) -> CandidatePool:
    if selection.mode == TemplateMatchingModeEnum.random and not selection.template_ids:
        raise TemplatePoolError("Random matching needs at least one selected template")
    return CandidatePool(mode=selection.mode, template_ids=tuple(selection.template_ids))


def selection_summary(selection: TemplateSelection, catalog: list[Template]) -> str:
    shown = {template.id for template in catalog}
    visible = sum(1 for template_id in selection.template_ids if template_id in shown)
    summary = f"{visible} of {len(catalog)} templates selected"
    hidden = len(selection.template_ids) - visible
    if hidden:
        summary += f" ({hidden} hidden by the current filters)"
    return summary
