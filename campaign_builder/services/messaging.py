from __future__ import annotations

import logging
import uuid
from collections.abc import Callable

from campaign_builder.schemas import CampaignDefinition, ClientProfile, TrustSignal, ValueProposition
from campaign_builder.vocabulary import assert_token

logger = logging.getLogger(__name__)


def new_asset_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4()}"


def _required_text(field: str, value: str | None) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError(f"{field} is required")
    return cleaned


class MessagingEditor:
    """Value propositions and trust signals attached to a campaign.

    Imports overwrite the whole list with a deep copy of the profile's items
    (ids included); custom items get fresh UUID-based ids.
    """

    def __init__(self, definition: CampaignDefinition, *, on_change: Callable[[], None] | None = None) -> None:
        self._definition = definition
        self._on_change = on_change

    @property
    def value_propositions(self) -> list[ValueProposition]:
        return self._definition.value_propositions

    @property
    def trust_signals(self) -> list[TrustSignal]:
        return self._definition.trust_signals

    def import_value_propositions(self, profile: ClientProfile) -> None:
        self._definition.value_propositions = [item.model_copy(deep=True) for item in profile.value_propositions]
        logger.info(
            "Imported %d value propositions from client profile %s",
            len(profile.value_propositions),
            profile.id,
        )
        self._changed()

    def import_trust_signals(self, profile: ClientProfile) -> None:
        self._definition.trust_signals = [item.model_copy(deep=True) for item in profile.trust_signals]
        logger.info("Imported %d trust signals from client profile %s", len(profile.trust_signals), profile.id)
        self._changed()

    def add_value_proposition(
        self,
        *,
        name: str,
        description: str,
        target_segments: list[str] | None = None,
    ) -> ValueProposition:
        item = ValueProposition(
            id=new_asset_id("vp"),
            name=_required_text("Value proposition name", name),
            description=_required_text("Value proposition description", description),
            target_segments=list(target_segments or []),
        )
        self._definition.value_propositions.append(item)
        self._changed()
        return item

    def add_trust_signal(self, *, kind: str, content: str) -> TrustSignal:
        item = TrustSignal(
            id=new_asset_id("ts"),
            kind=assert_token("trust_signal_kind", kind),
            content=_required_text("Trust signal content", content),
        )
        self._definition.trust_signals.append(item)
        self._changed()
        return item

    def remove_value_proposition(self, item_id: str) -> bool:
        before = len(self._definition.value_propositions)
        self._definition.value_propositions = [
            item for item in self._definition.value_propositions if item.id != item_id
        ]
        removed = len(self._definition.value_propositions) != before
        if removed:
            self._changed()
        return removed

    def remove_trust_signal(self, item_id: str) -> bool:
        before = len(self._definition.trust_signals)
        self._definition.trust_signals = [item for item in self._definition.trust_signals if item.id != item_id]
        removed = len(self._definition.trust_signals) != before
        if removed:
            self._changed()
        return removed

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()


def select_client_profile(profiles: list[ClientProfile], profile_id: str | None = None) -> ClientProfile | None:
    if not profiles:
        return None
    if profile_id is None:
        return profiles[0]
    for profile in profiles:
        if profile.id == profile_id:
            return profile
    return None
