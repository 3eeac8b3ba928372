from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from campaign_builder.campaign_api import CampaignApiClient, CampaignApiError
from campaign_builder.schemas import AgentRef, ClientProfile, Template, TemplateFilters

logger = logging.getLogger(__name__)

T = TypeVar("T")

AGENTS = "agents"
TEMPLATES = "templates"
CLIENT_PROFILES = "client_profiles"

_NOTICES = {
    AGENTS: "Agents could not be loaded. You can continue without assigning one.",
    TEMPLATES: "Templates could not be loaded. Adjust the filters or try again.",
    CLIENT_PROFILES: "Your client profile could not be loaded. You can still add custom items.",
}


@dataclass
class LoadResult(Generic[T]):
    items: list[T] = field(default_factory=list)
    notice: str | None = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.notice is None and not self.stale


class ResourceLoader:
    """Loads the read-only resources the wizard displays.

    Each resource has a generation counter: a fetch only applies its result
    if no newer fetch (or explicit cancel) for the same resource was issued
    while it was in flight. Failed fetches degrade to an empty list plus an
    inline notice.
    """

    def __init__(self, client: CampaignApiClient) -> None:
        self._client = client
        self._generations: dict[str, int] = {AGENTS: 0, TEMPLATES: 0, CLIENT_PROFILES: 0}
        self._in_flight: set[str] = set()
        self.agents: list[AgentRef] = []
        self.templates: list[Template] = []
        self.client_profiles: list[ClientProfile] = []
        self.template_filters = TemplateFilters()
        self.notices: dict[str, str] = {}

    def is_loading(self, resource: str) -> bool:
        return resource in self._in_flight

    async def load_agents(self) -> LoadResult[AgentRef]:
        return await self._load(AGENTS, self._client.list_agents)

    async def load_templates(self, filters: TemplateFilters | None = None) -> LoadResult[Template]:
        if filters is not None:
            self.template_filters = filters.model_copy()
        requested = self.template_filters.model_copy()
        # The shown catalog belongs to the previous filters; nothing is selectable until this fetch lands.
        self.templates = []
        return await self._load(TEMPLATES, lambda: self._client.list_templates(filters=requested))

    async def load_client_profiles(self) -> LoadResult[ClientProfile]:
        return await self._load(CLIENT_PROFILES, self._client.list_client_profiles)

    def cancel(self, resource: str) -> None:
        """Discard whatever fetch is in flight for ``resource``."""
        self._generations[resource] += 1
        self._in_flight.discard(resource)
        if resource == TEMPLATES:
            self.templates = []
        logger.info("Cancelled in-flight %s fetch", resource)

    def dismiss_notice(self, resource: str) -> None:
        self.notices.pop(resource, None)

    async def _load(self, resource: str, fetch: Callable[[], Awaitable[list[Any]]]) -> LoadResult[Any]:
        self._generations[resource] += 1
        generation = self._generations[resource]
        self._in_flight.add(resource)
        try:
            items = await fetch()
        except CampaignApiError as exc:
            if generation != self._generations[resource]:
                logger.info("Ignoring failed %s fetch superseded by a newer request", resource)
                return LoadResult(stale=True)
            logger.warning("Failed to load %s: %s", resource, exc)
            self._in_flight.discard(resource)
            setattr(self, resource, [])
            self.notices[resource] = _NOTICES[resource]
            return LoadResult(items=[], notice=_NOTICES[resource])

        if generation != self._generations[resource]:
            logger.info("Discarding stale %s fetch (generation %d)", resource, generation)
            return LoadResult(items=items, stale=True)
        self._in_flight.discard(resource)
        setattr(self, resource, items)
        self.notices.pop(resource, None)
        logger.info("Loaded %d %s", len(items), resource)
        return LoadResult(items=items)
