from __future__ import annotations

import asyncio

from campaign_builder.campaign_api import CampaignApiError
from campaign_builder.schemas import AgentRef, ClientProfile, Template, TemplateFilters, TemplateSelection
from campaign_builder.services.resources import AGENTS, TEMPLATES, ResourceLoader
from campaign_builder.services.template_matcher import TemplateSelectionEditor


class FakeCampaignApi:
    def __init__(self) -> None:
        self.gates: dict[str | None, asyncio.Event] = {}
        self.failures: dict[str | None, CampaignApiError] = {}
        self.template_calls: list[TemplateFilters] = []
        self.agents_error: CampaignApiError | None = None

    async def list_templates(self, *, filters: TemplateFilters | None = None) -> list[Template]:
        filters = filters or TemplateFilters()
        self.template_calls.append(filters)
        gate = self.gates.get(filters.tone)
        if gate is not None:
            await gate.wait()
        if filters.tone in self.failures:
            raise self.failures[filters.tone]
        return [Template(id=f"tpl_{filters.tone}", name=f"{filters.tone} template", tone=filters.tone)]

    async def list_agents(self) -> list[AgentRef]:
        if self.agents_error is not None:
            raise self.agents_error
        return [AgentRef(id="agent_1", name="SDR Bot")]

    async def list_client_profiles(self) -> list[ClientProfile]:
        return [ClientProfile(id="profile_1")]


def test_superseded_template_fetch_does_not_overwrite_newer_results():
    api = FakeCampaignApi()
    loader = ResourceLoader(api)

    async def scenario():
        slow = asyncio.Event()
        api.gates["formal"] = slow
        first = asyncio.create_task(loader.load_templates(TemplateFilters(tone="formal")))
        await asyncio.sleep(0)
        second = await loader.load_templates(TemplateFilters(tone="humble"))
        slow.set()
        return await first, second

    first, second = asyncio.run(scenario())

    assert first.stale
    assert not first.ok
    assert second.ok
    assert [template.id for template in loader.templates] == ["tpl_humble"]
    assert loader.template_filters.tone == "humble"
    assert not loader.is_loading(TEMPLATES)


def test_superseded_failure_does_not_raise_a_notice():
    api = FakeCampaignApi()
    api.failures["formal"] = CampaignApiError(message="boom")
    loader = ResourceLoader(api)

    async def scenario():
        slow = asyncio.Event()
        api.gates["formal"] = slow
        first = asyncio.create_task(loader.load_templates(TemplateFilters(tone="formal")))
        await asyncio.sleep(0)
        await loader.load_templates(TemplateFilters(tone="energetic"))
        slow.set()
        return await first

    first = asyncio.run(scenario())

    assert first.stale
    assert TEMPLATES not in loader.notices
    assert [template.id for template in loader.templates] == ["tpl_energetic"]


def test_cancel_discards_in_flight_fetch():
    api = FakeCampaignApi()
    loader = ResourceLoader(api)

    async def scenario():
        slow = asyncio.Event()
        api.gates["formal"] = slow
        task = asyncio.create_task(loader.load_templates(TemplateFilters(tone="formal")))
        await asyncio.sleep(0)
        assert loader.is_loading(TEMPLATES)
        loader.cancel(TEMPLATES)
        slow.set()
        return await task

    result = asyncio.run(scenario())

    assert result.stale
    assert loader.templates == []
    assert not loader.is_loading(TEMPLATES)


def test_filter_change_hides_previous_catalog_until_new_results_arrive():
    api = FakeCampaignApi()
    loader = ResourceLoader(api)
    editor = TemplateSelectionEditor(TemplateSelection())

    async def scenario():
        await loader.load_templates(TemplateFilters(tone="humble"))
        assert [template.id for template in loader.templates] == ["tpl_humble"]

        slow = asyncio.Event()
        api.gates["formal"] = slow
        task = asyncio.create_task(loader.load_templates(TemplateFilters(tone="formal")))
        await asyncio.sleep(0)
        assert loader.templates == []
        editor.select_all(loader.templates)

        loader.cancel(TEMPLATES)
        slow.set()
        return await task

    result = asyncio.run(scenario())

    assert result.stale
    assert loader.templates == []
    assert editor.selection.template_ids == []


def test_failed_fetch_degrades_to_empty_list_with_notice():
    api = FakeCampaignApi()
    api.agents_error = CampaignApiError(message="Network error while calling /api/agents")
    loader = ResourceLoader(api)
    loader.agents = [AgentRef(id="stale", name="Old")]

    result = asyncio.run(loader.load_agents())

    assert result.items == []
    assert result.notice
    assert loader.agents == []
    assert loader.notices[AGENTS] == result.notice

    api.agents_error = None
    retry = asyncio.run(loader.load_agents())
    assert retry.ok
    assert AGENTS not in loader.notices
    assert [agent.id for agent in loader.agents] == ["agent_1"]


def test_refetch_reuses_last_filters_when_none_given():
    api = FakeCampaignApi()
    loader = ResourceLoader(api)

    asyncio.run(loader.load_templates(TemplateFilters(tone="formal", structure="social_proof")))
    asyncio.run(loader.load_templates())

    assert api.template_calls[-1] == TemplateFilters(tone="formal", structure="social_proof")


def test_dismiss_notice():
    api = FakeCampaignApi()
    api.agents_error = CampaignApiError(message="down")
    loader = ResourceLoader(api)
    asyncio.run(loader.load_agents())

    loader.dismiss_notice(AGENTS)

    assert loader.notices == {}
