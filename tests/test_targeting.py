from __future__ import annotations

import pytest

from campaign_builder.schemas import TargetingFilters
from campaign_builder.services.targeting import TargetingEditor
from campaign_builder.vocabulary import VocabularyError


def test_toggle_adds_then_removes_token():
    editor = TargetingEditor(TargetingFilters())

    assert editor.toggle("industries", "Technology") is True
    assert editor.toggle("industries", "Healthcare") is True
    assert editor.targeting.industries == ["Technology", "Healthcare"]

    assert editor.toggle("industries", "Technology") is False
    assert editor.targeting.industries == ["Healthcare"]


def test_toggle_canonicalizes_tokens():
    editor = TargetingEditor(TargetingFilters())

    editor.toggle("seniorities", " c-level ")
    editor.toggle("company_sizes", "5000+ EMPLOYEES")

    assert editor.targeting.seniorities == ["C-Level"]
    assert editor.targeting.company_sizes == ["5000+ employees"]


def test_facets_are_independent_and_clear_only_touches_one():
    editor = TargetingEditor(TargetingFilters())
    editor.toggle("regions", "Europe")
    editor.toggle("industries", "Retail")

    editor.clear("regions")

    assert editor.targeting.regions == []
    assert editor.targeting.industries == ["Retail"]
    assert not editor.is_unfiltered()

    editor.clear_all()
    assert editor.is_unfiltered()


def test_unknown_token_and_facet_are_rejected():
    editor = TargetingEditor(TargetingFilters())

    with pytest.raises(VocabularyError, match="Invalid region 'Antarctica'"):
        editor.toggle("regions", "Antarctica")
    with pytest.raises(KeyError):
        editor.toggle("job_titles", "CTO")


def test_mutations_notify_listener():
    calls: list[str] = []
    editor = TargetingEditor(TargetingFilters(), on_change=lambda: calls.append("changed"))

    editor.toggle("industries", "Energy")
    editor.clear("industries")

    assert calls == ["changed", "changed"]
