from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Iterable

from campaign_builder.enums import (
    SendDayEnum,
    TemplateCtaTypeEnum,
    TemplateStructureEnum,
    TemplateToneEnum,
    TrustSignalKindEnum,
)


@dataclass
class VocabularyError(ValueError):
    kind: str
    value: str
    allowed: list[str]

    def __str__(self) -> str:
        return f"Invalid {self.kind} '{self.value}'. Allowed: {', '.join(self.allowed)}"


# Display order is significant; the UI lists options in this order.
INDUSTRIES: tuple[str, ...] = (
    "Technology",
    "Healthcare",
    "Financial Services",
    "Manufacturing",
    "Retail",
    "Professional Services",
    "Real Estate",
    "Education",
    "Media & Entertainment",
    "Energy",
)
COMPANY_SIZES: tuple[str, ...] = (
    "1-10",
    "11-50",
    "51-200",
    "201-500",
    "501-1000",
    "1001-5000",
    "5000+ employees",
)
SENIORITIES: tuple[str, ...] = ("C-Level", "VP", "Director", "Manager", "Individual Contributor")
REGIONS: tuple[str, ...] = (
    "North America",
    "Europe",
    "Asia Pacific",
    "Latin America",
    "Middle East & Africa",
)
TRUST_SIGNAL_KINDS: tuple[str, ...] = tuple(kind.value for kind in TrustSignalKindEnum)
TEMPLATE_TONES: tuple[str, ...] = tuple(tone.value for tone in TemplateToneEnum)
TEMPLATE_STRUCTURES: tuple[str, ...] = tuple(structure.value for structure in TemplateStructureEnum)
TEMPLATE_CTA_TYPES: tuple[str, ...] = tuple(cta.value for cta in TemplateCtaTypeEnum)
SEND_DAYS: tuple[str, ...] = tuple(day.value for day in SendDayEnum)
DEFAULT_SEND_DAYS: tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri")

_VOCABULARIES: dict[str, tuple[str, ...]] = {
    "industry": INDUSTRIES,
    "company_size": COMPANY_SIZES,
    "seniority": SENIORITIES,
    "region": REGIONS,
    "trust_signal_kind": TRUST_SIGNAL_KINDS,
    "tone": TEMPLATE_TONES,
    "structure": TEMPLATE_STRUCTURES,
    "cta_type": TEMPLATE_CTA_TYPES,
    "send_day": SEND_DAYS,
}


def _normalize(value: str) -> str:
    text = unicodedata.normalize("NFKC", str(value)).strip()
    return re.sub(r"\s+", " ", text)


def vocabulary(kind: str) -> tuple[str, ...]:
    try:
        return _VOCABULARIES[kind]
    except KeyError as exc:
        raise KeyError(f"Unknown vocabulary '{kind}'") from exc


def assert_token(kind: str, value: str | None) -> str:
    """Return the canonical spelling of ``value`` within vocabulary ``kind``.

    Matching ignores case and surrounding/collapsed whitespace, so ``" c-level"``
    resolves to ``"C-Level"``.
    """
    allowed = vocabulary(kind)
    if value is None:
        raise VocabularyError(kind, "None", list(allowed))
    normalized = _normalize(value)
    for token in allowed:
        if token.lower() == normalized.lower():
            return token
    raise VocabularyError(kind, normalized, list(allowed))


def assert_many(kind: str, values: Iterable[str] | None) -> list[str]:
    if not values:
        return []
    canonical: list[str] = []
    for value in values:
        token = assert_token(kind, value)
        if token not in canonical:
            canonical.append(token)
    return canonical
