"""Section registry.

The order of ``SECTION_REGISTRY`` is the order sections appear in an
exported document, whatever order a report happens to store them in.
"""

from __future__ import annotations

from dataclasses import dataclass

from .model import Report, Section


@dataclass(frozen=True)
class SectionKind:
    key: str
    label: str
    default_enabled: bool = True
    toggleable: bool = True


COVER = "cover"
TOC = "toc"
SUMMARY = "summary"
NARRATIVE = "narrative"
EXHIBITS = "exhibits"
PHOTOS = "photos"
DEPRECIATION = "depreciation"

SECTION_REGISTRY: tuple[SectionKind, ...] = (
    SectionKind(COVER, "Cover Page"),
    SectionKind(TOC, "Table of Contents"),
    SectionKind(SUMMARY, "Summary Letter"),
    SectionKind(NARRATIVE, "Narrative Sections"),
    SectionKind(EXHIBITS, "Exhibits"),
    SectionKind(PHOTOS, "Photographs"),
    SectionKind(DEPRECIATION, "Depreciation Tables"),
)

SECTION_KEYS: tuple[str, ...] = tuple(kind.key for kind in SECTION_REGISTRY)

_KINDS_BY_KEY = {kind.key: kind for kind in SECTION_REGISTRY}


def get_kind(key: str) -> SectionKind | None:
    return _KINDS_BY_KEY.get(key)


def default_sections() -> list[Section]:
    """Fresh Section list in canonical order with registry defaults."""
    return [
        Section(key=kind.key, label=kind.label, enabled=kind.default_enabled)
        for kind in SECTION_REGISTRY
    ]


def enabled_sections(report: Report) -> list[Section]:
    """Enabled sections of ``report`` re-ordered canonically.

    Keys the registry does not know are dropped. A registry key missing
    from the report counts as disabled. If a key is stored twice the
    first entry wins.
    """
    stored: dict[str, Section] = {}
    for section in report.sections:
        if section.key in _KINDS_BY_KEY and section.key not in stored:
            stored[section.key] = section

    result = []
    for kind in SECTION_REGISTRY:
        section = stored.get(kind.key)
        if section is not None and section.enabled:
            result.append(section)
    return result


def is_enabled(report: Report, key: str) -> bool:
    return any(section.key == key for section in enabled_sections(report))
