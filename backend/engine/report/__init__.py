"""Report data model, totals and section registry."""

from .model import LineItem, Report, Section, Template
from .sections import SECTION_REGISTRY, enabled_sections
from .totals import Totals, compute_totals

__all__ = [
    "LineItem",
    "Report",
    "SECTION_REGISTRY",
    "Section",
    "Template",
    "Totals",
    "compute_totals",
    "enabled_sections",
]
