"""Dashboard pipeline — design, layout, widget data and investigation."""

from src.dashboard.designer import DashboardDesigner, default_design, parse_design_response
from src.dashboard.investigator import Investigator
from src.dashboard.layout import compose_dashboard, resolve_time_range
from src.dashboard.notes import format_investigation_notes
from src.dashboard.resolver import WidgetDataResolver
from src.dashboard.samples import SampleDataGenerator
from src.dashboard.service import extract_service

__all__ = [
    "DashboardDesigner",
    "Investigator",
    "SampleDataGenerator",
    "WidgetDataResolver",
    "compose_dashboard",
    "default_design",
    "extract_service",
    "format_investigation_notes",
    "parse_design_response",
    "resolve_time_range",
]
