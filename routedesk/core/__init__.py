"""
Core package for RouteDesk.
"""
from routedesk.core.config import settings, get_settings
from routedesk.core.logging import configure_logging

__all__ = ["settings", "get_settings", "configure_logging"]
