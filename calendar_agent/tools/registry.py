"""Centralized tool registry."""

import logging
from typing import Callable, Dict, List, Optional

from .base import BaseTool
from ..calendar.backend import (
    CalendarBackend,
    GoogleCalendarBackend,
    GoogleCredentialsProvider,
)
from ..calendar.search import EventSearchOrchestrator
from ..calendar.time_window import get_strategy
from ..config.config_schema import AppConfig, GoogleCalendarConfig

logger = logging.getLogger(__name__)


def google_backend_provider(
    cal_config: GoogleCalendarConfig,
) -> Callable[[], CalendarBackend]:
    """
    Build a provider that returns a connected Google Calendar backend.

    The backend is created once and reused; a failed connection is retried
    on the next call.
    """
    credentials = GoogleCredentialsProvider(
        access_token=cal_config.access_token,
        credentials_path=cal_config.credentials_path,
        token_path=cal_config.token_path,
        service_account_email=cal_config.service_account_email,
        service_account_key=cal_config.service_account_key,
    )
    backend = GoogleCalendarBackend(credentials)

    def provide() -> CalendarBackend:
        return backend.connect()

    return provide


class ToolRegistry:
    """Centralized registry for all tools."""

    def __init__(self):
        """Initialize empty tool registry."""
        self._tools: Dict[str, BaseTool] = {}

    def register_tool(self, tool: BaseTool) -> None:
        """
        Register a tool in the registry.

        Args:
            tool: Tool instance to register
        """
        self._tools[tool.get_name()] = tool

    def get_tool(self, name: str) -> Optional[BaseTool]:
        """
        Get a tool by name.

        Args:
            name: Tool name

        Returns:
            Tool instance or None if not found
        """
        return self._tools.get(name)

    def get_all_tools(self) -> List[BaseTool]:
        """
        Get all registered tools.

        Returns:
            List of all registered tools
        """
        return list(self._tools.values())

    def initialize_tools(
        self,
        config: AppConfig,
        backend_provider: Optional[Callable[[], CalendarBackend]] = None,
    ) -> None:
        """
        Initialize and register calendar tools based on configuration.

        Args:
            config: Application configuration
            backend_provider: Optional backend provider; defaults to the
                Google backend built from ``config.google_calendar``
        """
        from .calendar_create import CalendarCreateTool
        from .calendar_search import CalendarSearchTool

        cal_config = config.google_calendar
        if backend_provider is None:
            if not cal_config:
                logger.warning("Google Calendar not configured, calendar tools disabled")
                return
            backend_provider = google_backend_provider(cal_config)
        cal_config = cal_config or GoogleCalendarConfig()

        orchestrator = EventSearchOrchestrator(
            window_strategy=get_strategy(config.search.window_mode),
            max_results=config.search.max_results,
            concurrent=config.search.concurrent,
        )
        self.register_tool(
            CalendarSearchTool(
                backend_provider,
                orchestrator=orchestrator,
                calendar_ids=cal_config.calendar_ids,
            )
        )
        self.register_tool(
            CalendarCreateTool(
                backend_provider, calendar_id=cal_config.create_calendar_id
            )
        )
