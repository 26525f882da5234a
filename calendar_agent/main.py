"""CLI entry point for the calendar assistant tools."""

import argparse
import asyncio
import sys
from typing import Optional

from .calendar.models import parse_datetime
from .config.config_loader import load_config
from .config.config_schema import AppConfig
from .context.models import RequestContext
from .tools.registry import ToolRegistry
from .utils.logging import setup_logging

SEARCH_TOOL = "enhanced_google_calendar_view"
CREATE_TOOL = "enhanced_google_calendar_create"


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        description="Search and create Google Calendar events from natural language",
        prog="calendar-agent",
    )

    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=None,
        help="Increase verbosity (-v, -vv, -vvv)",
    )

    parser.add_argument(
        "--now",
        type=parse_datetime,
        help="Reference time in ISO format (default: current time)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search calendar events")
    search.add_argument("query", nargs="+", help="Search text, e.g. 'acme tomorrow'")
    search.add_argument(
        "--calendar",
        action="append",
        dest="calendar_ids",
        help="Calendar to search (repeatable, default: configured calendars)",
    )

    create = subparsers.add_parser("create", help="Create a calendar event")
    create.add_argument(
        "description",
        help="Event description; use '\\n' to separate lines such as 'Attendees: a@x.com'",
    )

    return parser


async def run(
    args: argparse.Namespace,
    config: Optional[AppConfig] = None,
    registry: Optional[ToolRegistry] = None,
) -> int:
    """
    Run one CLI command.

    Args:
        args: Parsed arguments
        config: Loaded configuration (default: loaded from args.config)
        registry: Pre-built tool registry (default: built from config)

    Returns:
        Process exit code
    """
    if config is None:
        config = load_config(args.config)

    if registry is None:
        registry = ToolRegistry()
        registry.initialize_tools(config)

    context = RequestContext(
        timezone=config.agent.preferences.timezone,
        now=args.now,
    )

    if args.command == "search":
        tool = registry.get_tool(SEARCH_TOOL)
        kwargs = {"query": " ".join(args.query), "calendar_ids": args.calendar_ids}
    else:
        tool = registry.get_tool(CREATE_TOOL)
        kwargs = {"description": args.description.replace("\\n", "\n")}

    if tool is None:
        print("Error: Google Calendar is not configured", file=sys.stderr)
        return 1

    result = await tool.execute(context, **kwargs)
    print(result.text)
    return 0 if result.success else 1


def main():
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    verbosity = args.verbose if args.verbose is not None else config.logging.verbosity
    setup_logging(verbosity=verbosity, log_file=config.logging.log_file)

    try:
        exit_code = asyncio.run(run(args, config))
        sys.exit(exit_code)
    except KeyboardInterrupt:
        print("\nCancelled by user")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
