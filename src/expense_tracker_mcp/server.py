"""
MCP server for the expense tracker.

Exposes financial statistics through the Model Context Protocol.
"""

import inspect
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from expense_tracker_mcp.config import Settings, get_settings
from expense_tracker_mcp.core.exceptions import ExpenseTrackerError
from expense_tracker_mcp.core.ledger import Ledger
from expense_tracker_mcp.tools.tools import ExpenseTrackerTools, create_tool_schemas

logger = logging.getLogger(__name__)


class ExpenseTrackerServer:
    """MCP server for expense tracker data."""

    def __init__(self, ledger_path: Optional[Path] = None, settings: Optional[Settings] = None):
        """
        Initialize the MCP server.

        Args:
            ledger_path: Optional path to the JSON ledger.
                         If None, uses the configured or default location.
            settings: Optional settings; defaults to get_settings()
        """
        self.settings = settings or get_settings()
        self.ledger = Ledger(ledger_path or self.settings.ledger_path)
        self.tools = ExpenseTrackerTools(self.ledger, self.settings)
        self.server = Server("expense-tracker-mcp")

        # Register handlers
        self._register_handlers()

    def _handlers(self) -> Dict[str, Callable[..., Dict[str, Any]]]:
        return {
            "get_items": self.tools.get_items,
            "search_items": self.tools.search_items,
            "get_financial_summary": self.tools.get_financial_summary,
            "get_category_breakdown": self.tools.get_category_breakdown,
            "get_dashboard": self.tools.get_dashboard,
            "get_overall_statistics": self.tools.get_overall_statistics,
            "get_category_colors": self.tools.get_category_colors,
            "list_relationship_requests": self.tools.list_relationship_requests,
            "send_relationship_request": self.tools.send_relationship_request,
            "approve_relationship_request": self.tools.approve_relationship_request,
            "reject_relationship_request": self.tools.reject_relationship_request,
            "remove_relationship": self.tools.remove_relationship,
        }

    def handle_tool_call(self, name: str, arguments: Dict[str, Any]) -> list[TextContent]:
        """
        Run a tool and wrap its result (or error) as text content.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            A single text content item holding JSON or an error message
        """
        # Check if ledger is available
        if not self.ledger.is_available():
            error_msg = (
                f"Ledger not available at {self.ledger.ledger_path}. "
                "Please provide a ledger path with --ledger-path or "
                "EXPENSE_TRACKER_LEDGER_PATH."
            )
            return [TextContent(type="text", text=error_msg)]

        handler = self._handlers().get(name)
        if handler is None:
            return [TextContent(type="text", text=f"Unknown tool: {name}")]

        try:
            inspect.signature(handler).bind(**arguments)
        except TypeError as e:
            logger.info("Tool %s called with bad arguments: %s", name, e)
            return [TextContent(type="text", text=f"Error: invalid arguments for {name}: {e}")]

        try:
            result = handler(**arguments)
        except (ValueError, ExpenseTrackerError) as e:
            # Expected failures: bad values, access denied, workflow violations
            logger.info("Tool %s rejected: %s", name, e)
            return [TextContent(type="text", text=f"Error: {str(e)}")]
        except Exception as e:
            logger.exception(f"Error executing tool {name}")
            return [
                TextContent(
                    type="text",
                    text=f"Error executing tool: {str(e)}",
                )
            ]

        return [TextContent(type="text", text=json.dumps(result, indent=2, ensure_ascii=False))]

    def _register_handlers(self) -> None:
        """Register MCP protocol handlers."""

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            """List available tools."""
            schemas = create_tool_schemas()
            return [
                Tool(
                    name=schema["name"],
                    description=schema["description"],
                    inputSchema=schema["inputSchema"],
                )
                for schema in schemas
            ]

        @self.server.call_tool()
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
            """Handle tool calls."""
            return self.handle_tool_call(name, arguments or {})

    async def run(self) -> None:  # pragma: no cover
        """Run the MCP server using stdio transport."""
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


async def run_server(
    ledger_path: Optional[Path] = None, settings: Optional[Settings] = None
) -> None:  # pragma: no cover
    """
    Run the expense tracker MCP server.

    Args:
        ledger_path: Optional path to the JSON ledger.
                     If None, uses the configured or default location.
        settings: Optional settings
    """
    server = ExpenseTrackerServer(ledger_path, settings)
    await server.run()
