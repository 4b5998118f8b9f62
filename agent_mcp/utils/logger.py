"""
Colored logging utility for the agent-mcp framework.

This is the diagnostic side channel enabled by a server configuration's
``verbose`` flag.
"""

import logging
import sys
from typing import Any, Dict, Optional


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for different message types."""

    # ANSI color codes
    COLORS = {
        'RESET': '\033[0m',
        'MAGENTA': '\033[35m',
        'WHITE': '\033[37m',
        'BRIGHT_BLACK': '\033[90m',
        'BRIGHT_RED': '\033[91m',
        'BRIGHT_GREEN': '\033[92m',
        'BRIGHT_YELLOW': '\033[93m',
    }

    # Message type colors
    MESSAGE_COLORS = {
        'TOOL_CALL': COLORS['BRIGHT_YELLOW'],   # Tool calls (yellow)
        'TOOL_RESULT': COLORS['BRIGHT_GREEN'],  # Tool results (green)
        'MCP_SERVER': COLORS['MAGENTA'],        # MCP server messages (magenta)
        'ERROR': COLORS['BRIGHT_RED'],          # Errors (red)
        'INFO': COLORS['WHITE'],                # General info (white)
        'DEBUG': COLORS['BRIGHT_BLACK'],        # Debug (gray)
    }

    def format(self, record):
        msg_type = getattr(record, 'msg_type', 'INFO')
        color = self.MESSAGE_COLORS.get(msg_type, self.COLORS['WHITE'])

        formatted = super().format(record)

        return f"{color}{formatted}{self.COLORS['RESET']}"


def _preview(text: str, limit: int = 100) -> str:
    return text if len(text) < limit else f"{text[:limit - 3]}..."


class MCPLogger:
    """Centralized logger for agent-mcp with colored output."""

    def __init__(self, name: str = "agent-mcp", level: int = logging.INFO):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Remove existing handlers to avoid duplicates
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ColoredFormatter('%(message)s'))
        self.logger.addHandler(handler)

        self.logger.propagate = False

    def _log_with_type(self, level: int, msg_type: str, message: str):
        """Log a message with a specific type for coloring."""
        self.logger.log(level, message, extra={'msg_type': msg_type})

    def mcp_server(self, server: str, message: str):
        """Log MCP connection activity (magenta)."""
        self._log_with_type(logging.INFO, 'MCP_SERVER', f"🔌 MCP [{server}]: {message}")

    def tool_call(self, tool_name: str, arguments: Dict[str, Any]):
        """Log tool call start (yellow)."""
        self._log_with_type(logging.INFO, 'TOOL_CALL', f"🔧 TOOL CALL: {tool_name}({_preview(str(arguments))})")

    def tool_result(self, tool_name: str, success: bool, result_preview: Optional[str] = None):
        """Log tool call end (green)."""
        status = "✅ SUCCESS" if success else "❌ FAILED"
        msg = f"🔧 TOOL RESULT: {tool_name} → {status}"
        if result_preview:
            msg += f" | {_preview(result_preview)}"
        self._log_with_type(logging.INFO, 'TOOL_RESULT', msg)

    def error(self, message: str):
        """Log error (red)."""
        self._log_with_type(logging.ERROR, 'ERROR', f"❌ ERROR: {message}")


# Global logger instance
mcp_logger = MCPLogger()


def set_log_level(level: int):
    """Set the logging level."""
    mcp_logger.logger.setLevel(level)


def log_progress(verbose: bool, server: str, message: str, logger: logging.Logger) -> None:
    """Route a progress line to the colored channel when verbose, else to DEBUG."""
    if verbose:
        mcp_logger.mcp_server(server, message)
    else:
        logger.debug(f"[{server}] {message}")
