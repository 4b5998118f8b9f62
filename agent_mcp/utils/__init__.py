"""
Utility modules for the agent-mcp framework.
"""

from .logger import set_log_level, mcp_logger

__all__ = ['set_log_level', 'mcp_logger']
