"""Configuration loading and execution for CLI commands.

Each command module provides:
- Configuration loading and validation
- Command execution logic
- Integration with core library functions
"""

from calrange.commands.resolve import load_dashboard_config, resolve_dashboard

__all__ = [
    "load_dashboard_config",
    "resolve_dashboard",
]
