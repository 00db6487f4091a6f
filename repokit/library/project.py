"""
The placeholder TemplateProject library.

It carries no state, so `greet` returns the same text from any thread.
"""

from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)

GREETING = "Hello from Template Project!"


@dataclass(frozen=True)
class TemplateProjectConfiguration:
    is_debug_mode: bool = False
    application_name: str = "Template App"


class TemplateProject:
    """Main Template Project library."""

    VERSION = "1.0.0"

    shared: "TemplateProject"

    def greet(self) -> str:
        return GREETING

    @staticmethod
    def configure(configuration: TemplateProjectConfiguration) -> None:
        """Apply a configuration; only debug mode has a visible effect."""
        if configuration.is_debug_mode:
            logger.info(
                f"Template Project configured in debug mode for {configuration.application_name}"
            )


TemplateProject.shared = TemplateProject()
