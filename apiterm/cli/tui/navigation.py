"""Drill-down stack for following schema references."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from apiterm.cli.models import SchemaInfo
from apiterm.logging_config import get_logger

logger = get_logger(__name__)

BREADCRUMB_SEPARATOR = " > "


class NavigatorView(str, Enum):
    BASE = "base"
    DRILLDOWN = "drilldown"


@dataclass(frozen=True)
class NavigationEntry:
    """A single level in the drill-down stack."""

    schema: SchemaInfo
    label: str


@dataclass
class SchemaNavigator:
    """LIFO stack of schemas the user drilled into.

    Empty stack means the base view; otherwise the tail entry is shown.
    The stack belongs to one subject (an endpoint) and is cleared when the
    subject changes.
    """

    stack: list[NavigationEntry] = field(default_factory=list)
    subject_id: str | None = None

    @property
    def view(self) -> NavigatorView:
        return NavigatorView.DRILLDOWN if self.stack else NavigatorView.BASE

    def push(self, schema: SchemaInfo, label: str) -> None:
        """Push a new drill-down level."""
        self.stack.append(NavigationEntry(schema=schema, label=label))
        logger.debug("Navigator push {} (depth={})", label, len(self.stack))

    def pop(self) -> bool:
        """Pop the last level. Returns True if popped, False if empty."""
        if self.stack:
            entry = self.stack.pop()
            logger.debug("Navigator pop {} (depth={})", entry.label, len(self.stack))
            return True
        return False

    def reset(self) -> None:
        """Clear the stack."""
        self.stack.clear()

    def current_subtree(self) -> SchemaInfo | None:
        if not self.stack:
            return None
        return self.stack[-1].schema

    @property
    def breadcrumbs(self) -> list[str]:
        return [entry.label for entry in self.stack]

    def get_breadcrumb(self) -> str:
        """Get breadcrumb string."""
        return BREADCRUMB_SEPARATOR.join(self.breadcrumbs)

    def bind_subject(self, subject_id: str | None) -> bool:
        """Attach the stack to a subject, resetting it when the subject changes.

        Returns True when a reset happened.
        """
        if subject_id == self.subject_id:
            return False
        self.subject_id = subject_id
        self.reset()
        return True
