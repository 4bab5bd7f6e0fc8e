"""Interfaces for the services the TUI depends on but does not implement."""

from __future__ import annotations

import importlib
from typing import Protocol, runtime_checkable

from apiterm.cli.models import HttpResponse, ParsedSpec, RequestDraft
from apiterm.errors import CollaboratorImportError


@runtime_checkable
class SpecLoader(Protocol):
    """Turns a source (file path or URL) into a parsed API description.

    Raises SpecLoadError or SpecParseError on failure.
    """

    def __call__(self, source: str) -> ParsedSpec: ...


@runtime_checkable
class RequestSender(Protocol):
    """Sends a prepared request. Raises HttpRequestError on transport failure."""

    async def send(self, draft: RequestDraft) -> HttpResponse: ...


def import_collaborator(path: str) -> object:
    """Resolve a ``package.module:attribute`` path to the named object."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise CollaboratorImportError(path, "expected 'module:attribute'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise CollaboratorImportError(path, str(e)) from e
    target: object = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise CollaboratorImportError(path, f"no attribute {part!r}") from e
    return target
