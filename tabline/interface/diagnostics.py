#!/usr/bin/env python3
# tabline/interface/diagnostics.py
from __future__ import annotations

"""
Non-fatal diagnostics produced while binding and completing.

Completion must never crash the interactive session, so every anomaly
(unknown or ambiguous parameter, provider timeout, failed coercion, ...)
is recorded as a Diagnostic value and the request degrades to fewer or
no candidates.
"""

import logging
from dataclasses import dataclass
from enum import Enum

_LOG = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    UNKNOWN_PARAMETER = "unknown-parameter"
    AMBIGUOUS_PARAMETER = "ambiguous-parameter"
    DUPLICATE_PARAMETER = "duplicate-parameter"
    AMBIGUOUS_ATTACHED_MEMBER = "ambiguous-attached-member"
    METADATA_UNAVAILABLE = "metadata-unavailable"
    PROVIDER_TIMEOUT = "provider-timeout"
    PROVIDER_FAILURE = "provider-failure"
    COERCION_FAILURE = "coercion-failure"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """
    One binding or completion anomaly.

    Attributes:
        kind: Category of the problem.
        message: Human-readable description.
        offset: Source offset of the offending element, when known.
    """
    kind: DiagnosticKind
    message: str
    offset: int | None = None

    def __str__(self) -> str:
        where = f" (at {self.offset})" if self.offset is not None else ""
        return f"{self.kind.value}: {self.message}{where}"


def record(diagnostics: list[Diagnostic] | None, kind: DiagnosticKind, message: str,
           offset: int | None = None) -> Diagnostic:
    """Create a diagnostic, append it to `diagnostics` (if given) and log it at DEBUG."""
    diagnostic = Diagnostic(kind, message, offset)
    if diagnostics is not None:
        diagnostics.append(diagnostic)
    _LOG.debug("%s", diagnostic)
    return diagnostic
