#!/usr/bin/env python3
# tabline/interface/provider.py
from __future__ import annotations

"""
Candidate-provider boundary.

Providers are arbitrary user code: they may be slow, raise, or yield
forever. get_pool() runs one provider under a deadline on a daemon thread
and always hands back a finite list; failures become diagnostics.
"""

import logging
import threading
from concurrent.futures import Future, TimeoutError as FutureTimeout
from typing import Any

from tabline.commands.command_types import CandidateProvider, PoolRequest

from .diagnostics import Diagnostic, DiagnosticKind, record

_LOG = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 2.0


class _Cancelled(Exception):
    """Raised inside the worker once the caller stopped waiting."""


def _materialize(provider: CandidateProvider, request: PoolRequest, limit: int | None) -> list[Any]:
    pool: list[Any] = []
    for item in provider(request) or ():
        if request.cancelled.is_set():
            raise _Cancelled()
        pool.append(item)
        if limit is not None and len(pool) >= limit:
            break
    return pool


def _run(future: Future, provider: CandidateProvider, request: PoolRequest, limit: int | None) -> None:
    if not future.set_running_or_notify_cancel():
        return
    try:
        future.set_result(_materialize(provider, request, limit))
    except Exception as exc:
        future.set_exception(exc)


def get_pool(
    provider: CandidateProvider,
    request: PoolRequest,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    limit: int | None = None,
    diagnostics: list[Diagnostic] | None = None,
) -> list[Any]:
    """
    Invoke `provider` with `request` and return its items as a list.

    The provider runs on its own daemon thread; when `timeout` seconds pass
    first, request.cancelled is set (cooperative providers should check it),
    the thread is abandoned and an empty pool is returned. An abandoned
    thread never holds up interpreter exit. Exceptions raised by the
    provider are recorded as PROVIDER_FAILURE, never propagated.
    """
    future: Future = Future()
    worker = threading.Thread(
        target=_run, args=(future, provider, request, limit),
        name=f"tabline-pool-{request.parameter_name}", daemon=True,
    )
    worker.start()
    try:
        pool = future.result(timeout=timeout)
    except FutureTimeout:
        request.cancelled.set()
        record(diagnostics, DiagnosticKind.PROVIDER_TIMEOUT,
               f"Candidate provider for -{request.parameter_name} did not finish within {timeout:g}s")
        return []
    except _Cancelled:
        return []
    except Exception as exc:
        _LOG.debug("provider for %s -%s failed", request.command_name, request.parameter_name, exc_info=True)
        record(diagnostics, DiagnosticKind.PROVIDER_FAILURE,
               f"Candidate provider for -{request.parameter_name} failed: {type(exc).__name__}: {exc}")
        return []

    _LOG.debug("provider %s -%s returned %d item(s)", request.command_name, request.parameter_name, len(pool))
    return pool
