# tests/test_provider.py
from __future__ import annotations

import subprocess
import sys
import textwrap
import time
from pathlib import Path

from tabline.commands import PoolRequest
from tabline.interface.diagnostics import DiagnosticKind
from tabline.interface.provider import get_pool

ROOT = Path(__file__).resolve().parents[1]


def request() -> PoolRequest:
    return PoolRequest(command_name="Get-Thing", parameter_name="Name")


def test_returns_provider_items_as_list():
    assert get_pool(lambda r: (x for x in "abc"), request(), timeout=1) == ["a", "b", "c"]


def test_provider_sees_request():
    seen = []
    req = PoolRequest("Get-Thing", "Name", fake_bound={"Color": "red"}, word_to_complete="al")
    get_pool(lambda r: seen.append((r.bound("color"), r.word_to_complete)) or [], req, timeout=1)
    assert seen == [("red", "al")]


def test_limit_stops_iteration():
    def endless(_):
        n = 0
        while True:
            yield n
            n += 1

    assert get_pool(endless, request(), timeout=1, limit=3) == [0, 1, 2]


def test_slow_provider_times_out_and_is_cancelled():
    def slow(req):
        while True:
            time.sleep(0.01)
            yield "late"

    req = request()
    diagnostics = []
    started = time.monotonic()
    assert get_pool(slow, req, timeout=0.05, diagnostics=diagnostics) == []
    assert time.monotonic() - started < 1
    assert req.cancelled.is_set()
    assert [d.kind for d in diagnostics] == [DiagnosticKind.PROVIDER_TIMEOUT]


def test_failing_provider_yields_empty_pool():
    def broken(_):
        raise RuntimeError("no backend")

    diagnostics = []
    assert get_pool(broken, request(), timeout=1, diagnostics=diagnostics) == []
    assert diagnostics[0].kind is DiagnosticKind.PROVIDER_FAILURE
    assert "no backend" in diagnostics[0].message


def test_none_from_provider_is_empty():
    assert get_pool(lambda r: None, request(), timeout=1) == []


def test_abandoned_provider_does_not_delay_exit():
    script = textwrap.dedent("""
        import time
        from tabline.commands import PoolRequest
        from tabline.interface.provider import get_pool

        def stuck(_):
            time.sleep(30)
            return ["never"]

        print(get_pool(stuck, PoolRequest("Get-Thing", "Name"), timeout=0.1))
    """)
    started = time.monotonic()
    completed = subprocess.run([sys.executable, "-c", script], cwd=ROOT, capture_output=True,
                               text=True, timeout=20)
    assert completed.returncode == 0, completed.stderr
    assert completed.stdout.strip() == "[]"
    assert time.monotonic() - started < 10
