"""Tests for the analyzer controller and registry."""

import asyncio

import httpx
import pytest

from ntrcheck.exceptions import ErrorKind
from ntrcheck.host.controller import AnalyzerController, ControllerRegistry
from ntrcheck.host.readiness import ReadinessSignal
from ntrcheck.host.settings_store import JsonFileSettingsStore, MemorySettingsStore
from ntrcheck.models import BrokerSuccess, IssuePage, RunState

ISSUE_URL = "https://github.com/monarch-initiative/mondo/issues/9001"


class NullTransport:
    async def send(self, request):
        return BrokerSuccess(details=None)


def _page(labels=("new term request",), title="New disease term", url=ISSUE_URL):
    return IssuePage(url=url, title=title, body="Definition: ...", labels=list(labels))


def _openai_client(chat_completion, payload, gate: asyncio.Event | None = None):
    calls = []

    async def handler(request):
        calls.append(request)
        if gate is not None:
            await gate.wait()
        return httpx.Response(200, json=chat_completion(payload))

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), calls


def _controller(page, http, key="sk-test"):
    store = MemorySettingsStore({"openai_api_key": key} if key else None)
    return AnalyzerController(page, store=store, http=http, transport=NullTransport())


def test_inject_only_on_ntr_pages(mock_http):
    assert not _controller(_page(labels=["bug"]), mock_http).inject()

    controller = _controller(_page(), mock_http)
    assert controller.inject()
    control = controller.control
    assert control.label == "Analyze Issue"
    assert controller.inject()
    assert controller.control is control


def test_label_match_ignores_surrounding_whitespace(mock_http):
    assert _controller(_page(labels=["  new term request "]), mock_http).inject()


async def test_analyze_before_inject_raises(mock_http):
    with pytest.raises(RuntimeError):
        await _controller(_page(), mock_http).analyze()


async def test_analyze_writes_progress_then_result(chat_completion, simple_analysis):
    http, _ = _openai_client(chat_completion, simple_analysis)
    controller = _controller(_page(), http)
    controller.inject()
    events = []

    terminal = await controller.analyze(events.append)

    assert terminal.state == RunState.RENDERED
    assert [e.state for e in events][-1] == RunState.RENDERED
    writes = controller.output.writes
    assert writes[0] == "<p>Step 1/2: Checking title for a gene marker...</p>"
    assert writes[1] == "<p>Step 2/2: Analyzing as a standard term...</p>"
    assert controller.output.html == terminal.html
    assert controller.last_result.recommended_action == "NEEDS_MORE_INFO"
    assert controller.control.enabled
    await http.aclose()


async def test_analyze_without_key(mock_http):
    controller = _controller(_page(), mock_http, key=None)
    controller.inject()

    terminal = await controller.analyze()

    assert terminal.state == RunState.FAILED
    assert "OpenAI API Key not set." in controller.output.html
    assert controller.control.enabled


async def test_click_while_running_is_ignored(chat_completion, simple_analysis):
    gate = asyncio.Event()
    http, calls = _openai_client(chat_completion, simple_analysis, gate)
    controller = _controller(_page(), http)
    controller.inject()

    first = asyncio.create_task(controller.analyze())
    while not calls:
        await asyncio.sleep(0)
    assert not controller.control.enabled

    assert await controller.analyze() is None

    gate.set()
    terminal = await first
    assert terminal.state == RunState.RENDERED
    assert len(calls) == 1
    assert controller.control.enabled
    await http.aclose()


async def test_second_analysis_overwrites_output(chat_completion, simple_analysis):
    http, _ = _openai_client(chat_completion, simple_analysis)
    controller = _controller(_page(), http)
    controller.inject()

    await controller.analyze()
    first_html = controller.output.html
    await controller.analyze()

    assert controller.output.html == first_html
    assert len(controller.output.writes) == 6
    await http.aclose()


def test_watch_injects_once_and_unsubscribes(mock_http):
    signal = ReadinessSignal()
    controller = _controller(_page(labels=[]), mock_http)
    controller.watch(signal)

    signal.emit(_page(url="https://github.com/monarch-initiative/mondo/issues/2"))
    assert not controller.injected

    signal.emit(_page(labels=[]))
    assert not controller.injected
    assert signal.subscriber_count == 1

    signal.emit(_page())
    assert controller.injected
    assert signal.subscriber_count == 0


def test_registry_one_controller_per_page(mock_http):
    registry = ControllerRegistry(store=MemorySettingsStore(), http=mock_http, transport=NullTransport())
    a = registry.controller_for(_page())
    assert registry.controller_for(_page()) is a
    assert registry.controller_for(_page(url=ISSUE_URL + "0")) is not a


def test_registry_attach_injects_on_navigation(mock_http):
    registry = ControllerRegistry(store=MemorySettingsStore(), http=mock_http, transport=NullTransport())
    signal = ReadinessSignal()
    registry.attach(signal)

    signal.emit(_page())
    signal.emit(_page())
    other = _page(url=ISSUE_URL + "1")
    signal.emit(other)

    assert len(registry) == 1
    assert registry.controller_for(other).injected
    assert signal.subscriber_count == 1


def test_registry_keeps_running_controller_on_navigation(mock_http):
    registry = ControllerRegistry(store=MemorySettingsStore(), http=mock_http, transport=NullTransport())
    busy = registry.controller_for(_page())
    busy.inject()
    busy.control.enabled = False

    registry.controller_for(_page(url=ISSUE_URL + "1"))
    assert len(registry) == 2

    busy.control.enabled = True
    registry.controller_for(_page(url=ISSUE_URL + "2"))
    assert len(registry) == 1


class BrokenStore(MemorySettingsStore):
    async def get(self, key):
        raise PermissionError(13, "Permission denied", "settings.json")


async def test_unreadable_credential_fails_the_run(mock_http):
    controller = AnalyzerController(_page(), store=BrokenStore(), http=mock_http, transport=NullTransport())
    controller.inject()
    events = []

    terminal = await controller.analyze(events.append)

    assert terminal.state == RunState.FAILED
    assert terminal.result.kind == ErrorKind.UNEXPECTED
    assert events == [terminal]
    assert controller.output.html == terminal.html
    assert controller.output.html.count('class="analysis-error"') == 1
    assert "could not read the OpenAI API key" in controller.output.html
    assert controller.control.enabled


async def test_undecodable_settings_file_reports_missing_key(tmp_path, mock_http):
    path = tmp_path / "settings.json"
    path.write_bytes(b'{"openai_api_key": "\xff\xfe"}')
    controller = AnalyzerController(
        _page(), store=JsonFileSettingsStore(path), http=mock_http, transport=NullTransport(),
    )
    controller.inject()

    terminal = await controller.analyze()

    assert terminal.state == RunState.FAILED
    assert terminal.result.kind == ErrorKind.CREDENTIAL_MISSING
    assert "OpenAI API Key not set." in controller.output.html
    assert controller.control.enabled
