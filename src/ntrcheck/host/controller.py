"""Analyzer controller — owns the entry control for one issue page view."""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from ntrcheck.broker import BrokerTransport
from ntrcheck.config import config
from ntrcheck.exceptions import ErrorKind
from ntrcheck.host.page import EntryControl, OutputRegion
from ntrcheck.host.readiness import ReadinessSignal, Subscription
from ntrcheck.host.settings_store import SettingsStore
from ntrcheck.models import AnalysisError, AnalysisResult, IssuePage, PipelineEvent, RunState
from ntrcheck.output.html_renderer import render_html, render_progress
from ntrcheck.pipeline.orchestrator import run_analysis

logger = logging.getLogger(__name__)


def _credential_read_failed(exc: Exception) -> PipelineEvent:
    result = AnalysisError(
        error=f"Error during analysis: could not read the OpenAI API key: {type(exc).__name__}: {exc}",
        kind=ErrorKind.UNEXPECTED,
    )
    return PipelineEvent(
        state=RunState.FAILED,
        message=result.error,
        result=result,
        html=render_html(result),
    )


class AnalyzerController:
    """One per page view. Created through ``ControllerRegistry.controller_for``."""

    def __init__(
        self,
        page: IssuePage,
        *,
        store: SettingsStore,
        http: httpx.AsyncClient,
        transport: BrokerTransport,
    ) -> None:
        self.page = page
        self.store = store
        self.http = http
        self.transport = transport
        self.control: EntryControl | None = None
        self.output: OutputRegion | None = None
        self.last_result: AnalysisResult | None = None

    @property
    def injected(self) -> bool:
        return self.control is not None

    def inject(self) -> bool:
        """Create the entry control and output region once, for NTR pages only."""
        if self.injected:
            return True
        if not self.page.is_new_term_request:
            logger.debug("Skipping %s: not labelled as a new term request", self.page.url)
            return False
        self.control = EntryControl()
        self.output = OutputRegion()
        logger.info("Analyzer injected on %s", self.page.url or self.page.title)
        return True

    def watch(self, signal: ReadinessSignal) -> Subscription:
        """Inject on the first readiness signal for this page, then unsubscribe."""
        def _on_ready(page: IssuePage) -> None:
            if page.url != self.page.url:
                return
            self.page = page
            if self.inject():
                subscription.cancel()

        subscription = signal.subscribe(_on_ready)
        return subscription

    async def analyze(
        self, listener: Callable[[PipelineEvent], None] | None = None
    ) -> PipelineEvent | None:
        """Handle one click. Returns the terminal event, or None if ignored.

        ``listener`` sees every event after it has been written to the
        output region.
        """
        if self.control is None or self.output is None:
            raise RuntimeError("Analyzer has not been injected on this page")
        if not self.control.enabled:
            logger.info("Analysis already running on %s", self.page.url)
            return None

        self.control.enabled = False
        terminal: PipelineEvent | None = None
        try:
            try:
                api_key = await self.store.get(config.settings_store.api_key_name)
            except Exception as exc:
                logger.exception("Could not read the stored OpenAI API key")
                terminal = _credential_read_failed(exc)
                self.last_result = terminal.result
                self.output.write(terminal.html or "")
                if listener is not None:
                    listener(terminal)
                return terminal

            async for event in run_analysis(
                self.page.context(),
                api_key=api_key,
                http=self.http,
                transport=self.transport,
            ):
                if event.is_terminal:
                    terminal = event
                    self.last_result = event.result
                    self.output.write(event.html or "")
                else:
                    self.output.write(render_progress(event.message))
                if listener is not None:
                    listener(event)
        finally:
            self.control.enabled = True
        return terminal


class ControllerRegistry:
    """Hands out exactly one controller per page URL.

    Navigating to another page drops the controllers of pages left behind,
    except one whose analysis is still running.
    """

    def __init__(
        self,
        *,
        store: SettingsStore,
        http: httpx.AsyncClient,
        transport: BrokerTransport,
    ) -> None:
        self.store = store
        self.http = http
        self.transport = transport
        self._controllers: dict[str, AnalyzerController] = {}

    def __len__(self) -> int:
        return len(self._controllers)

    def controller_for(self, page: IssuePage) -> AnalyzerController:
        key = page.url or page.title
        self._drop_stale(keep=key)
        controller = self._controllers.get(key)
        if controller is None:
            controller = AnalyzerController(
                page, store=self.store, http=self.http, transport=self.transport,
            )
            self._controllers[key] = controller
        return controller

    def _drop_stale(self, keep: str) -> None:
        for key, controller in list(self._controllers.items()):
            running = controller.control is not None and not controller.control.enabled
            if key != keep and not running:
                del self._controllers[key]

    def attach(self, signal: ReadinessSignal) -> Subscription:
        """Inject on every readiness signal, including in-page navigations."""
        return signal.subscribe(lambda page: self.controller_for(page).inject())
