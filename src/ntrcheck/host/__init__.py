"""Host-side collaborators: settings, readiness, page elements, controller."""

from ntrcheck.host.controller import AnalyzerController, ControllerRegistry
from ntrcheck.host.readiness import ReadinessSignal, Subscription
from ntrcheck.host.settings_store import JsonFileSettingsStore, MemorySettingsStore, SettingsStore

__all__ = [
    "AnalyzerController",
    "ControllerRegistry",
    "JsonFileSettingsStore",
    "MemorySettingsStore",
    "ReadinessSignal",
    "SettingsStore",
    "Subscription",
]
