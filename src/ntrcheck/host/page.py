"""Page elements the analyzer owns: the entry control and the output region."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class EntryControl:
    label: str = "Analyze Issue"
    enabled: bool = True


@dataclass
class OutputRegion:
    """Container overwritten wholesale by each write; last writer wins."""

    html: str = ""
    writes: list[str] = field(default_factory=list)

    def write(self, fragment: str) -> None:
        self.html = fragment
        self.writes.append(fragment)
