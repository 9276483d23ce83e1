"""Narrator interface — speaks verse lines, honouring a mute flag."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

DEFAULT_LOCALE = "es-MX"


@runtime_checkable
class Narrator(Protocol):
    """Structural interface — any object with ``speak`` works."""

    def speak(self, text: str, muted: bool = False, locale: str = DEFAULT_LOCALE) -> None: ...


class SilentNarrator:
    """Discards every line."""

    def speak(self, text: str, muted: bool = False, locale: str = DEFAULT_LOCALE) -> None:
        pass


@dataclass
class RecordingNarrator:
    """Keeps every unmuted line as ``(text, locale)``."""

    lines: list[tuple[str, str]] = field(default_factory=list)
    calls: int = 0

    def speak(self, text: str, muted: bool = False, locale: str = DEFAULT_LOCALE) -> None:
        self.calls += 1
        if muted:
            return
        self.lines.append((text, locale))

    @property
    def texts(self) -> list[str]:
        return [text for text, _ in self.lines]


class ConsoleNarrator:
    """Prints lines to stdout in place of a speech synthesiser."""

    def speak(self, text: str, muted: bool = False, locale: str = DEFAULT_LOCALE) -> None:
        if muted:
            return
        print(f"  ♪ [{locale}] {text}")
