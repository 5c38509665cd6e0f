from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptEvent:
    is_final: bool
    text: str


class SpeechSource(Protocol):
    """A dictation provider. It reports results and the end of a session through callbacks."""

    def start(self, on_event: Callable[[TranscriptEvent], None], on_end: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class DictationBridge:
    """
    Writes transcript text into the pending note body. Finished segments are
    kept and the latest interim segment is shown after them. With no source
    the bridge is disabled and every call is a no-op.
    """

    def __init__(self, source: Optional[SpeechSource], write_body: Callable[[str], None]):
        self.source = source
        self.write_body = write_body
        self.listening = False
        self._final: list[str] = []

    @property
    def available(self) -> bool:
        return self.source is not None

    def start(self) -> bool:
        if self.source is None or self.listening:
            return self.listening
        self._final = []
        self.listening = True
        try:
            self.source.start(self.handle, self.handle_end)
        except Exception:
            self.listening = False
            raise
        logger.info("dictation started")
        return True

    def stop(self) -> None:
        if self.source is None or not self.listening:
            return
        self.source.stop()
        self.handle_end()

    def toggle(self) -> bool:
        """Start or stop capture; returns whether capture is now running."""
        if self.listening:
            self.stop()
        else:
            self.start()
        return self.listening

    def handle(self, event: TranscriptEvent) -> None:
        if not self.listening:
            return
        interim = ""
        if event.is_final:
            self._final.append(event.text)
        else:
            interim = event.text
        self.write_body("".join(self._final + [interim]).strip())

    def handle_end(self) -> None:
        if self.listening:
            self.listening = False
            logger.info("dictation stopped")
