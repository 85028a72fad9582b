"""
Progress reporting for long-running collection and export loops.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)


class ProgressReporter(ABC):
    """Receives discrete progress ticks. Fire-and-forget."""

    @abstractmethod
    def tick(self, current: int, total: int):
        """Report that ``current`` of ``total`` steps are done."""
        pass

    @abstractmethod
    def set_label(self, text: str):
        """Set the message shown next to the progress."""
        pass

    @abstractmethod
    def hide(self):
        """Close or hide the progress display."""
        pass


class NullProgressReporter(ProgressReporter):
    """Progress reporter that ignores everything."""

    def tick(self, current: int, total: int):
        pass

    def set_label(self, text: str):
        pass

    def hide(self):
        pass


class CallbackProgressReporter(ProgressReporter):
    """Forwards progress to a callback ``(label, current, total)``."""

    def __init__(self, callback: Callable[[str, int, int], None]):
        self.callback = callback
        self.label = ""

    def tick(self, current: int, total: int):
        self.callback(self.label, current, total)

    def set_label(self, text: str):
        self.label = text

    def hide(self):
        pass


class TqdmProgressReporter(ProgressReporter):
    """Progress bar on the terminal using tqdm."""

    def __init__(self, disable: bool = False, unit: str = "layer"):
        self.disable = disable
        self.unit = unit
        self.label = ""
        self._bar: Optional[tqdm] = None

    def tick(self, current: int, total: int):
        if self._bar is None or self._bar.total != total:
            self.hide()
            self._bar = tqdm(total=total, desc=self.label, unit=self.unit,
                             disable=self.disable, leave=False)
        self._bar.n = current
        self._bar.refresh()

    def set_label(self, text: str):
        self.label = text
        if self._bar is not None:
            self._bar.set_description_str(text, refresh=False)

    def hide(self):
        if self._bar is not None:
            self._bar.close()
            self._bar = None
