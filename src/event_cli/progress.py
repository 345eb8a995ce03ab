"""Terminal progress bar for event collection."""
from __future__ import annotations

from typing import Optional

from colorama import Fore, Style
from tqdm import tqdm


class ProgressBar:
    """Pipeline progress callback backed by tqdm."""

    def __init__(self, disable: Optional[bool] = None):
        # disable=None lets tqdm turn itself off on a non-TTY
        self.disable = disable
        self._bar: Optional[tqdm] = None

    def __call__(self, step: int, total: int) -> None:
        if self._bar is None:
            self._bar = tqdm(
                total=total,
                desc=f"{Fore.GREEN}Progress{Style.RESET_ALL}",
                unit="event",
                bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}]",
                colour="green",
                disable=self.disable,
            )
        self._bar.update(step - self._bar.n)
        if step >= total:
            self.close()

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None
