from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

LOG = logging.getLogger(__name__)


class ArtifactRecorder:
    """
    Saves per-iteration screenshots under ``output_dir``.

    Capturing is a no-op, not an error, when screenshots are disabled or when
    the run has no output destination.
    """

    def __init__(self, output_dir: str | Path | None, enabled: bool = False):
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.enabled = enabled
        self.captured: list[Path] = []

    @property
    def active(self) -> bool:
        return self.enabled and self.output_dir is not None

    async def capture(self, page: Any, name: str) -> Path | None:
        if not self.active:
            return None

        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"{name}.png"
        await page.screenshot(path=str(path))
        self.captured.append(path)
        LOG.debug("Saved screenshot %s", path)
        return path
