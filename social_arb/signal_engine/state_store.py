"""Engine State Store.

Optional JSON persistence of EngineState between one-shot runs. The
policy never reads or writes this itself; the runner restores state
before a cycle and saves it after.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from social_arb.signal_engine.models import EngineState

logger = logging.getLogger(__name__)


class EngineStateStore:
    """Reads and writes EngineState as a small JSON document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> EngineState:
        """Load saved state; a missing or unreadable file yields fresh state."""
        if not self.path.exists():
            return EngineState()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return EngineState.from_dict(data)
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Engine state at {self.path} unreadable, starting fresh: {e}")
            return EngineState()

    def save(self, state: EngineState) -> None:
        """Write state atomically (temp file + rename)."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(state.to_dict(), fh, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
