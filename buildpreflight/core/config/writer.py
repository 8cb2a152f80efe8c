"""
Resolved configuration writer — hand the amended config to later stages.

Written as JSON with an atomic write (temp file, then rename) so a
reader never sees a half-written file.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from buildpreflight.core.models.config import BuildConfiguration

logger = logging.getLogger(__name__)


def save_config(config: BuildConfiguration, path: Path) -> None:
    """Save the configuration to a JSON file (atomic write).

    Args:
        config: The configuration to save.
        path: Target path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json")
    content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    _fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=".preflight_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with open(_fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
        logger.debug("Resolved config saved to %s", path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def load_saved_config(path: Path) -> BuildConfiguration:
    """Read a configuration written by ``save_config``."""
    data = json.loads(path.read_text(encoding="utf-8"))
    return BuildConfiguration.model_validate(data)
