"""Step-level tracing for the filesystem layer.

structlog carries the backup and rollback events; this module covers the
finer steps below them (each file copied, each node removed, partial copies
that could not be discarded). Output goes to stdout with a ``[DEBUG]``
prefix and only when PATHBACKUP_DEBUG is 1, true or yes, read once at import.

    $ PATHBACKUP_DEBUG=1 python -m myapp.deploy
    [DEBUG] Copied file: site/index.html -> site.backup.20250107150125/index.html
"""

import os
import sys
from typing import Any

from pathbackup.core.constants import ENV_DEBUG

_DEBUG_ENABLED = os.environ.get(ENV_DEBUG, "").lower() in ("1", "true", "yes")


def debug(msg: Any) -> None:
    """Print a trace line when PATHBACKUP_DEBUG was enabled at import."""
    if _DEBUG_ENABLED:
        print(f"[DEBUG] {msg}", file=sys.stdout)
