"""Core constants for pathbackup.

This module defines constants used throughout the package:
- Backup naming defaults
- Copy tuning values
- Environment variable names
"""

# ============================================================================
# Backup Naming
# ============================================================================

#: strftime format for the default backup suffix (e.g. ".backup.20250107150125")
DEFAULT_SUFFIX_FORMAT: str = ".backup.%Y%m%d%H%M%S"

# ============================================================================
# Copy Tuning
# ============================================================================

#: Buffer size used when streaming file content
COPY_CHUNK_SIZE: int = 1024 * 1024

#: Default per-directory worker bound; 0 means one worker per sibling file
DEFAULT_COPY_CONCURRENCY: int = 0

#: Mode bits carried from source to copy; setuid, setgid and sticky are dropped
PERMISSION_BITS: int = 0o777

# ============================================================================
# Environment
# ============================================================================

#: Overrides the default copy concurrency for LocalBackuper
ENV_COPY_CONCURRENCY: str = "PATHBACKUP_COPY_CONCURRENCY"

#: Enables debug output when set to 1/true/yes
ENV_DEBUG: str = "PATHBACKUP_DEBUG"
