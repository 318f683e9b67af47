"""Constants for fhandle."""

# End-of-stream sentinel returned by get_char (matches C's EOF)
EOF = -1

# Exit status for unrecoverable configuration errors (sysexits EX_SOFTWARE)
FATAL_EXIT_CODE = 70

# Environment
ENV_PREFIX = "FHANDLE_"
CONFIG_ENV_VAR = "FHANDLE_CONFIG"

# CLI defaults
DEFAULT_LINE_LENGTH = 256
DEFAULT_DUMP_WIDTH = 16
DEFAULT_MAX_DUMP_SIZE = 64 * 1024  # 64KB

# Chunk size used when copying between handles
COPY_CHUNK_SIZE = 64 * 1024  # 64KB
