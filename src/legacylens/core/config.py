r"""Default values shared by the retry executor and the analysis
service."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BASE_DELAY_MS",
    "DEFAULT_JITTER_MS",
    "DEFAULT_MAX_CHARS",
    "DEFAULT_MAX_DELAY_MS",
    "DEFAULT_MAX_PAYLOAD_BYTES",
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT_MS",
    "RETRIABLE_TRANSPORT_CODES",
    "RETRY_STATUS_CODES",
]

# Maximum number of retries after the first attempt
# Total attempts = retries + 1
DEFAULT_RETRIES = 3

# Initial backoff unit in milliseconds
# Delay = base_delay_ms * (2 ** attempt) + jitter
# With 500: 1st retry waits ~500ms, 2nd ~1000ms, 3rd ~2000ms
DEFAULT_BASE_DELAY_MS = 500

# Upper bound on any single backoff delay in milliseconds
DEFAULT_MAX_DELAY_MS = 8000

# Deadline of a single attempt in milliseconds
# Tuned for an LLM-backed HTTP call, which can take a while to answer
DEFAULT_TIMEOUT_MS = 30_000

# Jitter is drawn uniformly from [0, DEFAULT_JITTER_MS)
DEFAULT_JITTER_MS = 200

# HTTP status codes that should trigger automatic retry
# 429: Too Many Requests - Rate limiting
# 500-599: Server errors
RETRY_STATUS_CODES = frozenset({429, *range(500, 600)})

# Low-level transport error codes that should trigger automatic retry
RETRIABLE_TRANSPORT_CODES = frozenset({"ETIMEDOUT", "ECONNRESET", "ENETUNREACH", "EAI_AGAIN"})

# Total UTF-8 size accepted for the submitted files
DEFAULT_MAX_PAYLOAD_BYTES = 5 * 1024 * 1024

# Each prompt section is truncated to this many characters
DEFAULT_MAX_CHARS = 200_000
