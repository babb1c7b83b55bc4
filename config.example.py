# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
The access token is never configured here: it is entered at runtime with /login.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "MEMO_APP_NAME": "App display name (default: memoboard).",
    "MEMO_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "MEMO_DATA_DIR": "Local data directory for memoboard.log (default: .local/memoboard).",
    # Connectors
    "MEMO_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # Backend API
    "MEMO_BASE_API_URL": "Memo backend base URL (default: http://localhost:8000).",
    "MEMO_ORIGIN_URL": "Value of the origin-url header (default: <app_name>://console).",
    "MEMO_REQUEST_TIMEOUT_SECONDS": "Per-attempt HTTP timeout in seconds (default: 10).",
    # Retry policy
    "MEMO_RETRY_TIMES": "Extra attempts after a 5xx / transport failure (default: 0, no retries).",
    "MEMO_RETRY_DELAY_SECONDS": (
        "Constant delay between retries, 0 allowed. Unset => exponential backoff (~9s, ~27s, ...)."
    ),
}
