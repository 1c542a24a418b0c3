# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real credentials. The signed-in user's token is stored by the app itself
under TASKDECK_CREDENTIALS_PATH (gitignored, chmod 600).
"""

ENV_VARS = {
    # App / logging
    "TASKDECK_APP_NAME": "App display name (default: taskdeck).",
    "TASKDECK_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    # Remote API
    "TASKDECK_API_URL": "Base URL of the to-do API (default: http://localhost:8001).",
    "NEXT_PUBLIC_API_URL": "Fallback for TASKDECK_API_URL, shared with the web frontend's .env.",
    "TASKDECK_REQUEST_TIMEOUT_SECONDS": "Per-request read timeout (default: 10).",
    # Local data
    "TASKDECK_DATA_DIR": "Directory for logs and credentials (default: .local/taskdeck).",
    "TASKDECK_CREDENTIALS_PATH": "Persisted user/token file (default: <data_dir>/credentials.json).",
    # Console
    "TASKDECK_CONFIRM_BULK_DELETE": "Ask before /bulk-rm (true/false, default: true).",
}
