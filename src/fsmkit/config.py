"""fsmkit configuration

Settings fall into these groups:
- Logging: log level used by the demo entry point
- Metrics: toggle for the in-memory metrics facade
- Identifiers: separator used when building trigger keys
- History: transition history ring buffer size
- Queue: pending trigger queue diagnostics
"""

import os

# === Logging ===
LOG_LEVEL = os.environ.get("FSMKIT_LOG_LEVEL", "INFO")

# === Metrics ===
METRICS_ENABLED = True

# === Identifiers ===
TRIGGER_KEY_SEPARATOR = ":"  # "<state-id>:<trigger-id>"

# === History ===
HISTORY_MAX_LENGTH = int(os.environ.get("FSMKIT_HISTORY_MAX_LENGTH", "50"))

# === Queue ===
QUEUE_HIGH_WATERMARK = 32  # pending keys before a debug line is logged
