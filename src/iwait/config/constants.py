"""Default option values, paths, and environment variable names."""

from __future__ import annotations

import platformdirs

APP_NAME = "iwait"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME)
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Environment variable names
ENV_CONFIG_FILE = "IWAIT_CONFIG"
ENV_TIMEOUT = "IWAIT_TIMEOUT"
ENV_INTERVAL = "IWAIT_INTERVAL"
ENV_DELAY = "IWAIT_DELAY"
ENV_STRATEGY = "IWAIT_STRATEGY"

# Scheduling defaults (milliseconds)
DEFAULT_DELAY = 0
DEFAULT_INTERVAL = 250
DEFAULT_WINDOW = 750

# Probe defaults (milliseconds)
DEFAULT_HTTP_TIMEOUT = 30_000
DEFAULT_TCP_TIMEOUT = 300
PING_REPLY_WAIT = 1
PING_PROCESS_TIMEOUT = 5.0
