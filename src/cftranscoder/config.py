"""Local configuration for cftranscoder."""

from __future__ import annotations

import os


DEFAULT_AUTHOR_BASE = "http://localhost:4502"
DEFAULT_PREFIX = "cft"
DEFAULT_PARENT_PATH = "/content/dam/cftranscoder"
DEFAULT_MODEL_ROOT = "/conf/global/settings/dam/cfm/models"
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "cftranscoder/0.1"

# Author instance serving the fragment API and the DAM assets.
CFT_AUTHOR_BASE = os.getenv("CFT_AUTHOR_BASE", DEFAULT_AUTHOR_BASE).rstrip("/")
CFT_TOKEN = os.getenv("CFT_TOKEN", "")
CFT_PREFIX = os.getenv("CFT_PREFIX", DEFAULT_PREFIX)
# Folder new fragments are created in.
CFT_PARENT_PATH = os.getenv("CFT_PARENT_PATH", DEFAULT_PARENT_PATH)
CFT_MODEL_ROOT = os.getenv("CFT_MODEL_ROOT", DEFAULT_MODEL_ROOT).rstrip("/")
CFT_FETCH_TIMEOUT_S = float(os.getenv("CFT_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
CFT_FETCH_MAX_RETRIES = int(os.getenv("CFT_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
CFT_FETCH_BACKOFF_S = float(os.getenv("CFT_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
CFT_USER_AGENT = os.getenv("CFT_USER_AGENT", DEFAULT_USER_AGENT)
CFT_LOG_LEVEL = os.getenv("CFT_LOG_LEVEL", "INFO").upper()
