"""Process-wide logging setup.

Modules import ``logging`` from here so the handler is installed before the
first logger is used. Output goes to stderr because stdout carries the MCP
stdio transport.
"""

import logging
import os
import sys

LOG_LEVEL_ENV_VAR = "VAULT_INDEX_LOG_LEVEL"

logging.basicConfig(
    stream=sys.stderr,
    level=os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

__all__ = ["logging"]
