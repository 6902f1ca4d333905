"""
logging_config.py — one-call logging setup for scripts and host applications.

The engine modules only ever call logging.getLogger(__name__); configuring
handlers is left to whoever embeds the engine.
"""
import logging
from typing import Optional

from taxcore.config import Settings, settings as default_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s — %(message)s"


def configure_logging(config: Optional[Settings] = None) -> None:
    """Configure the root logger from settings (DEBUG when settings.debug is set)."""
    config = config or default_settings
    logging.basicConfig(
        level=getattr(logging, config.effective_log_level, logging.INFO),
        format=LOG_FORMAT,
    )
