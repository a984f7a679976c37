"""
Logging setup for the flashcache resource agent.
"""
import logging
import sys

from ..models import AgentSettings

logger = logging.getLogger("flashcache-agent")
_DEF_HANDLER_SET = False


def setup_logging(settings: AgentSettings) -> None:
    """Apply the configured level and attach a stderr handler once.
    stdout is left alone: meta-data and usage text go there.
    """
    global _DEF_HANDLER_SET
    try:
        logger.setLevel(getattr(logging, settings.log_level))
    except (AttributeError, TypeError):
        logger.setLevel(logging.INFO)
    if _DEF_HANDLER_SET:
        return
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    _DEF_HANDLER_SET = True
