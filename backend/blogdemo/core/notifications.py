"""
Notification for keys dropped by ``Parameters.permit``
"""
from typing import List, Optional

from blogdemo.core.config import get_settings
from blogdemo.core.errors import UnpermittedParameters
from blogdemo.core.logging_config import LoggingConfig
from blogdemo.core.metrics import unpermitted_parameters_total

UNPERMITTED_PARAMETERS_EVENT = "unpermitted_parameters"

logger = LoggingConfig.get_logger("blogdemo.parameters")


def instrument_unpermitted_parameters(keys: List[str], action: Optional[str] = None) -> None:
    """
    Report keys dropped by a single ``permit`` call.

    ``action`` defaults to the ``action_on_unpermitted_parameters`` setting:
    ``log`` writes a structured record and counts each key, ``raise`` raises
    ``UnpermittedParameters``, ``ignore`` does nothing.
    """
    if action is None:
        action = get_settings().action_on_unpermitted_parameters

    if action == "ignore":
        return
    if action == "raise":
        raise UnpermittedParameters(keys)

    unpermitted_parameters_total.inc(len(keys))

    logger.info(
        "Unpermitted parameters: %s",
        ", ".join(keys),
        extra={"event": UNPERMITTED_PARAMETERS_EVENT, "keys": list(keys)}
    )
