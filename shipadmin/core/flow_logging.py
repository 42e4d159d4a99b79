import logging

from shipadmin.core.config import settings


def _category_enabled(category: str | None) -> bool:
    if not settings.FLOW_LOGS_ENABLED:
        return False
    if category == "shipping_charge":
        return settings.FLOW_LOGS_SHIPPING_CHARGE_ENABLED
    if category == "shipping_settings":
        return settings.FLOW_LOGS_SHIPPING_SETTINGS_ENABLED
    return True


def flow_info(
    logger: logging.Logger,
    msg: str,
    *args,
    category: str | None = None,
    **kwargs,
) -> None:
    if _category_enabled(category):
        logger.info(msg, *args, **kwargs)
