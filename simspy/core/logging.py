"""Logger factory for simspy components."""

import logging


def get_logger(name: str) -> logging.Logger:
    """
    Return the ``simspy.<component>`` logger.

    Records propagate to the root logger, so an application's own
    ``logging.basicConfig()`` picks them up. Until the root logger has a
    handler, the component logger only lets warnings and errors through.

    Args:
        name: Dotted logger name, e.g. ``'simspy.cache'``
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    if not logging.getLogger().handlers:
        logger.setLevel(logging.WARNING)

    return logger
