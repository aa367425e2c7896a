# signup/core/logging_config.py
"""Root logger setup.

``setup_logging`` attaches one console handler to the root logger the first
time it runs; later calls only adjust the level. Component loggers are named
``signup.registry``, ``signup.ledger`` and ``signup.api``.
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)

    if root.handlers:
        # already configured (uvicorn, pytest or a previous create_app call)
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
