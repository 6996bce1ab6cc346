"""Logging configuration"""
import logging
import sys

_HANDLER_NAME = "dm-dashboard-console"


def setup_logging(log_level: str = "INFO"):
    """Configure application logging"""

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # create_app() may run more than once per process (tests, reload)
    if any(h.get_name() == _HANDLER_NAME for h in root_logger.handlers):
        return

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Gateway and LLM traffic goes through httpx; its request lines are noise
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.info(f"Logging configured with level: {log_level}")
