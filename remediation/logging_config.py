# remediation/logging_config.py
import logging


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Request lines from uvicorn would count as success logging.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
