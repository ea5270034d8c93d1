import logging
import os

CHART_OWNERS_LOG_LEVEL = "CHART_OWNERS_LOG_LEVEL"

LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def log_fmt(dry_run: bool | None = None) -> str:
    log_fmt = (
        "[%(asctime)s] [%(levelname)s] [DRY-RUN] "
        if dry_run
        else "[%(asctime)s] [%(levelname)s] "
    )

    log_fmt += "[%(filename)s:%(funcName)s:%(lineno)d] - %(message)s"

    return log_fmt


def init_env(
    log_level: str | None = None,
    dry_run: bool | None = None,
) -> None:
    # store the log level in the environment so child processes inherit it
    if log_level:
        os.environ[CHART_OWNERS_LOG_LEVEL] = log_level

    logging.basicConfig(
        format=log_fmt(dry_run=dry_run),
        datefmt=LOG_DATEFMT,
        level=getattr(logging, os.environ.get(CHART_OWNERS_LOG_LEVEL, "INFO")),
    )
