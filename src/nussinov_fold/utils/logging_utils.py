import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

# Default log directory
DEFAULT_LOG_DIR = Path("var/log")

# Root logger of the package; module loggers propagate to it.
PACKAGE_LOGGER = "nussinov_fold"

# CLI verbosity count -> logging level.
VERBOSITY_LEVELS: Dict[int, int] = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}

_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_log_file_path(
        logger_name: str,
        log_dir: Optional[Path] = None,
        include_timestamp: bool = True
) -> Path:
    """
    Generates a log file path for a logger, creating the log directory if needed.

    Parameters
    ----------
    logger_name : str
        Dotted logger name (e.g. "nussinov_fold.folding"); dots become underscores.
    log_dir : Optional[Path], optional
        Target directory. Defaults to `DEFAULT_LOG_DIR`.
    include_timestamp : bool, optional
        Append a `YYYYmmdd_HHMMSS` stamp so runs do not overwrite each other.

    Returns
    -------
    Path
        Full path of the log file.
    """
    if log_dir is None:
        log_dir = DEFAULT_LOG_DIR

    log_dir.mkdir(parents=True, exist_ok=True)
    safe_name = logger_name.replace(".", "_")

    if include_timestamp:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"{safe_name}_{timestamp}.log"
    else:
        filename = f"{safe_name}.log"

    return log_dir / filename


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = False,
    console_level: Optional[int] = None,
    file_level: Optional[int] = None,
) -> logging.Logger:
    """
    Configures and returns a logger with a console handler and an optional file handler.

    Existing handlers on the logger are cleared first so repeated calls (e.g.
    one per CLI invocation in the same process) never duplicate output.
    The console handler writes to stderr so that stdout stays reserved for
    folding results.

    Parameters
    ----------
    name : str, optional
        Logger name; defaults to the package root logger.
    level : int, optional
        Base level for the logger and its handlers, by default `logging.INFO`.
    log_file : Optional[str], optional
        Explicit log file path. Overrides `enable_file_logging`.
    log_dir : Optional[Path], optional
        Directory for the generated log file when `log_file` is not given.
    enable_file_logging : bool, optional
        Create a timestamped log file under `log_dir` when `log_file` is not given.
    console_level, file_level : Optional[int], optional
        Per-handler level overrides.

    Returns
    -------
    logging.Logger
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(console_level if console_level is not None else level)
    logger.addHandler(console_handler)

    file_handler = None
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode='a')
    elif enable_file_logging:
        log_path = get_log_file_path(name, log_dir=log_dir, include_timestamp=True)
        file_handler = logging.FileHandler(log_path, mode='a')
        logger.info(f"Logging to file: {log_path}")

    if file_handler:
        file_handler.setFormatter(formatter)
        file_handler.setLevel(file_level if file_level is not None else level)
        logger.addHandler(file_handler)

    return logger


def configure_package_logging(verbose_level: int, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the package root logger from a CLI verbosity count.

    Parameters
    ----------
    verbose_level : int
        0 for WARNING, 1 for INFO, 2 or more for DEBUG.
    log_file : Optional[str]
        Explicit log file. Without one, a timestamped file under `var/log`
        is only created when verbosity is above 0.
    """
    level = VERBOSITY_LEVELS.get(min(verbose_level, 2), logging.WARNING)
    return setup_logger(
        PACKAGE_LOGGER,
        level=level,
        log_file=log_file,
        enable_file_logging=verbose_level > 0,
    )


def set_log_level(logger: logging.Logger, level: int) -> None:
    """Updates the level of a logger and all of its handlers."""
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def cleanup_old_logs(log_dir: Optional[Path] = None, days_to_keep: int = 7) -> int:
    """
    Removes `*.log` files older than `days_to_keep` days.

    Returns
    -------
    int
        Number of files removed.
    """
    if log_dir is None:
        log_dir = DEFAULT_LOG_DIR

    if not log_dir.exists():
        return 0

    cutoff_time = time.time() - (days_to_keep * 86400)
    removed = 0
    for log_file in log_dir.glob("*.log"):
        if log_file.stat().st_mtime < cutoff_time:
            log_file.unlink()
            logging.getLogger(PACKAGE_LOGGER).info(f"Removed old log: {log_file}")
            removed += 1
    return removed
