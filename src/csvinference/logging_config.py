"""
Logging Configuration
=====================
One call sets the verbosity of both log streams this app produces: the
Python 'csvinference' loggers and onnxruntime's native logger, which writes
to stderr on its own and ignores the logging module.
"""
import logging
import sys
from typing import Optional

import onnxruntime as ort

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# onnxruntime severities: 0=VERBOSE, 1=INFO, 2=WARNING, 3=ERROR, 4=FATAL
_ORT_SEVERITY = {
    logging.DEBUG: 1,
    logging.INFO: 2,
    logging.WARNING: 2,
    logging.ERROR: 3,
    logging.CRITICAL: 4,
}


def ort_severity_for(level: int) -> int:
    """
    Maps a logging level to onnxruntime's severity scale.

    INFO maps to WARNING because onnxruntime's INFO output lists every graph
    transform and would drown the app's own messages.
    """
    for threshold in sorted(_ORT_SEVERITY, reverse=True):
        if level >= threshold:
            return _ORT_SEVERITY[threshold]
    return 0


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the 'csvinference' logger and onnxruntime's default severity.

    Args:
        level: Logging level (e.g. logging.DEBUG shows one line per CSV row)
        log_file: Optional path that also receives the app's log lines.
    """
    logger = logging.getLogger("csvinference")
    logger.setLevel(level)
    for old in logger.handlers:
        old.close()
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    ort.set_default_logger_severity(ort_severity_for(level))
    logger.info(f"Logging initialized (onnxruntime severity {ort_severity_for(level)}).")
