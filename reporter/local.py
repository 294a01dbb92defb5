import logging
import socket

import structlog

from settings import SETTINGS

APPLICATION = f"{SETTINGS.APPLICATION_NAME}-{SETTINGS.APPLICATION_VERSION}"


class ContextFilter(logging.Filter):
    """
    Context filter for basic formatter.
    """

    def filter(self, record):
        record.hostname = socket.gethostname()
        record.application = APPLICATION
        return True


def _add_hostname_and_application(logger, method_name, event_dict):
    """
    Adds additional info to event_dict.

    logger and method_name arguments not used intentionally, because
    all structlog's processors should have same signature
    """
    event_dict["hostname"] = socket.gethostname()
    event_dict["application"] = APPLICATION
    return event_dict


_JSON_FORMATTER = structlog.stdlib.ProcessorFormatter(
    processor=structlog.processors.JSONRenderer(),
    foreign_pre_chain=[
        _add_hostname_and_application,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ],
)

_BASIC_FORMATTER = logging.Formatter(
    "%(asctime)s [%(application)s] [%(threadName)s] [%(name)s] %(levelname)s: %(message)s"
)


def _build_handler(handler, json_formatter):
    handler.setFormatter(_JSON_FORMATTER if json_formatter else _BASIC_FORMATTER)
    # set on the handler, so records propagated from child loggers
    # (concerto.webservice etc.) get the context too
    if not json_formatter:
        handler.addFilter(ContextFilter())
    return handler


def get_logger(
    module_name: str,
    log_file: str = None,
    stream_logger: bool = True,
    debug: bool = False,
    json_formatter: bool = False,
) -> logging.Logger:
    """
    Helper method, that allows to setup logger instance with arbitrary combination of logging
    handlers.
    Also, allows to format all logs in json format. For this, we use `ProcessorFormatter` from
    structlog package.

    :param module_name: name of the logger to configure, child loggers propagate to it
    :param log_file: path to file, enables logging to file
    :param stream_logger: enables logging to standard error
    :param debug: enables debug logging level
    :param json_formatter: formats logs in json
    """
    logger = logging.getLogger(module_name)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.handlers = []

    if stream_logger:
        logger.addHandler(_build_handler(logging.StreamHandler(), json_formatter))

    if log_file:
        logger.addHandler(
            _build_handler(logging.FileHandler(log_file), json_formatter)
        )

    return logger
