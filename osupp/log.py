import inspect
import logging
from sys import stdout
from typing import TYPE_CHECKING

from osupp.config import settings

import loguru

if TYPE_CHECKING:
    from loguru import Logger

logger: "Logger" = loguru.logger

# bound extra key -> colour of the name column, later keys win
_NAME_COLOURS = (
    ("uvicorn", "fg #228B22"),
    ("service", "blue"),
    ("calculator", "magenta"),
    ("system", "red"),
)


class InterceptHandler(logging.Handler):
    """Route standard library records (uvicorn, fastapi, redis) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # skip the logging module's own frames so the record points at the caller
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        _logger = uvicorn_logger() if record.name.startswith("uvicorn") else logger
        _logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def calculator_logger(name: str) -> "Logger":
    return logger.bind(calculator=name)


def service_logger(name: str) -> "Logger":
    return logger.bind(service=name)


def system_logger(name: str) -> "Logger":
    return logger.bind(system=name)


def uvicorn_logger() -> "Logger":
    return logger.bind(uvicorn="Uvicorn")


def log(name: str) -> "Logger":
    return logger.bind(real_name=name)


def dynamic_format(record):
    name = ""
    for key, colour in _NAME_COLOURS:
        if value := record["extra"].get(key):
            name = f"<{colour}>{value}</{colour}>"

    if name == "":
        real_name = record["extra"].get("real_name", "") or record["name"]
        name = f"<fg #FFC1C1>{real_name}</fg #FFC1C1>"

    format = f"<green>{{time:YYYY-MM-DD HH:mm:ss}}</green> [<level>{{level}}</level>] | {name} | {{message}}\n"
    if record["exception"]:
        format += "{exception}\n"
    return format


logger.remove()
logger.add(
    stdout,
    colorize=True,
    format=dynamic_format,
    level=settings.log_level,
    diagnose=settings.debug,
)
if settings.log_to_file:
    logger.add(
        "logs/{time:YYYY-MM-DD}.log",
        rotation="00:00",
        retention="30 days",
        colorize=False,
        format=dynamic_format,
        level=settings.log_level,
        diagnose=settings.debug,
        encoding="utf8",
    )
logging.basicConfig(handlers=[InterceptHandler()], level=settings.log_level, force=True)

for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"):
    _std_logger = logging.getLogger(logger_name)
    _std_logger.handlers = [InterceptHandler()]
    _std_logger.propagate = False

logging.getLogger("redis").setLevel("WARNING")
