from __future__ import annotations
import logging
import re


REDACT_PATTERNS = [
    re.compile(r"(AIza[0-9A-Za-z_\-]{20,})"),  # Google API keys
    re.compile(r"(?<=[?&]key=)[^&\s\"']+"),  # keys passed as query params
]


def redact(value: str) -> str:
    redacted = value
    for pat in REDACT_PATTERNS:
        redacted = pat.sub("***", redacted)
    return redacted


class RedactingFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        # Render args first so secrets passed as %s parameters are covered too
        record.msg = redact(record.getMessage())
        record.args = None
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            record.exc_text = redact(record.exc_text)
        return super().format(record)


def setup_logging(level: int | str = logging.INFO) -> None:
    logger = logging.getLogger()
    logger.setLevel(level)
    # Clear existing handlers in reload scenarios
    logger.handlers.clear()

    handler = logging.StreamHandler()
    formatter = RedactingFormatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Reduce noisy loggers if needed
    logging.getLogger("uvicorn.error").setLevel(level)
    logging.getLogger("uvicorn.access").setLevel(level)
    logging.getLogger("httpx").setLevel(logging.WARNING)
