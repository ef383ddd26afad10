# app/logging.py
import logging
import re
from typing import Any, Dict

PII_RE = re.compile(r"([\w\.-]+)@([\w\.-]+)")  # naive email redaction
MAX_LOGGED_CHARS = 80


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def redact_str(s: str) -> str:
    s = PII_RE.sub("[redacted-email]", s)
    if len(s) > MAX_LOGGED_CHARS:
        s = f"{s[:MAX_LOGGED_CHARS]}...(+{len(s) - MAX_LOGGED_CHARS} chars)"
    return s


def redact_args(args: Dict[str, Any]) -> Dict[str, Any]:
    safe = dict(args)
    for k, v in list(safe.items()):
        if isinstance(v, str):
            safe[k] = redact_str(v)
    return safe


def log_operation(logger: logging.Logger, name: str, args: Dict[str, Any]):
    logger.info("op %s %s", name, redact_args(args))
