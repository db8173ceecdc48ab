"""Structured logging setup."""
import json
import logging
import re
import sys

_SHARE_PATH_RE = re.compile(r"/share/[^\s/?\"]+")


class JsonFormatter(logging.Formatter):
    def format(self, record):  # pragma: no cover
        base = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base)


class ShareTokenFilter(logging.Filter):
    """Mask share tokens in request paths, e.g. in server access logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, tuple):
            record.args = tuple(
                redact_share_path(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        if isinstance(record.msg, str):
            record.msg = redact_share_path(record.msg)
        return True


def redact_share_path(text: str) -> str:
    return _SHARE_PATH_RE.sub("/share/<token>", text)


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    # uvicorn logs the full request path of every request
    access_logger = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, ShareTokenFilter) for f in access_logger.filters):
        access_logger.addFilter(ShareTokenFilter())

    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(level)
    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root.addHandler(handler)
