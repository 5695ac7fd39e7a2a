# observability.py
import json
import logging
import logging.config
from datetime import datetime, timezone

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Fields passed through ``extra=`` by the request logger, the error handlers
# and the bootstrap loop.
REQUEST_FIELDS = ("method", "path", "error_code", "attempt")


class JsonLineFormatter(logging.Formatter):
    """One JSON object per line, for log collectors."""

    def format(self, record: logging.LogRecord) -> str:
        entry = dict(
            ts=datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            level=record.levelname.lower(),
            logger=record.name,
            msg=record.getMessage(),
        )
        entry.update(
            (name, getattr(record, name))
            for name in REQUEST_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "text") -> None:
    formatter = {"()": JsonLineFormatter} if fmt == "json" else {"format": TEXT_FORMAT}
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
        },
        "root": {"level": level.upper(), "handlers": ["console"]},
    })
