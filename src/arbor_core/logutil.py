import logging
import re
from typing import Iterable


_HEX_DIGEST = re.compile(r"\b([0-9a-fA-F]{12})[0-9a-fA-F]{52}\b")


class DigestAbbreviatingFilter(logging.Filter):
    """Shorten full hex SHA-256 digests in log records to a 12-char prefix."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = record.getMessage()
            short = _HEX_DIGEST.sub(r"\1…", msg)
            if short != msg:
                record.msg = short
                record.args = None
        except Exception:
            pass
        return True


def setup_logging(
    level=logging.INFO, loggers: Iterable[str] = ("arbor_core", "arbor_cli")
) -> None:
    logging.basicConfig(level=level)
    f = DigestAbbreviatingFilter()
    # logger filters are not inherited by child loggers; filter at the handlers
    for h in logging.getLogger().handlers:
        if not any(isinstance(x, DigestAbbreviatingFilter) for x in h.filters):
            h.addFilter(f)
    for name in loggers:
        logging.getLogger(name).setLevel(level)
