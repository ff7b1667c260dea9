import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(corr_id)s %(message)s"


class CorrIdFilter(logging.Filter):
    # records logged outside a request carry no correlation id
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "corr_id"):
            record.corr_id = "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(level.upper())
    for h in root.handlers:
        if not any(isinstance(f, CorrIdFilter) for f in h.filters):
            h.addFilter(CorrIdFilter())


def bind(logger: logging.Logger, corr_id: int | str) -> logging.LoggerAdapter:
    return logging.LoggerAdapter(logger, {"corr_id": corr_id})
