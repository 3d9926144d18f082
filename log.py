import logging
import sys
from middleware import RequestIDMiddleware


class ContextualFilter(logging.Filter):
    """A logging filter that injects the request ID from ContextVar."""
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = RequestIDMiddleware.request_id_context().get()
        return True


def setup_logging(log_level: str = "INFO", log_filename: str | None = "abtest_service.log"):
    log_filter = ContextualFilter()

    # The format must include the custom 'request_id' attribute
    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - [%(request_id)s] - %(name)s - %(message)s'
    )

    handlers: list[logging.Handler] = [
        # console (standard output)
        logging.StreamHandler(sys.stdout),
    ]
    if log_filename:
        handlers.append(logging.FileHandler(log_filename, mode='a'))

    for handler in handlers:
        handler.addFilter(log_filter)
        handler.setFormatter(formatter)

    # force=True so a second Config() (tests, reloads) replaces the handlers instead of stacking them
    logging.basicConfig(level=logging.getLevelName(log_level.upper()), handlers=handlers, force=True)
