# sheet_i18n/shared/resilience.py
import structlog
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
)
from sheet_i18n.shared.config import settings

logger = structlog.get_logger()

def is_transient_io_error(exc: BaseException) -> bool:
    """
    True for IO errors worth retrying: a source file briefly locked or
    replaced by the editor that is saving it. Missing files are final.
    """
    if isinstance(exc, (FileNotFoundError, IsADirectoryError, NotADirectoryError)):
        return False
    return isinstance(exc, OSError)

def _log_retry(retry_state):
    logger.warning(
        "source_read_retry",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()),
    )

def retry_transient_read(func):
    """
    Decorator for reading a source file that may be mid-save.
    Strategy:
    - Wait: Exponential Backoff (0.1s, 0.2s, ...) up to 1s.
    - Stop: After READ_RETRY_ATTEMPTS attempts.
    - Only transient OSErrors are retried.
    """
    return retry(
        stop=stop_after_attempt(max(1, settings.READ_RETRY_ATTEMPTS)),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception(is_transient_io_error),
        before_sleep=_log_retry,
        reraise=True
    )(func)
