"""
Shared failure handling for actions.
"""
import logging
from contextlib import contextmanager

from sqlmodel import Session

from flashdeck.core.database import is_timeout_error
from flashdeck.core.exceptions import (
    ActionFailedError,
    FlashdeckException,
    OperationTimeoutError,
)

logger = logging.getLogger(__name__)


@contextmanager
def action_boundary(session: Session, failure_message: str):
    """
    Convert unexpected failures inside an action into one generic message.

    Application exceptions pass through untouched. Anything else is logged
    with its traceback, the session is rolled back, and the caller only sees
    failure_message (or a timeout message when the datastore timed out).
    """
    try:
        yield
    except FlashdeckException:
        raise
    except Exception as e:
        session.rollback()
        if is_timeout_error(e):
            logger.error(f"{failure_message}: datastore timed out", exc_info=e)
            raise OperationTimeoutError(f"{failure_message}: the request timed out") from e
        logger.error(f"{failure_message}: {type(e).__name__}: {str(e)}", exc_info=e)
        raise ActionFailedError(failure_message) from e
