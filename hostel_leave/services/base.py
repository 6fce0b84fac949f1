import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from hostel_leave.core.exceptions import ConflictError, InternalError


class BaseService:
    """
    Request-scoped service holding the caller's session.
    Services own commit/rollback; routers never commit.
    """

    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._logger = logging.getLogger(self.__class__.__module__)

    def now(self) -> datetime:
        return self._clock()

    def log_info(self, message: str, **extra):
        self._logger.info(message, extra=extra)

    def log_warning(self, message: str, **extra):
        self._logger.warning(message, extra=extra)

    def commit(self, failure_message: str = "Storage operation failed"):
        """
        Commit the unit of work. Lost optimistic-lock races become ConflictError,
        any other storage failure becomes InternalError; both roll back first.
        """
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            self.log_warning("Concurrent modification detected, write discarded")
            raise ConflictError("Leave was modified concurrently, please retry")
        except SQLAlchemyError as e:
            self.db.rollback()
            self._logger.error(f"{failure_message}: {e}", exc_info=True)
            raise InternalError(failure_message) from e
