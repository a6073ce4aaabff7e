"""
Shared plumbing for studiosync services.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from studiosync.core.exceptions import BaseAppException
from studiosync.core.logging import get_logger, studio_id as studio_id_var


class BaseService(ABC):
    """
    Base for services that log against a studio.

    Services never return error objects: failures are logged here and the
    caller re-raises.
    """

    def __init__(self):
        self._logger = get_logger(self.__class__.__name__)

    @contextmanager
    def studio_scope(self, studio_id: str) -> Iterator[None]:
        """
        Tag every log line emitted inside the block with the studio id.

        Example:
            with self.studio_scope(studio_id):
                await self.roster.get_student(studio_id, student_id)
        """
        token = studio_id_var.set(studio_id)
        try:
            yield
        finally:
            studio_id_var.reset(token)

    @staticmethod
    def _context(entity_ref: Optional[Any], fields: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        context: Dict[str, Any] = {"entity_ref": None if entity_ref is None else str(entity_ref)}
        if fields:
            context.update(fields)
        return context

    def _log_failure(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log a failed operation at ERROR.

        Tracebacks are attached for unexpected and retryable errors only;
        domain errors such as an unknown fee are the caller's input problem.
        """
        context = self._context(entity_ref, fields)
        context["operation"] = operation
        context["exception_type"] = type(exception).__name__

        expected = isinstance(exception, BaseAppException)
        if expected:
            context["error_code"] = exception.error_code.value
            context["retryable"] = exception.retryable

        self._logger.error(
            f"{operation} failed: {exception}",
            exc_info=not expected or exception.retryable,
            extra=context,
        )

    def _log_operation(
        self,
        operation: str,
        entity_ref: Optional[Any] = None,
        fields: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._logger.info(f"{operation} completed", extra=self._context(entity_ref, fields))
