"""Exception hierarchy raised by the OSF client.

Every failure surfaced by the library derives from :class:`OSFError` so
callers can catch the whole family at once, or pick the specific kind:

* :class:`TransportError` -- the request never produced a response
  (DNS, TLS, connection reset, timeout, cancellation).
* :class:`DecodeError` -- a response arrived but its body is not the
  JSON:API document we expected.
* :class:`ServiceError` -- the service answered with a well-formed
  ``errors`` array.
* :class:`WorkflowStageError` -- one of the above happened inside the
  preprint creation workflow, tagged with the stage and the partial
  identifiers produced before it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from osfapi.schemas.jsonapi import ErrorItem


class OSFError(Exception):
    """Base class for all client errors."""


class TransportError(OSFError):
    """The HTTP exchange itself failed.

    The underlying ``httpx`` exception, when there is one, is chained as
    ``__cause__``.
    """

    def __init__(self, message: str, *, method: str | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.method = method
        self.url = url


class CancelledError(TransportError):
    """The caller cancelled the operation or its deadline passed."""


class DecodeError(OSFError):
    """The response body is malformed or does not match the expected shape."""


class ServiceError(OSFError):
    """The service returned a non-empty JSON:API ``errors`` array.

    Args:
        errors: The structured error items, in wire order.
        status_code: HTTP status of the response carrying them.
    """

    def __init__(self, errors: list[ErrorItem], status_code: int | None = None) -> None:
        self.errors = list(errors)
        self.status_code = status_code
        super().__init__(self._display())

    @property
    def pointers(self) -> list[tuple[str | None, str]]:
        """Return ``(pointer, detail)`` pairs for each error item."""
        return [(item.pointer, item.detail) for item in self.errors]

    def _display(self) -> str:
        parts = []
        for pointer, detail in self.pointers:
            parts.append(f"{pointer}: {detail}" if pointer else detail)
        return "; ".join(parts) or "service returned an empty error list"


class WorkflowStageError(OSFError):
    """A preprint creation workflow stopped at ``stage``.

    Args:
        stage: The stage that failed (``create``, ``upload``, ``patch``
            or ``publish``).
        cause: The transport, decode, service or cancellation error raised
            by that stage.
        preprint_id: Identifier of the draft preprint, once created.
        file_id: Normalized identifier of the uploaded primary file, once
            uploaded.
    """

    def __init__(
        self,
        stage: str,
        cause: OSFError,
        preprint_id: str | None = None,
        file_id: str | None = None,
    ) -> None:
        self.stage = stage
        self.cause = cause
        self.preprint_id = preprint_id
        self.file_id = file_id
        msg = f"preprint creation failed at stage '{stage}': {cause}"
        if preprint_id:
            msg += f" (preprint {preprint_id} left in place"
            msg += f", file {file_id})" if file_id else ")"
        super().__init__(msg)

    @property
    def created(self) -> bool:
        """True when a draft preprint exists and needs manual follow-up."""
        return self.preprint_id is not None
