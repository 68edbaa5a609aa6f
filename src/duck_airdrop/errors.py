"""Exception taxonomy for the airdrop handler.

Two families are distinguished:

- :class:`ClientInputError`: the request itself is unacceptable (wrong
  method, missing or malformed address, duplicate claim).  Surfaced as a 4xx
  response with a short message and no internal detail.
- :class:`DownstreamError`: the ledger client failed while the transfer was
  being built, signed, submitted or confirmed.  Surfaced as a 500 response
  with the underlying message attached for operator diagnosis.
"""

from __future__ import annotations


class ClientInputError(ValueError):
    """Raised when a claim request is rejected before any ledger call."""

    status_code: int = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MethodNotAllowedError(ClientInputError):
    """Raised for any HTTP method other than ``POST`` and ``OPTIONS``."""

    status_code = 405

    def __init__(self, message: str = "Method not allowed") -> None:
        super().__init__(message)


class DownstreamError(RuntimeError):
    """Raised when the ledger client fails during transfer assembly or submission.

    The original exception is chained as ``__cause__``; :attr:`details`
    carries its message for the response body.
    """

    def __init__(self, details: str) -> None:
        super().__init__(details)
        self.details = details
