"""Engine error taxonomy.

Messages are diagnostic strings for logs, not end-user copy.
Business conditions (overfunded deals, unknown FICO, missing book value)
are flags on the results and never raised.
"""


class DealEngineError(Exception):
    """Base for errors raised by the deal engine."""


class MalformedDealInputsError(DealEngineError, ValueError):
    """Non-finite or structurally invalid numeric input reached the engine."""


class InvalidTermError(DealEngineError, ValueError):
    """Loan term is not a positive integer number of months."""
