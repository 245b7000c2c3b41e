# Author      : Tyson Limato
# Date        : 2025-7-2
# File Name   : errors.py


class ReductionError(Exception):
    """
    Base class for every fatal error raised by the range reduction.

    Attributes:
    -----------
    exit_code : int
        Process exit code used when the error terminates the run
        (passed to MPI Abort when it happens after the group is up).
    """
    exit_code = 1

    def __init__(self, message: str, exit_code: int = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(ReductionError):
    """Bad or overflowing command line input. Raised before any work is sent."""
    exit_code = 2


class TransportAllocationError(ReductionError):
    """A message buffer could not be sized or allocated, or is too large to send."""
    exit_code = 7


class MalformedResultError(ReductionError):
    """A peer's encoded value could not be decoded."""
    exit_code = 2


class VerificationMismatch(UserWarning):
    """Issued (never raised) when the reduction disagrees with the check value."""
