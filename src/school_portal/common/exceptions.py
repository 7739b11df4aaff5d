"""
This file contains custom, application-specific exceptions.

None of them is fatal: each one only blocks the transition that raised it.
"""

class ChargeValidationError(Exception):
    """Raised when a charge draft is incomplete or its magnitude is unusable."""
    pass

class LoadFailureError(Exception):
    """Raised when a read from the school backend fails."""
    pass

class NoStudentsSelectedError(Exception):
    """Raised when a compiled assignment batch would be empty."""
    def __init__(self, message: str = "No students selected"):
        super().__init__(message)

class SubmissionFailureError(Exception):
    """Raised when the school backend rejects or fails a bulk fee assignment."""
    pass

class UnauthorizedRoleError(Exception):
    """Raised when a user's role does not permit them to perform an action."""
    pass

class WorkflowStateError(Exception):
    """Raised when an assignment workflow command is issued in the wrong phase."""
    pass

class RequestInProgressError(Exception):
    """Raised when a second compute/submit is issued while one is still outstanding."""
    def __init__(self, message: str = "A request is already in progress. Please wait."):
        super().__init__(message)
