import uuid
from typing import Optional


def create_error_response(
    detail: str,
    criticality: str = "critical",
    recovery_suggestion: Optional[str] = None,
    **kwargs
):
    """
    Create a standardized error response following the common error format

    Args:
        detail: The main error message
        criticality: Indicates if the process was stopped (critical, non-critical, unknown)
        recovery_suggestion: Optional human-readable suggestion for resolving the error
        kwargs: Any additional fields to include in the error

    Returns:
        Dict with error information in the common error format
    """
    error = {"criticality": criticality, "id": str(uuid.uuid4()), "detail": detail}

    if recovery_suggestion:
        error["recoverySuggestion"] = recovery_suggestion

    for key, value in kwargs.items():
        if key not in error:
            error[key] = value

    return error
