from typing import Optional

import httpx

from mintme.errors import (
    PROGRAM_ERRORS,
    ConfirmationTimeoutError,
    DescriptorLoadError,
    InputValidationError,
    InsufficientBalanceError,
    NetworkSubmissionError,
    RemoteProgramError,
)
from mintme.schemas import Idl, OperationResult, OperationState
from mintme.utils import LogFn

# Errors caught at the operation boundary and reported as a failed result.
SUBMISSION_ERRORS = (
    DescriptorLoadError,
    NetworkSubmissionError,
    ConfirmationTimeoutError,
    RemoteProgramError,
    httpx.HTTPError,
)


def name_program_error(code: Optional[int], idl: Optional[Idl] = None) -> tuple:
    """Returns (name, message) for a custom program error code, or (None, None)."""
    if code is None:
        return None, None
    if idl is not None:
        err = idl.get_error(code)
        if err is not None:
            return err.name, err.msg
    return PROGRAM_ERRORS.get(code, (None, None))


def failure_result(error: Exception, log: LogFn, action: str, idl: Optional[Idl] = None) -> OperationResult:
    """Logs *error* and wraps it in a failed OperationResult."""
    message = str(error)
    error_code = None
    error_name = None
    details = {"type": type(error).__name__}

    if isinstance(error, RemoteProgramError):
        error_code = error.code
        error_name, description = name_program_error(error.code, idl)
        error_name = error_name or error.name
        if error_name:
            message = f"{error_name}: {description or message}"
        details["logs"] = error.logs
    elif isinstance(error, InputValidationError):
        details["errors"] = error.errors
        details["max_supply"] = error.max_supply
    elif isinstance(error, InsufficientBalanceError):
        details["required"] = error.required
        details["balance"] = error.balance

    log(f"Error {action}: {message}")
    return OperationResult(
        success=False,
        state=OperationState.failed,
        error=message,
        error_code=error_code,
        error_name=error_name,
        details=details,
    )
