from __future__ import annotations

from fastapi import HTTPException

from guardops.core.validation import (
    ConfigurationConflict,
    ConfigurationMissing,
    DomainError,
    InvalidConfiguration,
    InvalidPeriod,
    PayrollStateError,
    WeightSumMismatch,
)

STATUS_CODES: list[tuple[type[DomainError], int]] = [
    (ConfigurationMissing, 404),
    (InvalidPeriod, 400),
    (InvalidConfiguration, 400),
    (WeightSumMismatch, 422),
    (ConfigurationConflict, 409),
    (PayrollStateError, 409),
]


def http_error(exc: DomainError) -> HTTPException:
    for error_type, status_code in STATUS_CODES:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
