# app/core/errors.py
from typing import Optional

from fuel_backend.app.core.constants import TOTAL_PERCENT


class CalculationError(ValueError):
    """
    Base class for input validation failures.
    `message` is shown to the user as-is.
    """
    kind = "calculation_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldError(CalculationError):
    kind = "missing_field"

    def __init__(self, label: str):
        super().__init__(f'поле "{label}" не заповнене')
        self.label = label


class InvalidNumberError(CalculationError):
    kind = "invalid_number"

    def __init__(self, label: str):
        super().__init__(f'поле "{label}" містить невірне значення')
        self.label = label


class SumMismatchError(CalculationError):
    kind = "sum_mismatch"

    def __init__(self, total: Optional[float] = None):
        super().__init__(f"сума введених значень повинна дорівнювати {TOTAL_PERCENT:g}")
        self.total = total
