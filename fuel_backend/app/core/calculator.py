# app/core/calculator.py
import logging
import math
from typing import Dict, Iterable, List, Mapping, Optional

from fuel_backend.app.core.constants import (
    COEF_CARBON,
    COEF_HYDROGEN,
    COEF_MOISTURE,
    COEF_OXYGEN_SULFUR,
    INPUT_FIELDS,
    OUTPUT_FIELDS,
    RESULT_FORMAT,
    SUM_TOLERANCE,
    TOTAL_PERCENT,
)
from fuel_backend.app.core.errors import InvalidNumberError, MissingFieldError, SumMismatchError
from fuel_backend.app.models import CalculationResult, FuelComposition, MeasurementField

logger = logging.getLogger(__name__)


def blank_measurements(values: Optional[Mapping[str, str]] = None) -> List[MeasurementField]:
    """
    Build the seven input fields in display order.
    `values` echoes raw submitted text; absent keys become "".
    """
    values = values or {}
    return [
        MeasurementField(name=name, label=label, units=units, value=values.get(name, ""))
        for name, label, units in INPUT_FIELDS
    ]


def _parse_number(text: str) -> float:
    """
    Strict decimal parsing: no surrounding whitespace, no digit
    separators, and finite text must not overflow to infinity.
    """
    if text != text.strip() or "_" in text:
        raise ValueError(text)
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise ValueError(text)
    return value


def parse_measurements(fields: Iterable[MeasurementField]) -> FuelComposition:
    """
    Validate raw inputs in field order and stop at the first problem.

    Raises MissingFieldError / InvalidNumberError naming the field label,
    or SumMismatchError when the total is off by more than SUM_TOLERANCE.
    """
    parsed: Dict[str, float] = {}
    for field in fields:
        if field.value == "":
            raise MissingFieldError(field.label)
        try:
            parsed[field.name] = _parse_number(field.value)
        except ValueError:
            raise InvalidNumberError(field.label) from None

    composition = FuelComposition(**parsed)
    total = composition.total
    if abs(total - TOTAL_PERCENT) > SUM_TOLERANCE:
        raise SumMismatchError(total)
    return composition


def _divide(num: float, den: float) -> float:
    # IEEE-754 result instead of ZeroDivisionError
    try:
        return num / den
    except ZeroDivisionError:
        if num == 0 or math.isnan(num):
            return math.nan
        return math.copysign(math.inf, num) * math.copysign(1.0, den)


def compute(c: FuelComposition) -> Dict[str, float]:
    """
    Recalculate an as-received composition to dry and ash-free bases
    and estimate net calorific values (kJ/kg).
    Moisture of 100% (or moisture + ash of 100%) is not rejected: the
    affected values come out as inf/nan.
    """
    dry_base = TOTAL_PERCENT - c.wp
    combustible_base = TOTAL_PERCENT - c.wp - c.ap

    kpc = _divide(TOTAL_PERCENT, dry_base)
    kpg = _divide(TOTAL_PERCENT, combustible_base)

    qrn = (COEF_CARBON * c.cp + COEF_HYDROGEN * c.hp
           - COEF_OXYGEN_SULFUR * (c.op - c.sp) - COEF_MOISTURE * c.wp)
    # Add back the moisture evaporation term before changing basis
    q_dry_mass = (qrn + COEF_MOISTURE * c.wp) * TOTAL_PERCENT

    return {
        "kpc": kpc,
        "kpg": kpg,
        "hc": c.hp * kpc,
        "cc": c.cp * kpc,
        "sc": c.sp * kpc,
        "nc": c.np * kpc,
        "oc": c.op * kpc,
        "ac": c.ap * kpc,
        "hg": c.hp * kpg,
        "cg": c.cp * kpg,
        "sg": c.sp * kpg,
        "ng": c.np * kpg,
        "og": c.op * kpg,
        "qrn": qrn,
        "qsn": _divide(q_dry_mass, dry_base),
        "qgn": _divide(q_dry_mass, combustible_base),
    }


def format_value(value: float) -> str:
    """Two decimals; non-finite values as +Inf, -Inf or NaN."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return format(value, RESULT_FORMAT)


def calculate(fields: Iterable[MeasurementField]) -> CalculationResult:
    """Validate the seven inputs and return the sixteen formatted outputs."""
    composition = parse_measurements(fields)
    values = compute(composition)

    non_finite = [name for name, v in values.items() if not math.isfinite(v)]
    if non_finite:
        logger.warning("Non-finite results for %s (wp=%s, ap=%s)",
                       ", ".join(non_finite), composition.wp, composition.ap)

    return CalculationResult(outputs=[
        MeasurementField(name=name, label=label, units=units, value=format_value(values[name]))
        for name, label, units in OUTPUT_FIELDS
    ])
