# app/models.py
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


# A named quantity: input field from the form or a formatted result
class MeasurementField(BaseModel):
    name: str
    label: str
    units: str = ""
    value: str = ""   # raw text on input, formatted number on output


# Parsed fuel composition, percent by mass (as-received basis)
class FuelComposition(BaseModel):
    model_config = ConfigDict(frozen=True)

    hp: float   # hydrogen
    cp: float   # carbon
    sp: float   # sulfur
    np: float   # nitrogen
    op: float   # oxygen
    wp: float   # moisture
    ap: float   # ash

    @property
    def total(self) -> float:
        return self.hp + self.cp + self.sp + self.np + self.op + self.wp + self.ap


class CalculationResult(BaseModel):
    outputs: List[MeasurementField]

    def as_dict(self) -> Dict[str, str]:
        return {f.name: f.value for f in self.outputs}


# JSON body of /calculate/fuel; numbers are accepted and treated as text
class FuelAnalysisRequest(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    hp: str = ""
    cp: str = ""
    sp: str = ""
    np: str = ""
    op: str = ""
    wp: str = ""
    ap: str = ""


# Everything the page template needs
class FormView(BaseModel):
    measurements: List[MeasurementField]
    results: List[MeasurementField] = []
    error: Optional[str] = None
