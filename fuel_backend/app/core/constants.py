# app/core/constants.py

# Single source of truth for field definitions and formula coefficients.
# Each descriptor is (name, label, units); order is display order.

INPUT_FIELDS = (
    ("hp", "Hp", "%"),   # hydrogen
    ("cp", "Cp", "%"),   # carbon
    ("sp", "Sp", "%"),   # sulfur
    ("np", "Np", "%"),   # nitrogen
    ("op", "Op", "%"),   # oxygen
    ("wp", "Wp", "%"),   # moisture
    ("ap", "Ap", "%"),   # ash
)

HEAT_UNITS = "КДж/кг"

OUTPUT_FIELDS = (
    ("kpc", "Qрс", ""),          # as-received -> dry
    ("kpg", "Qрг", ""),          # as-received -> ash-free
    ("hc", "Hc", "%"),
    ("cc", "Cc", "%"),
    ("sc", "Sc", "%"),
    ("nc", "Nc", "%"),
    ("oc", "Oc", "%"),
    ("ac", "Ac", "%"),
    ("hg", "Hг", "%"),
    ("cg", "Cг", "%"),
    ("sg", "Sг", "%"),
    ("ng", "Nг", "%"),
    ("og", "Oг", "%"),
    ("qrn", "Qрн", HEAT_UNITS),
    ("qsn", "Qсн", HEAT_UNITS),
    ("qgn", "Qгн", HEAT_UNITS),
)

# Mass fractions are percentages and must add up to this total
TOTAL_PERCENT = 100.0
SUM_TOLERANCE = 0.01

# Net calorific value coefficients (kJ/kg per percent)
COEF_CARBON = 339.0
COEF_HYDROGEN = 1030.0
COEF_OXYGEN_SULFUR = 108.8
COEF_MOISTURE = 25.0

RESULT_FORMAT = ".2f"

SERVER_HOST = "0.0.0.0"
SERVER_PORT = 8080
SERVICE_VERSION = "v1.0-Python"
