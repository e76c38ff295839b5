"""Module descriptor specification.

Two gates decide whether a ``module.json`` is acceptable:
1. Schema — JSON Schema for structural validation (fatal)
2. Conventions — naming and URL consistency checks (warnings only)
"""

SCHEMA_VERSION = "1.0"

# Platform defaults shared by the conventions gate and the legacy converter.
PLATFORM_DOMAIN = "infotecha.ru"
HUGO_VERSION = "0.148.0"
