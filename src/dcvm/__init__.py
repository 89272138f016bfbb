"""
Data Criteria Value Model (DCVM) Package

The value types carried by a clinical-quality-measure data criterion:
quantities, intervals, coded concepts, temporal relationships and subset
operators, together with their JSON/YAML contract.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Source document formats (HQMF XML, etc.)
    - Measure evaluation
    - Unit conversion or calendar arithmetic

Ambiguous input shapes are collapsed into one canonical form at
construction time. Consumers only ever see the canonical form.
"""

__version__ = "0.1.0"
