"""Numeric aliases used in generated annotations.

They keep the width chosen from the schema format visible in generated code
while remaining plain int and float at runtime.
"""

from __future__ import annotations

Int32 = int
Int64 = int
Float32 = float
Float64 = float
