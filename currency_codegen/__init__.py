"""
currency_codegen

ISO 4217 currency snapshot refresh + Go source generation.

Design goals:
- Linear pipeline (fetch -> snapshot -> order -> render -> write)
- Fail-fast (no retry, no fallback)
- Minimal exception catching (catch only at CLI boundary)
- Deterministic output
"""
