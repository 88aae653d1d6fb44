"""Core (UI-agnostic) ride bookings dashboard logic.

This package contains:
- data loading (CSV text -> pandas)
- schema inference (column roles + typed record schema)
- filter normalization and application
- aggregations and page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
