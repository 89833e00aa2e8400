"""Core business logic layer.

Subpackages:
- totals: daily total rules per account
- layout: header and column layout per account
- grid: monthly grid synthesis, change detection and range fill
- reporting: summary rows and the export mirror
- accounts: account ordering and lookup
- sheet: the per-selection sheet tying the above together
"""
__all__ = ["totals", "layout", "grid", "reporting", "accounts", "sheet"]
