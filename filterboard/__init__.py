"""
Top-level package for the filterboard dashboard.

Most code should import from submodules such as:
    filterboard.core
    filterboard.charts
    filterboard.ui
"""

__all__: list[str] = []
