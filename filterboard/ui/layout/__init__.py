from .build_layout import build_layout, build_error_layout

__all__ = ["build_layout", "build_error_layout"]
