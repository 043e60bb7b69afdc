from .callbacks_filters import register_filter_callbacks
from .callbacks_io import register_io_callbacks
from .callbacks_sliders import register_slider_callbacks

__all__ = ["register_filter_callbacks", "register_io_callbacks", "register_slider_callbacks"]
