"""Output module for rendered images.

Components:
    export: PNG and raw byte export
"""

from .export import compute_rmse, load_png, pixels_to_bytes, save_png

__all__ = ["save_png", "load_png", "pixels_to_bytes", "compute_rmse"]
