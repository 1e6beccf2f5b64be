"""Camera module.

Components:
    thin_lens: Look-at camera with a finite aperture for depth of field
"""

from .thin_lens import ThinLensCamera

__all__ = ["ThinLensCamera"]
