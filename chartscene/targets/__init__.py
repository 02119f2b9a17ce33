from .base import SceneBuffer, SceneTarget
from .raster import RasterTarget
from .svg import SvgTarget

__all__ = ["RasterTarget", "SceneBuffer", "SceneTarget", "SvgTarget"]
