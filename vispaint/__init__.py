from vispaint.collage import collage
from vispaint.colormaps import (
    ColorMap,
    Colorizer,
    LimitsMode,
    category_color,
    colorize,
    list_colormaps,
    peaks,
    relief_shading,
)
from vispaint.colors import (
    SAME,
    Color,
    NamedColor,
    SameColor,
    color_from_spec,
    list_named_colors,
    rgba,
    rgba255,
)
from vispaint.config import load_style_presets
from vispaint.errors import CanvasNotInitializedError, ColorSpecError, OpticalFlowFileError
from vispaint.gradients import (
    ColorGradient,
    LinearColorGradient,
    RadialColorGradient,
    draw_color_gradient,
)
from vispaint.imagebuffer import (
    ImageBuffer,
    ImageBufferType,
    OwnedImageBuffer,
    SharedImageBuffer,
    color_pop,
    convert_hsv2rgb,
    convert_rgb2gray,
    convert_rgb2hsv,
    load_image,
    mask_hsv_range,
    save_image,
)
from vispaint.opticalflow import (
    colorize_optical_flow,
    load_optical_flow,
    optical_flow_legend,
    save_optical_flow,
)
from vispaint.painter import Painter, create_painter
from vispaint.positioning import Anchor, HorizontalAlignment, LabelPosition, VerticalAlignment
from vispaint.primitives import Ellipse, Rect, Vec2d, Vec2i, Vec3d
from vispaint.raster.draw_lines import (
    color_fade_out_linear,
    color_fade_out_logarithmic,
    color_fade_out_quadratic,
)
from vispaint.styles import (
    ArrowStyle,
    BoundingBox2DStyle,
    LineCap,
    LineJoin,
    LineStyle,
    Marker,
    MarkerStyle,
    TextStyle,
    list_markers,
)

__all__ = [
    "Anchor",
    "ArrowStyle",
    "BoundingBox2DStyle",
    "CanvasNotInitializedError",
    "Color",
    "ColorGradient",
    "ColorMap",
    "ColorSpecError",
    "Colorizer",
    "Ellipse",
    "HorizontalAlignment",
    "ImageBuffer",
    "ImageBufferType",
    "LabelPosition",
    "LimitsMode",
    "LineCap",
    "LineJoin",
    "LineStyle",
    "LinearColorGradient",
    "Marker",
    "MarkerStyle",
    "NamedColor",
    "OpticalFlowFileError",
    "OwnedImageBuffer",
    "Painter",
    "RadialColorGradient",
    "Rect",
    "SAME",
    "SameColor",
    "SharedImageBuffer",
    "TextStyle",
    "Vec2d",
    "Vec2i",
    "Vec3d",
    "VerticalAlignment",
    "category_color",
    "collage",
    "color_fade_out_linear",
    "color_fade_out_logarithmic",
    "color_fade_out_quadratic",
    "color_from_spec",
    "color_pop",
    "colorize",
    "colorize_optical_flow",
    "convert_hsv2rgb",
    "convert_rgb2gray",
    "convert_rgb2hsv",
    "create_painter",
    "draw_color_gradient",
    "list_colormaps",
    "list_markers",
    "list_named_colors",
    "load_image",
    "load_optical_flow",
    "load_style_presets",
    "mask_hsv_range",
    "optical_flow_legend",
    "peaks",
    "relief_shading",
    "rgba",
    "rgba255",
    "save_image",
    "save_optical_flow",
]
