from .canvas import Canvas, require_canvas, saved_state
from .draw_bbox import draw_bounding_box_2d, labels_for_position
from .draw_image import draw_image
from .draw_lines import (
    color_fade_out_linear,
    color_fade_out_logarithmic,
    color_fade_out_quadratic,
    draw_arrow,
    draw_line,
    draw_trajectories,
    draw_trajectory,
    smooth_trajectory,
)
from .draw_markers import draw_marker, draw_markers
from .draw_pinhole import draw_xyz_axes, project_points, projection_matrix
from .draw_shapes import draw_arc, draw_circle, draw_ellipse, draw_grid, draw_polygon, draw_rect
from .draw_text import MultiLineText, SingleLineText, TextExtent, draw_text, draw_text_box

__all__ = [
    "Canvas",
    "MultiLineText",
    "SingleLineText",
    "TextExtent",
    "color_fade_out_linear",
    "color_fade_out_logarithmic",
    "color_fade_out_quadratic",
    "draw_arc",
    "draw_arrow",
    "draw_bounding_box_2d",
    "draw_circle",
    "draw_ellipse",
    "draw_grid",
    "draw_image",
    "draw_line",
    "draw_marker",
    "draw_markers",
    "draw_polygon",
    "draw_rect",
    "draw_text",
    "draw_text_box",
    "draw_trajectories",
    "draw_trajectory",
    "draw_xyz_axes",
    "labels_for_position",
    "project_points",
    "projection_matrix",
    "require_canvas",
    "saved_state",
    "smooth_trajectory",
]
