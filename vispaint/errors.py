from __future__ import annotations


class CanvasNotInitializedError(RuntimeError):
    """A drawing or canvas query was issued before `set_canvas`."""


class OpticalFlowFileError(RuntimeError):
    """A `.flo` file could not be parsed."""


class ColorSpecError(ValueError):
    pass
