class SpriteEditorError(Exception):
    """Base class for recoverable editor failures."""


class ProjectFileError(SpriteEditorError):
    """Project file could not be read, parsed or written."""


class ExportError(SpriteEditorError):
    kind = "export"
    message = "Export failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


# Animated GIF
class DestinationCreationError(ExportError):
    kind = "destination_creation"
    message = "Could not create the GIF output"


class FrameRenderError(ExportError):
    kind = "frame_render"
    message = "Could not render a frame"


class FinalizationError(ExportError):
    kind = "finalization"
    message = "Could not write the GIF"


# Sprite sheet
class ContextCreationError(ExportError):
    kind = "context_creation"
    message = "Could not create the sheet canvas"


class ImageCreationError(ExportError):
    kind = "image_creation"
    message = "Could not build the sheet image"


class EncodingError(ExportError):
    kind = "encoding"
    message = "PNG encoding failed"
