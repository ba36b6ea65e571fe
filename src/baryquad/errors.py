"""Custom exception hierarchy for baryquad."""


class BaryquadError(Exception):
    """Base exception for all baryquad errors."""


class LayoutError(BaryquadError):
    """Raised when a buffer view or accessor would fall outside its byte range."""


class ExportError(BaryquadError):
    """Raised when document serialization or the GLB write fails."""


class ContainerError(BaryquadError):
    """Raised when a GLB byte stream cannot be parsed."""
