"""Error taxonomy for the meme flow."""


class CatemojiError(Exception):
    """Base class for application errors."""


class AcquisitionError(CatemojiError):
    """Camera permission denied or device unavailable."""


class ClassificationError(CatemojiError):
    """Input image is empty or cannot be decoded."""


class CaptionServiceError(CatemojiError):
    """Caption service could not be reached or returned an unusable body."""


class CompositionError(CatemojiError):
    """Background image could not be loaded while rendering a meme."""


class PhaseError(CatemojiError):
    """Action is not allowed in the current session phase."""
