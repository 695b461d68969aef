# src/copydeck/errors.py


class CopydeckError(Exception):
    """Base class for every fatal error raised by the copydeck pipeline."""


class InputFileError(CopydeckError):
    """A required input file or directory is missing or unreadable."""


class CorrectionFileError(CopydeckError):
    """The corrections sheet cannot be read or lacks a required column."""


class BackupError(CopydeckError):
    """The pre-edit backup could not be created. Nothing may be written."""


class DocumentIOError(CopydeckError):
    """The source document could not be read, parsed or written."""


class PatchConflictError(CopydeckError):
    """Raised in strict mode when identities no longer match the document."""

    def __init__(self, message: str, outcomes=None):
        super().__init__(message)
        self.outcomes = outcomes or []


class FigmaFetchError(CopydeckError):
    """The remote Figma document could not be fetched."""
