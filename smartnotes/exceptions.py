class SmartNotesError(Exception):
    """Base exception for smartnotes."""

    pass


class ValidationError(SmartNotesError):
    """Raised when a save is rejected, e.g. both title and body are empty."""

    pass


class NotesImportError(SmartNotesError):
    """Raised when imported data is unparsable or its root is not an array."""

    pass


class PersistenceError(SmartNotesError):
    """Raised when the storage adapter cannot write."""

    pass


class LoadCorruption(SmartNotesError):
    """Stored blob exists but cannot be read back. Recovered by the adapter."""

    pass
