"""Error taxonomy for deck management and CSV/bundle interchange."""

from typing import Any, Optional


class LeevdaError(Exception):
    """Base class for all Leevda errors. ``kind`` names the failure."""

    kind = "error"
    default_message = "Leevda operation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class ValidationError(LeevdaError):
    kind = "validation"
    default_message = "Invalid input"


class EmptyDocument(LeevdaError):
    kind = "empty_document"
    default_message = "CSV file is empty"


class UnparsableRow(LeevdaError):
    """A row with fewer than four fields. Counted by imports, never raised there."""

    kind = "unparsable_row"
    default_message = "Row has fewer than 4 fields"

    def __init__(self, line_index: int, message: Optional[str] = None):
        super().__init__(message or f"{self.default_message} (line {line_index})")
        self.line_index = line_index


class CsvNotFound(LeevdaError):
    kind = "csv_not_found"
    default_message = "CSV file not found in archive"


class ArchiveCreationFailed(LeevdaError):
    kind = "archive_creation_failed"
    default_message = "Failed to create ZIP archive"


class ArchiveExtractionFailed(LeevdaError):
    kind = "archive_extraction_failed"
    default_message = "Failed to extract ZIP archive"


class PersistError(LeevdaError):
    kind = "persist_error"
    default_message = "Failed to save changes"


class DuplicateWord(LeevdaError):
    """Raised by the single-entry path when the word already exists in the deck."""

    kind = "duplicate_word"
    default_message = "This word already exists"

    def __init__(self, existing: Any, message: Optional[str] = None):
        super().__init__(message or f"{self.default_message}: {getattr(existing, 'word', existing)}")
        self.existing = existing


class DuplicateDeck(LeevdaError):
    kind = "duplicate_deck"
    default_message = "A deck with this name already exists"

    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(message or f"{self.default_message}: {name}")
        self.name = name


class DeckNotFound(LeevdaError):
    kind = "deck_not_found"
    default_message = "Deck not found"


class TransferError(LeevdaError):
    """Single failure value surfaced by export/import orchestration."""

    kind = "transfer_error"
    default_message = "Transfer failed"

    def __init__(self, cause: Exception, operation: str = "transfer"):
        self.cause = cause
        self.operation = operation
        self.kind = getattr(cause, "kind", "io_error")
        super().__init__(f"{operation.capitalize()} failed: {cause}")


class EntryNotFound(LeevdaError):
    kind = "entry_not_found"
    default_message = "Entry not found"
