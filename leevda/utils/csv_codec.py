"""
CSV Codec - encode/decode of the vocabulary interchange format.

Format:
    Word,Meaning,Pronunciation,Note[,AudioFileName]

Comma separated, fields containing a comma, double quote or newline are
wrapped in double quotes with inner quotes doubled. The decoder is a single
quote-toggle scan kept compatible with files written by older releases:
every ``"`` flips the "inside quotes" flag and a ``,`` only separates fields
outside quotes. The decoder does not reject malformed rows; short rows are
returned as-is and counted as skipped by the importer.
"""

from typing import Iterable, List, Sequence, Tuple

from ..errors import EmptyDocument
from ..models import DecodedDocument, RawRow, VocabularyEntry
from .parsing import TextParser


class CSVCodec:
    """Encoder and decoder for vocabulary CSV documents."""

    HEADER_FIELDS: Tuple[str, ...] = ("Word", "Meaning", "Pronunciation", "Note")
    AUDIO_HEADER: str = "AudioFileName"

    # Marker searched for in the 5th header column
    AUDIO_HEADER_MARKER: str = "Audio"

    DELIMITER = ","
    QUOTE = '"'
    NEWLINE = "\n"

    # A field containing any of these is quoted on output
    SPECIAL_CHARS = (",", '"', "\n")

    MIN_FIELDS = 4

    # ==================== Encoding ====================

    @classmethod
    def header(cls, include_audio_column: bool = False) -> str:
        fields = cls.HEADER_FIELDS + ((cls.AUDIO_HEADER,) if include_audio_column else ())
        return cls.DELIMITER.join(fields)

    @classmethod
    def escape_field(cls, value: str) -> str:
        """
        Escape a single field.

        Args:
            value: Raw field text (None is treated as empty)

        Returns:
            The field, quoted with inner quotes doubled when it contains
            a comma, a double quote or a newline
        """
        value = value or ""
        if any(char in value for char in cls.SPECIAL_CHARS):
            return cls.QUOTE + value.replace(cls.QUOTE, cls.QUOTE * 2) + cls.QUOTE
        return value

    @classmethod
    def encode_row(cls, fields: Sequence[str]) -> str:
        return cls.DELIMITER.join(cls.escape_field(f) for f in fields)

    @classmethod
    def encode(cls, entries: Iterable[VocabularyEntry], include_audio_column: bool = False) -> str:
        """
        Render entries as a CSV document.

        Entries are sorted by word using ordinal (code point) comparison so
        the output is deterministic.

        Args:
            entries: Vocabulary entries to export
            include_audio_column: Append the AudioFileName column

        Returns:
            The whole document, every line newline-terminated
        """
        width = len(cls.HEADER_FIELDS) + (1 if include_audio_column else 0)
        lines = [cls.header(include_audio_column)]

        for entry in sorted(entries, key=lambda e: e.word or ""):
            lines.append(cls.encode_row(entry.as_row()[:width]))

        return cls.NEWLINE.join(lines) + cls.NEWLINE

    # ==================== Decoding ====================

    @classmethod
    def detect_audio_column(cls, header_line: str) -> bool:
        """True when the header has exactly 5 columns and the last mentions Audio."""
        columns = header_line.split(cls.DELIMITER)
        return len(columns) == 5 and cls.AUDIO_HEADER_MARKER in columns[-1]

    @classmethod
    def decode(cls, text: str) -> DecodedDocument:
        """
        Parse a CSV document.

        The first non-blank record is the header; it decides whether an
        audio column is present. Every following non-blank record becomes
        a :class:`RawRow` tagged with the line it starts on.

        Raises:
            EmptyDocument: The document has no non-blank lines
        """
        text = TextParser.strip_bom(text or "")
        lines = text.split(cls.NEWLINE)
        header_line = next((line for line in lines if line.strip()), None)
        if header_line is None:
            raise EmptyDocument()

        has_audio = cls.detect_audio_column(header_line)
        records = cls.split_records(text)

        return DecodedDocument(has_audio_column=has_audio, rows=records[1:])

    @classmethod
    def split_records(cls, text: str) -> List[RawRow]:
        """
        Scan the whole document into records of trimmed fields.

        A newline outside quotes ends a record, so quoted fields may span
        lines. A quote that reopens a quoted run right after it was closed
        (a doubled ``""``) contributes one literal quote character; the
        inside-quotes flag still flips on every quote.
        """
        records: List[RawRow] = []
        fields: List[str] = []
        buffer: List[str] = []
        inside_quotes = False
        just_closed = False
        has_content = False
        line_index = 0
        record_start = 0

        def finish_field() -> None:
            fields.append(TextParser.trim_ascii("".join(buffer)))
            buffer.clear()

        for char in text:
            if char == cls.QUOTE:
                if not inside_quotes and just_closed:
                    buffer.append(char)
                inside_quotes = not inside_quotes
                just_closed = not inside_quotes
                has_content = True
                continue

            just_closed = False

            if char == cls.DELIMITER and not inside_quotes:
                finish_field()
                has_content = True
            elif char == cls.NEWLINE and not inside_quotes:
                finish_field()
                if has_content:
                    records.append(RawRow(line_index=record_start, fields=tuple(fields)))
                fields.clear()
                has_content = False
                line_index += 1
                record_start = line_index
            else:
                if char == cls.NEWLINE:
                    line_index += 1
                elif not char.isspace():
                    has_content = True
                buffer.append(char)

        if has_content:
            finish_field()
            records.append(RawRow(line_index=record_start, fields=tuple(fields)))

        return records
