"""Tests for the vocabulary CSV encoder and decoder."""

import pytest

from leevda.errors import EmptyDocument
from leevda.models import VocabularyEntry
from leevda.utils import CSVCodec

HEADER = "Word,Meaning,Pronunciation,Note"
AUDIO_HEADER = "Word,Meaning,Pronunciation,Note,AudioFileName"


def entry(word, meaning, pronunciation="", note=None, audio_file_name=None):
    return VocabularyEntry(
        id=f"ID-{word}",
        deck_id="DECK",
        word=word,
        meaning=meaning,
        pronunciation=pronunciation,
        note=note,
        audio_file_name=audio_file_name,
    )


def test_encode_quotes_commas_and_newlines_only():
    text = CSVCodec.encode([entry("hello", "a greeting, sort of", note="line1\nline2")])

    assert text == HEADER + "\n" + 'hello,"a greeting, sort of",,"line1\nline2"' + "\n"


def test_encode_header_with_audio_column():
    text = CSVCodec.encode([entry("cat", "kedi", "kat", audio_file_name="cat123.m4a")], include_audio_column=True)

    assert text == AUDIO_HEADER + "\ncat,kedi,kat,,cat123.m4a\n"


def test_encode_without_audio_column_drops_audio_field():
    text = CSVCodec.encode([entry("cat", "kedi", audio_file_name="cat123.m4a")])

    assert "cat123.m4a" not in text


def test_encode_doubles_inner_quotes():
    assert CSVCodec.escape_field('say "hi"') == '"say ""hi"""'
    assert CSVCodec.escape_field("plain") == "plain"
    assert CSVCodec.escape_field(None) == ""


def test_encode_sorts_by_word_ordinal():
    text = CSVCodec.encode([entry("b", "2"), entry("a", "1"), entry("A", "0")])

    assert text.splitlines()[1:] == ["A,0,,", "a,1,,", "b,2,,"]


def test_round_trip_preserves_special_characters():
    entries = [
        entry("hello", "a greeting, sort of", "həˈloʊ", "line1\nline2", "A.m4a"),
        entry('say "hi"', 'he said ""yes""', "", None, None),
        entry('"quoted"', "x,y", "p", 'end"', "B.m4a"),
        entry("merhaba", "hello", "mer-ha-ba", "Turkish, informal", None),
    ]

    document = CSVCodec.decode(CSVCodec.encode(entries, include_audio_column=True))

    assert document.has_audio_column
    decoded = sorted(row.fields for row in document.rows)
    assert decoded == sorted(e.as_row() for e in entries)


def test_round_trip_without_audio_column_has_four_fields():
    document = CSVCodec.decode(CSVCodec.encode([entry("cat", "kedi", "kat", "pet")]))

    assert not document.has_audio_column
    assert [row.fields for row in document.rows] == [("cat", "kedi", "kat", "pet")]


@pytest.mark.parametrize("text", ["", "\n", "  \n\t\n", "\ufeff"])
def test_decode_empty_document_raises(text):
    with pytest.raises(EmptyDocument):
        CSVCodec.decode(text)


def test_decode_header_only_has_no_rows():
    document = CSVCodec.decode(AUDIO_HEADER + "\n")

    assert document.has_audio_column
    assert document.rows == []


@pytest.mark.parametrize(
    "header, expected",
    [
        (AUDIO_HEADER, True),
        ("Word,Meaning,Pronunciation,Note,Audio", True),
        (HEADER, False),
        ("Word,Meaning,Pronunciation,Note,Sound", False),
        ("Word,Meaning,Pronunciation,Note,AudioFileName,Extra", False),
    ],
)
def test_detect_audio_column(header, expected):
    assert CSVCodec.detect_audio_column(header) is expected


def test_decode_keeps_short_rows_for_the_importer():
    document = CSVCodec.decode(HEADER + "\nonly,two\ncat,kedi,kat,\n")

    assert [row.fields for row in document.rows] == [("only", "two"), ("cat", "kedi", "kat", "")]
    assert not document.rows[0].is_parsable
    assert document.rows[1].is_parsable


def test_decode_tags_rows_with_starting_line():
    text = HEADER + '\na,b,c,d\n\n"x\ny",m,p,n\nz,m,p,n'

    document = CSVCodec.decode(text)

    assert [(row.line_index, row.fields[0]) for row in document.rows] == [(1, "a"), (3, "x\ny"), (5, "z")]


def test_decode_trims_fields_and_handles_crlf():
    document = CSVCodec.decode(HEADER + "\r\n  cat , kedi ,kat,  \r\n")

    assert [row.fields for row in document.rows] == [("cat", "kedi", "kat", "")]


def test_decode_strips_byte_order_mark():
    document = CSVCodec.decode("\ufeff" + AUDIO_HEADER + "\ncat,kedi,kat,,cat123.m4a\n")

    assert document.has_audio_column
    assert document.rows[0].fields[4] == "cat123.m4a"
