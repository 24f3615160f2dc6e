"""End-to-end tests for the command line entry point."""

import pytest

import leevda_cli
from leevda.config import SettingsManager


@pytest.fixture
def cli(tmp_path):
    SettingsManager.reset_instance()
    base = [
        "--settings", str(tmp_path / "settings.json"),
        "--db", str(tmp_path / "leevda.db"),
        "--audio-dir", str(tmp_path / "audio"),
    ]
    yield lambda *args: leevda_cli.main(base + list(args))
    SettingsManager.reset_instance()


def test_decks_lists_default_deck(cli, capsys):
    assert cli("decks") == 0

    assert "English (0 words)" in capsys.readouterr().out


def test_add_deck_then_duplicate_fails(cli, capsys):
    assert cli("add-deck", "Turkish") == 0
    assert cli("add-deck", "turkish") == 1

    assert "already exists" in capsys.readouterr().out


def test_export_import_round_trip(cli, tmp_path, capsys):
    source = tmp_path / "words.csv"
    source.write_text("Word,Meaning,Pronunciation,Note\ncat,kedi,kat,\ndog,köpek,,\n", encoding="utf-8")

    assert cli("import", "Turkish", str(source)) == 0
    assert cli("export", "Turkish", "--audio", "--out", str(tmp_path / "out")) == 0
    [archive] = (tmp_path / "out").glob("Leevda_Turkish_*.zip")
    assert cli("import", "German", str(archive)) == 0
    assert cli("words", "German", "--search", "KEDI") == 0

    out = capsys.readouterr().out
    assert "2 added, 0 updated" in out
    assert "cat [kat] - kedi" in out


def test_stats(cli, tmp_path, capsys):
    source = tmp_path / "words.csv"
    source.write_text("Word,Meaning,Pronunciation,Note\ncat,kedi,kat,pet\n", encoding="utf-8")
    cli("import", "Turkish", str(source))

    assert cli("stats", "Turkish") == 0

    out = capsys.readouterr().out
    assert "total_words: 1" in out
    assert "with_note: 1" in out


def test_unknown_deck_export_fails(cli, capsys):
    assert cli("export", "Klingon") == 1

    assert "Deck not found" in capsys.readouterr().out


def test_export_bundles_audio_by_default(cli, tmp_path):
    assert cli("add-deck", "Turkish") == 0
    assert cli("export", "Turkish", "--out", str(tmp_path / "out")) == 0

    assert [p.suffix for p in (tmp_path / "out").iterdir()] == [".zip"]


def test_export_without_audio_writes_csv(cli, tmp_path):
    assert cli("add-deck", "Turkish") == 0
    assert cli("export", "Turkish", "--no-audio", "--out", str(tmp_path / "out")) == 0

    assert [p.suffix for p in (tmp_path / "out").iterdir()] == [".csv"]


def test_default_deck_name_comes_from_settings(tmp_path, capsys):
    SettingsManager.reset_instance()
    settings_path = tmp_path / "settings.json"
    settings_path.write_text('{"DEFAULT_DECK_NAME": "Turkish"}', encoding="utf-8")
    try:
        code = leevda_cli.main([
            "--settings", str(settings_path),
            "--db", str(tmp_path / "leevda.db"),
            "--audio-dir", str(tmp_path / "audio"),
            "decks",
        ])
    finally:
        SettingsManager.reset_instance()

    assert code == 0
    out = capsys.readouterr().out
    assert "Turkish (0 words)" in out
    assert "English" not in out
