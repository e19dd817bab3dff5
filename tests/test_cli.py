"""
Tests for the slide-shrink command line tool.
"""

from pathlib import Path

from click.testing import CliRunner

from slide_shrink_bot.cli import main, output_path_for

from decks import footer_deck_bytes, labeled_deck_bytes, markers, new_deck, to_bytes


def test_output_path_for(tmp_path: Path):
    assert output_path_for(Path("talks/deck.pdf"), tmp_path) == tmp_path / "deck_slides.pdf"


def test_cli_shrinks_labeled_deck(tmp_path: Path):
    src = tmp_path / "deck.pdf"
    out = tmp_path / "out"
    src.write_bytes(labeled_deck_bytes())

    result = CliRunner().invoke(main, [str(src), "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert "7 -> 3 pages" in result.output
    assert "page labels" in result.output
    assert "1/1 files processed" in result.output
    assert markers((out / "deck_slides.pdf").read_bytes()) == [3, 4, 7]


def test_cli_reports_sizes(tmp_path: Path):
    src = tmp_path / "deck.pdf"
    src.write_bytes(labeled_deck_bytes())

    result = CliRunner().invoke(main, [str(src), "-o", str(tmp_path / "out")])

    assert result.exit_code == 0, result.output
    assert " B -> " in result.output


def test_cli_batch_with_failures(tmp_path: Path):
    good = tmp_path / "good.pdf"
    footer = tmp_path / "footer.pdf"
    blank = tmp_path / "blank.pdf"
    out = tmp_path / "out"
    good.write_bytes(labeled_deck_bytes())
    footer.write_bytes(footer_deck_bytes(["1/2", "1/2", "2/2"]))
    blank.write_bytes(to_bytes(new_deck(2)))

    result = CliRunner().invoke(main, [str(good), str(blank), str(footer), "-o", str(out)])

    assert result.exit_code == 1
    assert "Can not shrink" in result.output
    assert "2/3 files processed" in result.output
    assert markers((out / "good_slides.pdf").read_bytes()) == [3, 4, 7]
    assert (out / "footer_slides.pdf").exists()
    assert not (out / "blank_slides.pdf").exists()


def test_cli_no_fallback_fails_on_footer_deck(tmp_path: Path):
    src = tmp_path / "deck.pdf"
    out = tmp_path / "out"
    src.write_bytes(footer_deck_bytes(["1/2", "2/2"]))

    result = CliRunner().invoke(main, [str(src), "-o", str(out), "--no-fallback"])

    assert result.exit_code == 1
    assert "Can not shrink" in result.output
    assert "0/1 files processed" in result.output
    assert not (out / "deck_slides.pdf").exists()


def test_cli_requires_output_dir(tmp_path: Path):
    src = tmp_path / "deck.pdf"
    src.write_bytes(labeled_deck_bytes())

    result = CliRunner().invoke(main, [str(src)])

    assert result.exit_code == 2


def test_cli_missing_input(tmp_path: Path):
    result = CliRunner().invoke(main, [str(tmp_path / "nope.pdf"), "-o", str(tmp_path / "out")])

    assert result.exit_code == 2
