"""Command line entry point: ``slide-shrink INPUT... -o DIR``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

import click

from slide_shrink_bot.logging_setup import setup_logging
from slide_shrink_bot.processor import ShrinkError, shrink_pdf
from slide_shrink_bot.sizes import human_bytes

OUTPUT_SUFFIX = "_slides.pdf"


def output_path_for(input_pdf: Path, output_dir: Path) -> Path:
    return output_dir / f"{input_pdf.stem}{OUTPUT_SUFFIX}"


@click.command()
@click.argument(
    "input_pdfs",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o",
    "--output-dir",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the <name>_slides.pdf results (created if missing).",
)
@click.option("--no-fallback", is_flag=True, help="Fail instead of reading 'N/M' footers when page labels are missing.")
@click.option("--no-compress", is_flag=True, help="Save without object streams / stream compression.")
@click.option("--log-level", default="WARNING", show_default=True, help="Logging level.")
@click.pass_context
def main(
        ctx: click.Context,
        input_pdfs: Tuple[Path, ...],
        output_dir: Path,
        no_fallback: bool,
        no_compress: bool,
        log_level: str,
) -> None:
    """Keep only the final page of every slide of each INPUT_PDFS file.

    A file that can not be shrunk is reported and skipped; the exit code is 1
    when at least one file failed.
    """
    setup_logging(level=log_level)
    log = logging.getLogger("slide_shrink.cli")

    output_dir.mkdir(parents=True, exist_ok=True)

    done = 0
    for input_pdf in input_pdfs:
        output_pdf = output_path_for(input_pdf, output_dir)
        try:
            result = shrink_pdf(
                input_pdf,
                output_pdf,
                text_fallback=not no_fallback,
                compress=not no_compress,
            )
        except (ShrinkError, OSError) as e:
            log.debug("Shrink failed for %s", input_pdf, exc_info=True)
            click.echo(f"{input_pdf}: Can not shrink: {e}", err=True)
            continue

        done += 1
        original_size = input_pdf.stat().st_size
        click.echo(
            f"{input_pdf} -> {output_pdf}: "
            f"{result.pages_before} -> {result.pages_after} pages, "
            f"{human_bytes(original_size)} -> {human_bytes(len(result.data))} "
            f"(slide numbers from {result.source.replace('_', ' ')})"
        )

    click.echo(f"{done}/{len(input_pdfs)} files processed")
    if done != len(input_pdfs):
        ctx.exit(1)


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
