"""Command Line Interface"""

from pathlib import Path
from typing import Optional

import click

from osutools.formats import LOADERS, Format
from osutools.formats.guess import guess_format
from osutools.formats.osu import BundleError
from osutools.summary import dump_summary, summarize_chart


@click.command()
@click.argument("src", type=click.Path(exists=True))
@click.option(
    "--input-format",
    "input_format",
    type=click.Choice(list(f.value for f in LOADERS.keys())),
    help="Input file format",
)
@click.option(
    "--skip-invalid",
    "skip_invalid",
    is_flag=True,
    help=(
        "Leave out the difficulties that can't be loaded instead of failing, "
        "the reason is still reported"
    ),
)
@click.option(
    "--json", "as_json", is_flag=True, help="Print the summary as a json document"
)
def inspect(
    src: str,
    input_format: Optional[str],
    skip_invalid: bool,
    as_json: bool,
) -> None:
    """Load the chart bundle SRC and describe every difficulty it holds"""
    if input_format is None:
        format_ = guess_format(Path(src))
        if not as_json:
            click.echo(f"Detected input file format : {format_.value}")
    else:
        format_ = Format(input_format)

    loader = LOADERS[format_]
    try:
        chart = loader(Path(src), skip_invalid=skip_invalid)
    except BundleError as e:
        raise click.ClickException(str(e))

    summary = summarize_chart(chart)
    if as_json:
        click.echo(dump_summary(summary))
    else:
        for difficulty in summary.difficulties:
            click.echo(difficulty.describe())


if __name__ == "__main__":
    inspect()
