import warnings
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from multidict import MultiDict

from osutools.chart import Chart, Difficulty
from osutools.formats.load_tools import Bundle, FolderBundle, ZipBundle

from .errors import BundleError, MissingField, OsuSyntaxError
from .parser import OsuParser

CHART_EXTENSION = ".osu"


def load_osz(path: Path, *, skip_invalid: bool = False, **kwargs: Any) -> Chart:
    return load_bundle(ZipBundle(path), skip_invalid=skip_invalid)


def load_osu(path: Path, *, skip_invalid: bool = False, **kwargs: Any) -> Chart:
    """Load either a folder holding an extracted .osz archive or a single
    .osu file, in which case the audio file is looked up next to it"""
    if path.is_dir():
        return load_bundle(FolderBundle(path), skip_invalid=skip_invalid)
    else:
        return load_bundle(
            FolderBundle(path.parent, recursive=False),
            charts=[path.name],
            skip_invalid=skip_invalid,
        )


def load_bundle(
    bundle: Bundle,
    *,
    charts: Optional[Iterable[str]] = None,
    skip_invalid: bool = False,
) -> Chart:
    """Parse every .osu file of the bundle (or only the ones named in charts)
    and attach to each difficulty the audio file it refers to. Nothing else
    from the bundle is read.

    By default the first difficulty that fails to load makes the whole
    bundle fail, with skip_invalid the failure is only reported as a warning
    and the difficulty left out"""
    file_names = bundle.names()
    if charts is None:
        names = sorted(n for n in file_names if n.lower().endswith(CHART_EXTENSION))
    else:
        names = list(charts)

    parser = OsuParser()
    difficulties: MultiDict[Difficulty] = MultiDict()
    for name in names:
        try:
            difficulty = load_difficulty(parser, name, bundle, file_names)
        except BundleError as e:
            if not skip_invalid:
                raise
            warnings.warn(f"Skipping {name} : {e}")
        else:
            difficulties.add(difficulty.metadata.version, difficulty)

    if not difficulties:
        raise BundleError("No difficulty could be loaded from this bundle")

    return Chart(difficulties=difficulties)


def load_difficulty(
    parser: OsuParser, name: str, bundle: Bundle, file_names: Sequence[str]
) -> Difficulty:
    try:
        contents = bundle.read(name)
    except KeyError:
        raise BundleError(f"{name} is not part of the bundle") from None

    try:
        text = contents.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise BundleError(f"{name} is not valid UTF-8 text : {e}") from e

    try:
        difficulty = parser.parse(text)
    except (MissingField, OsuSyntaxError) as e:
        raise BundleError(f"Could not parse {name} : {e}") from e

    audio_name = difficulty.general.audio_filename
    try:
        difficulty.audio = bundle.read(find_name(file_names, audio_name))
    except KeyError:
        raise BundleError(
            f"{name} uses {audio_name!r} as its audio file but the bundle has "
            "no file with that name"
        ) from None

    return difficulty


def find_name(file_names: Iterable[str], name: str) -> str:
    """Exact match first, then a case-insensitive one since charts are
    mostly authored on case-insensitive file systems"""
    file_names = list(file_names)
    if name in file_names:
        return name

    lowered = name.lower()
    for file_name in file_names:
        if file_name.lower() == lowered:
            return file_name

    raise KeyError(name)
