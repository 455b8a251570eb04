import pytest

from osutools.chart import (
    Circle,
    Colour,
    DifficultySection,
    EditorSection,
    GeneralSection,
    HitObjectExtras,
)

from ..errors import OsuSyntaxError
from ..parser import OsuParser, parse_difficulty


def test_minimal_document() -> None:
    difficulty = parse_difficulty("osu file format v14\n\n[Metadata]\nTitle:Test")
    assert difficulty.version == 14
    assert difficulty.metadata.title == "Test"
    assert difficulty.general == GeneralSection()
    assert difficulty.editor == EditorSection()
    assert difficulty.difficulty == DifficultySection()
    assert difficulty.tempo_markers == []
    assert difficulty.hit_objects == []


def test_version_only() -> None:
    difficulty = parse_difficulty("osu file format v3")
    assert difficulty.version == 3


@pytest.mark.parametrize(
    "text",
    [
        "",
        "\n\n",
        "osu file format",
        "osu file format vX",
        "osu file format v14 extra",
        "[General]\nMode: 0",
    ],
)
def test_bad_version_line(text: str) -> None:
    with pytest.raises(OsuSyntaxError, match="version"):
        parse_difficulty(text)


def test_leading_blank_lines_and_indentation_are_ignored() -> None:
    difficulty = parse_difficulty(
        "\n\n   osu file format v14   \n\n\t[Metadata]  \n  Title:Test\n"
    )
    assert difficulty.metadata.title == "Test"


def test_crlf_line_endings() -> None:
    difficulty = parse_difficulty("osu file format v14\r\n[Metadata]\r\nTitle:Test\r\n")
    assert difficulty.metadata.title == "Test"


def test_colours_are_ordered_by_number() -> None:
    difficulty = parse_difficulty(
        "osu file format v14\n[Colours]\nCombo2 : 4,5,6\nCombo1 : 1,2,3"
    )
    assert difficulty.colours.colours == [(1, 2, 3), (4, 5, 6)]


def test_colours_are_ordered_numerically() -> None:
    difficulty = parse_difficulty(
        "osu file format v14\n[Colours]\nCombo10 : 10,10,10\nCombo9 : 9,9,9"
    )
    assert difficulty.colours.colours == [Colour(9, 9, 9), Colour(10, 10, 10)]


def test_slider_colours() -> None:
    difficulty = parse_difficulty(
        "osu file format v14\n[Colours]\n"
        "SliderTrackOverride : 1,1,1\nSliderBorder : 2,2,2\nSliderBody : 3,3,3"
    )
    colours = difficulty.colours
    assert colours.colours == []
    assert colours.slider_track_override == (1, 1, 1)
    assert colours.slider_border == (2, 2, 2)
    assert colours.slider_body == (3, 3, 3)


def test_unknown_colours_key() -> None:
    with pytest.raises(OsuSyntaxError, match=r"Unknown key in section \[Colours\]"):
        parse_difficulty("osu file format v14\n[Colours]\nBackground : 1,2,3")


def test_incomplete_colour() -> None:
    with pytest.raises(OsuSyntaxError, match="Combo1"):
        parse_difficulty("osu file format v14\n[Colours]\nCombo1 : 1,2")


def test_unknown_keys_are_ignored_in_key_value_sections() -> None:
    difficulty = parse_difficulty(
        "osu file format v14\n[General]\nMode: 1\nSkinPreference: default"
    )
    assert difficulty.general.mode == 1


def test_empty_value_reads_as_none() -> None:
    difficulty = parse_difficulty("osu file format v14\n[Metadata]\nSource:\nTitle: a")
    assert difficulty.metadata.source == "none"
    assert difficulty.metadata.title == "a"


def test_value_keeps_its_inner_colons() -> None:
    difficulty = parse_difficulty("osu file format v14\n[Metadata]\nTitle: Re:Start")
    assert difficulty.metadata.title == "Re:Start"


def test_key_stops_at_the_last_colon_before_a_space() -> None:
    # read as the unknown key "Title:Re", so the title keeps its default
    difficulty = parse_difficulty("osu file format v14\n[Metadata]\nTitle:Re:Zero")
    assert difficulty.metadata.title == ""


def test_malformed_header() -> None:
    with pytest.raises(OsuSyntaxError, match="Malformed section header"):
        parse_difficulty("osu file format v14\n[Gen[eral]\nMode: 0")


def test_stray_line_between_sections() -> None:
    with pytest.raises(OsuSyntaxError, match="Malformed section header"):
        parse_difficulty("osu file format v14\n[General]\nMode: 0\nnot a pair")


def test_unknown_section() -> None:
    with pytest.raises(OsuSyntaxError, match="Unknown section header : Fonts"):
        parse_difficulty("osu file format v14\n[Fonts]\nMain: Arial")


def test_events_are_skipped() -> None:
    difficulty = parse_difficulty(
        "osu file format v14\n"
        "[Events]\n"
        "//Background and Video events\n"
        '0,0,"bg.jpg",0,0\n'
        "2,4000,5000\n"
        "[HitObjects]\n"
        "256,192,1000,1,0\n"
    )
    assert difficulty.hit_objects == [
        Circle(
            x=256,
            y=192,
            time=1000,
            new_combo=False,
            color_skip=0,
            hitsound=0,
            extras=HitObjectExtras(),
        )
    ]


def test_timing_points() -> None:
    difficulty = parse_difficulty(
        "osu file format v14\n[TimingPoints]\n0,500,4,2,0,60,1,0\n1000,-50,4,2,0,60,0,1"
    )
    first, second = difficulty.tempo_markers
    assert first.is_uninherited
    assert first.beat_length == 500.0
    assert not second.is_uninherited
    assert second.kiai


def test_bad_timing_point_aborts() -> None:
    with pytest.raises(OsuSyntaxError, match="timing point '0,abc"):
        parse_difficulty(
            "osu file format v14\n[TimingPoints]\n0,abc,4,2,0,60,1,0\n"
            "[Metadata]\nTitle: never read"
        )


def test_bad_hit_object_aborts() -> None:
    with pytest.raises(OsuSyntaxError, match="hit object"):
        parse_difficulty("osu file format v14\n[HitObjects]\n256,192,1000,3,0")


def test_bad_key_value() -> None:
    with pytest.raises(OsuSyntaxError, match=r"Mode in section \[General\]"):
        parse_difficulty("osu file format v14\n[General]\nMode: 7")


def test_later_sections_replace_earlier_ones() -> None:
    difficulty = parse_difficulty(
        "osu file format v14\n[Metadata]\nTitle: first\n[Metadata]\nArtist: second"
    )
    assert difficulty.metadata.title == ""
    assert difficulty.metadata.artist == "second"


def test_parser_is_reusable() -> None:
    parser = OsuParser()
    first = parser.parse("osu file format v14\n[Metadata]\nVersion: Easy")
    second = parser.parse("osu file format v12\n[Metadata]\nVersion: Hard")
    assert first.metadata.version == "Easy"
    assert second.metadata.version == "Hard"
    assert second.version == 12


def test_colour_order_does_not_follow_the_file() -> None:
    difficulty = parse_difficulty(
        "osu file format v14\n[Colours]\nCombo2:1,2,3\nCombo1:4,5,6"
    )
    assert difficulty.colours.colours == [(4, 5, 6), (1, 2, 3)]
