"""Provides the Chart class, the central model for osu! chart bundles
Every loader produces a Chart instance, made of one Difficulty per .osu file

Times are integer milliseconds, positions are integer osu!pixels on the
512×384 playfield"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Iterator,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from multidict import MultiDict


@dataclass(frozen=True, order=True)
class Position:
    """2D integer vector, in osu!pixels"""

    x: int
    y: int


class GameMode(int, Enum):
    STANDARD = 0
    TAIKO = 1
    CATCH = 2
    MANIA = 3


class CurveKind(str, Enum):
    LINEAR = "L"
    BEZIER = "B"
    PERFECT = "P"
    CATMULL = "C"


@dataclass
class GeneralSection:
    audio_filename: str = ""
    audio_lead_in: int = 0
    preview_time: int = 0
    countdown: bool = False
    sample_set: str = ""
    stack_leniency: float = 0.0
    mode: GameMode = GameMode.STANDARD
    letterbox_in_breaks: bool = False
    widescreen_storyboard: bool = False
    story_fire_in_front: bool = False
    special_style: bool = False
    epilepsy_warning: bool = False
    use_skin_sprites: bool = False


@dataclass
class EditorSection:
    bookmarks: List[int] = field(default_factory=list)
    distance_spacing: float = 1.22
    beat_divisor: int = 4
    grid_size: int = 4
    timeline_zoom: float = 1.0


@dataclass
class MetadataSection:
    title: str = ""
    title_unicode: str = ""
    artist: str = ""
    artist_unicode: str = ""
    creator: str = ""
    version: str = ""
    source: str = ""
    tags: List[str] = field(default_factory=list)
    beatmap_id: int = 0
    beatmap_set_id: int = 0


@dataclass
class DifficultySection:
    hp_drain_rate: float = 0.0
    circle_size: float = 0.0
    overall_difficulty: float = 0.0
    approach_rate: float = 0.0
    slider_multiplier: float = 0.0
    slider_tick_rate: float = 0.0

    def preempt(self) -> float:
        """Milliseconds between the moment an object appears and its hit time.
        1800ms at AR0, 1200ms at AR5, 450ms at AR10"""
        return _approach_rate_scale(self.approach_rate, 1200, 600, 750)

    def fade_in(self) -> float:
        """Milliseconds an object takes to become fully opaque"""
        return _approach_rate_scale(self.approach_rate, 800, 400, 500)

    def circle_radius(self) -> float:
        """In osu!pixels"""
        return (108 - 8 * self.circle_size) / 2


def _approach_rate_scale(ar: float, mid: float, below: float, above: float) -> float:
    if ar < 5:
        return mid + below * (5 - ar) / 5
    else:
        return mid - above * (ar - 5) / 5


@dataclass(frozen=True)
class TempoMarker:
    """A line of the [TimingPoints] section"""

    offset: int
    beat_length: float
    meter: int
    sample_set: str
    sample_index: int
    volume: int
    inherited: bool
    kiai: bool

    @property
    def is_uninherited(self) -> bool:
        """Uninherited markers define the absolute tempo, the others only
        scale the slider velocity. The sign of the beat length decides, the
        explicit flag is not trusted"""
        return self.beat_length > 0


@dataclass(frozen=True)
class HitObjectExtras:
    """Custom hit sample overrides found at the end of a hit object line"""

    sample_set: int = 0
    addition_set: int = 0
    custom_index: int = 0
    sample_volume: int = 0
    filename: str = ""


@dataclass(frozen=True)
class HitObjectBase:
    x: int
    y: int
    time: int
    new_combo: bool
    color_skip: int
    hitsound: int
    extras: HitObjectExtras

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


@dataclass(frozen=True)
class Circle(HitObjectBase):
    pass


@dataclass(frozen=True)
class Slider(HitObjectBase):
    curve_kind: CurveKind
    curve_points: Tuple[Position, ...]
    repeat: int
    pixel_length: float
    edge_hitsounds: Tuple[int, ...] = ()
    edge_additions: Tuple[Tuple[int, int], ...] = ()


@dataclass(frozen=True)
class Spinner(HitObjectBase):
    end_time: int


@dataclass(frozen=True)
class HoldNote(HitObjectBase):
    end_time: int


HitObject = Union[Circle, Slider, Spinner, HoldNote]


class Colour(NamedTuple):
    r: int
    g: int
    b: int


@dataclass
class ColoursSection:
    # combo colours, in Combo1, Combo2, ... order
    colours: List[Colour] = field(default_factory=list)
    slider_body: Optional[Colour] = None
    slider_track_override: Optional[Colour] = None
    slider_border: Optional[Colour] = None


# used when a difficulty has no [Colours] section
DEFAULT_COMBO_COLOURS = (
    Colour(230, 240, 99),
    Colour(199, 176, 252),
    Colour(115, 209, 135),
    Colour(99, 140, 235),
)


def combo_colours(
    hit_objects: Sequence[HitObject], palette: Sequence[Colour]
) -> List[Colour]:
    """Colour of each hit object, in chart order.

    The first object gets the first colour of the palette. Every later object
    that starts a new combo moves the palette 1 + color_skip entries forward,
    wrapping around at the end. Spinners never start a new combo. An empty
    palette means DEFAULT_COMBO_COLOURS"""
    if not palette:
        palette = DEFAULT_COMBO_COLOURS

    index = 0
    colours = []
    for i, obj in enumerate(hit_objects):
        if i > 0 and obj.new_combo and not isinstance(obj, Spinner):
            index += 1 + obj.color_skip
        colours.append(palette[index % len(palette)])

    return colours


@dataclass
class Difficulty:
    """The contents of a single .osu file, plus the audio it refers to"""

    version: int
    general: GeneralSection = field(default_factory=GeneralSection)
    editor: EditorSection = field(default_factory=EditorSection)
    metadata: MetadataSection = field(default_factory=MetadataSection)
    difficulty: DifficultySection = field(default_factory=DifficultySection)
    colours: ColoursSection = field(default_factory=ColoursSection)
    tempo_markers: List[TempoMarker] = field(default_factory=list)
    hit_objects: List[HitObject] = field(default_factory=list)
    audio: bytes = field(default=b"", repr=False)

    @property
    def display_name(self) -> str:
        return f"{self.metadata.title}[{self.metadata.version}]"

    def hit_object_colours(self) -> List[Colour]:
        return combo_colours(self.hit_objects, self.colours.colours)


@dataclass
class Chart:
    """A chart bundle : every difficulty found in a .osz archive (or folder),
    keyed by difficulty name. Names are not guaranteed to be unique"""

    difficulties: Mapping[str, Difficulty] = field(default_factory=MultiDict)

    def __iter__(self) -> Iterator[Difficulty]:
        yield from self.difficulties.values()

    def __len__(self) -> int:
        return len(self.difficulties)
