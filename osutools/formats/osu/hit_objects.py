"""Decoding of the lines of the [HitObjects] section

A hit object line looks like this :

    x,y,time,type,hitSound,objectParams,hitSample

type is a bit field :
  - bit 0 (1)   : circle
  - bit 1 (2)   : slider
  - bit 2 (4)   : new combo
  - bit 3 (8)   : spinner
  - bits 4 to 6 : number of combo colours to skip
  - bit 7 (128) : osu!mania hold note

objectParams depend on the kind of object :
  - circle    : (nothing)
  - slider    : curveType|curvePoints,slides,length,edgeSounds,edgeSets
  - spinner   : endTime
  - hold note : endTime, sharing its field with hitSample (endTime:hitSample)
"""

from enum import Enum
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from parsimonious import Grammar, NodeVisitor, ParseError
from parsimonious.nodes import Node

from osutools.chart import (
    Circle,
    CurveKind,
    HitObject,
    HitObjectExtras,
    HoldNote,
    Position,
    Slider,
    Spinner,
)

from .errors import MissingField, OsuSyntaxError
from .fields import FieldReader, parse_extras, parse_float, parse_int

T = TypeVar("T")

NEW_COMBO = 4
KIND_MASK = 1 | 2 | 8 | 128


class HitObjectKind(int, Enum):
    CIRCLE = 1
    SLIDER = 2
    SPINNER = 8
    HOLD_NOTE = 128


def is_new_combo(type_code: int) -> bool:
    return type_code & NEW_COMBO != 0


def color_skip(type_code: int) -> int:
    return (type_code >> 4) & 7


def hit_object_kind(type_code: int) -> HitObjectKind:
    try:
        return HitObjectKind(type_code & KIND_MASK)
    except ValueError:
        raise OsuSyntaxError(
            f"Invalid hit object type : {type_code} (masked : {type_code & KIND_MASK})"
        ) from None


curve_grammar = Grammar(
    r"""
    curve           = kind points
    kind            = ~r"[A-Za-z]"
    points          = point*
    point           = "|" ws number ws ":" ws number ws
    number          = ~r"[-+]?\d+"
    ws              = ~r"[\t ]*"
    """
)


class CurveVisitor(NodeVisitor):

    """Returns a (kind letter, points) tuple"""

    def __init__(self) -> None:
        super().__init__()
        self.kind: Optional[str] = None
        self.points: List[Position] = []

    def visit_curve(
        self, node: Node, visited_children: List[Node]
    ) -> Tuple[str, List[Position]]:
        if self.kind is None:
            raise ValueError("No curve kind found after parsing curve")
        return self.kind, self.points

    def visit_kind(self, node: Node, visited_children: List[Node]) -> None:
        self.kind = node.text

    def visit_point(self, node: Node, visited_children: List[Node]) -> None:
        _, _, x, _, _, _, y, _ = node.children
        self.points.append(Position(int(x.text), int(y.text)))

    def generic_visit(self, node: Node, visited_children: List[Node]) -> None:
        ...


def parse_curve(raw: str) -> Tuple[CurveKind, Tuple[Position, ...]]:
    try:
        letter, points = CurveVisitor().visit(curve_grammar.parse(raw.strip()))
    except ParseError:
        raise OsuSyntaxError(f"Invalid slider curve : {raw!r}") from None

    try:
        kind = CurveKind(letter)
    except ValueError:
        raise OsuSyntaxError(f"Invalid slider type : {letter!r}") from None

    return kind, tuple(points)


def parse_coord(raw: str) -> Tuple[int, int]:
    reader = FieldReader(raw, ":")
    return reader.read(parse_int, "x"), reader.read(parse_int, "y")


def parse_list(decode: Callable[[str], T]) -> Callable[[str], Tuple[T, ...]]:
    def parse(raw: str) -> Tuple[T, ...]:
        return tuple(decode(token) for token in raw.split("|"))

    return parse


def parse_repeat(raw: str) -> int:
    repeat = parse_int(raw)
    if repeat < 1:
        raise OsuSyntaxError(f"Slider repeat count should be at least 1, not {repeat}")
    return repeat


def parse_hit_object(line: str) -> HitObject:
    reader = FieldReader(line)
    x = reader.read(parse_int, "x")
    y = reader.read(parse_int, "y")
    time = reader.read(parse_int, "time")
    type_code = reader.read(parse_int, "type")
    common: Any = dict(
        x=x,
        y=y,
        time=time,
        new_combo=is_new_combo(type_code),
        color_skip=color_skip(type_code),
        hitsound=reader.read(parse_int, "hitSound"),
    )
    default_extras = HitObjectExtras()

    kind = hit_object_kind(type_code)
    if kind == HitObjectKind.CIRCLE:
        return Circle(
            **common,
            extras=reader.read_optional(parse_extras, default_extras),
        )
    elif kind == HitObjectKind.SLIDER:
        curve_kind, curve_points = reader.read(parse_curve, "curve")
        return Slider(
            **common,
            curve_kind=curve_kind,
            curve_points=curve_points,
            repeat=reader.read(parse_repeat, "slides"),
            pixel_length=reader.read(parse_float, "length"),
            edge_hitsounds=reader.read_optional(parse_list(parse_int), ()),
            edge_additions=reader.read_optional(parse_list(parse_coord), ()),
            extras=reader.read_optional(parse_extras, default_extras),
        )
    elif kind == HitObjectKind.SPINNER:
        return Spinner(
            **common,
            end_time=reader.read(parse_int, "endTime"),
            extras=reader.read_optional(parse_extras, default_extras),
        )
    elif kind == HitObjectKind.HOLD_NOTE:
        end_time, extras = reader.read(parse_hold_note_params, "endTime")
        return HoldNote(**common, end_time=end_time, extras=extras)
    else:
        raise NotImplementedError(f"Unknown hit object kind : {kind!r}")


def parse_hold_note_params(raw: str) -> Tuple[int, HitObjectExtras]:
    raw_end_time, _, raw_extras = raw.partition(":")
    end_time = parse_int(raw_end_time)
    try:
        extras = parse_extras(raw_extras)
    except (MissingField, OsuSyntaxError):
        extras = HitObjectExtras()
    return end_time, extras
