"""Short description of the contents of a chart bundle, meant to be printed
or exported as json"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

import simplejson as json
from marshmallow import Schema, post_dump
from marshmallow_dataclass import class_schema

from osutools.chart import (
    Chart,
    Circle,
    Difficulty,
    HitObject,
    HoldNote,
    Slider,
    Spinner,
)
from osutools.curves import path_length, slider_path, traversal_time
from osutools.tempo import TempoTrack


@dataclass
class DifficultySummary:
    title: str
    artist: str
    creator: str
    version: str
    mode: str
    format_version: int
    circles: int
    sliders: int
    spinners: int
    hold_notes: int
    bpm_min: Optional[float] = None
    bpm_max: Optional[float] = None
    # end of the last object in ms, None when it can't be computed
    length: Optional[int] = None
    slider_path_length: float = 0.0

    def describe(self) -> str:
        if self.bpm_min is None or self.bpm_max is None:
            bpm = "no tempo"
        elif self.bpm_min == self.bpm_max:
            bpm = f"{self.bpm_min:g} BPM"
        else:
            bpm = f"{self.bpm_min:g}-{self.bpm_max:g} BPM"

        return (
            f"{self.title}[{self.version}] ({self.mode}, v{self.format_version}) : "
            f"{self.circles} circles, {self.sliders} sliders, "
            f"{self.spinners} spinners, {self.hold_notes} hold notes, {bpm}"
        )


@dataclass
class ChartSummary:
    difficulties: List[DifficultySummary] = field(default_factory=list)


class BaseSchema(Schema):
    class Meta:
        ordered = True

    @post_dump
    def remove_none_values(self, data: dict, **kwargs: Any) -> dict:
        return {key: value for key, value in data.items() if value is not None}


CHART_SUMMARY_SCHEMA = class_schema(ChartSummary, base_schema=BaseSchema)()


def summarize_chart(chart: Chart) -> ChartSummary:
    return ChartSummary(difficulties=[summarize_difficulty(d) for d in chart])


def summarize_difficulty(difficulty: Difficulty) -> DifficultySummary:
    objects = difficulty.hit_objects
    sliders = [o for o in objects if isinstance(o, Slider)]
    bpms = [
        60000 / m.beat_length for m in difficulty.tempo_markers if m.is_uninherited
    ]
    return DifficultySummary(
        title=difficulty.metadata.title,
        artist=difficulty.metadata.artist,
        creator=difficulty.metadata.creator,
        version=difficulty.metadata.version,
        mode=difficulty.general.mode.name.lower(),
        format_version=difficulty.version,
        circles=sum(isinstance(o, Circle) for o in objects),
        sliders=len(sliders),
        spinners=sum(isinstance(o, Spinner) for o in objects),
        hold_notes=sum(isinstance(o, HoldNote) for o in objects),
        bpm_min=min(bpms, default=None),
        bpm_max=max(bpms, default=None),
        length=chart_length(difficulty),
        slider_path_length=sum(path_length(slider_path(s)) for s in sliders),
    )


def chart_length(difficulty: Difficulty) -> Optional[int]:
    if not difficulty.hit_objects or not difficulty.tempo_markers:
        return None

    track = TempoTrack(difficulty.tempo_markers)
    slider_multiplier = difficulty.difficulty.slider_multiplier
    try:
        end = max(
            end_time(o, track, slider_multiplier) for o in difficulty.hit_objects
        )
    except ValueError:
        return None

    return round(end)


def end_time(obj: HitObject, track: TempoTrack, slider_multiplier: float) -> float:
    """Hit objects have to be passed in chart order since the tempo track
    only moves forward"""
    track.advance(obj.time)
    if isinstance(obj, Slider):
        once = traversal_time(obj.pixel_length, slider_multiplier, track)
        return obj.time + once * obj.repeat
    elif isinstance(obj, (Spinner, HoldNote)):
        return obj.end_time
    else:
        return obj.time


def dump_summary(summary: ChartSummary) -> str:
    return json.dumps(CHART_SUMMARY_SCHEMA.dump(summary), indent=4)
