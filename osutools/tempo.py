from __future__ import annotations

from typing import Optional, Sequence

from osutools.chart import TempoMarker


class TempoTrack:
    """Follows the [TimingPoints] of a difficulty as playback moves forward.

    Keeps track of the last uninherited marker (absolute tempo) and of the
    last inherited marker seen since then (slider velocity). Positions given
    to advance() are expected to never decrease, markers are expected to be
    in non-decreasing offset order, which is how they appear in the file"""

    def __init__(self, markers: Sequence[TempoMarker]) -> None:
        if not markers:
            raise ValueError("No tempo marker defined")

        self.markers = tuple(markers)
        self.index = 0
        self.current_uninherited = next(
            (m for m in self.markers if m.is_uninherited), self.markers[0]
        )
        self.current_inherited: Optional[TempoMarker] = None

    def advance(self, position: int) -> None:
        """Consume every marker up to position (in ms, inclusive)"""
        while (
            self.index < len(self.markers)
            and self.markers[self.index].offset <= position
        ):
            marker = self.markers[self.index]
            if marker.is_uninherited:
                self.current_uninherited = marker
                self.current_inherited = None
            else:
                self.current_inherited = marker

            self.index += 1

    def beat_length(self) -> float:
        return self.current_uninherited.beat_length

    def velocity_multiplier(self) -> float:
        if self.current_inherited is None:
            return 1.0

        return -self.current_inherited.beat_length / 100.0

    def bpm(self) -> float:
        return 60000 / self.beat_length()
