from pathlib import Path
from typing import Any, Protocol

from osutools.chart import Chart


class Loader(Protocol):
    """A Loader deserializes a Path to a Chart object and possibly takes in
    some options via the kwargs.
    The Path can be a file or a folder depending on the format"""

    def __call__(self, path: Path, **kwargs: Any) -> Chart:
        ...
