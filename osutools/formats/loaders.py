from typing import Dict

from .enum import Format
from .osu import load_osu, load_osz
from .typing import Loader

LOADERS: Dict[Format, Loader] = {
    Format.OSZ: load_osz,
    Format.OSU: load_osu,
}
