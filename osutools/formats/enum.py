from enum import Enum


class Format(str, Enum):
    OSZ = "osz"
    OSU = "osu"
