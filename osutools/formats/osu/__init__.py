""".osu is the text format used by osu! for a single difficulty of a chart.
A chart bundle (.osz) is a zip archive holding one .osu file per difficulty
along with the audio, backgrounds and skin elements they use.

The format is documented on the osu! wiki :
- https://osu.ppy.sh/wiki/en/Client/File_formats/osu_%28file_format%29

Parsing is strict : any value that fails to decode makes the whole
difficulty fail, except for the few trailing fields of hit objects that
have always been optional."""

from .errors import BundleError, MissingField, OsuSyntaxError
from .load import load_bundle, load_osu, load_osz
from .parser import OsuParser, parse_difficulty
