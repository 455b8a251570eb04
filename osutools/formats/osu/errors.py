class MissingField(ValueError):
    """A positional field was needed but the record ended before it"""


class OsuSyntaxError(SyntaxError):
    """A value was there but could not be decoded, or the line does not
    follow the grammar"""


class BundleError(ValueError):
    """Something is wrong with the bundle as a whole rather than with the
    text of a single .osu file, like an audio file that can't be found"""
