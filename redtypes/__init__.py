"""Redis reply values, reply conversion, argument encoding, errors, INFO parsing and stream types."""

__version__ = "0.1.0"
__all__ = [
    "args",
    "convert",
    "errors",
    "info",
    "stream_options",
    "stream_replies",
    "values",
]