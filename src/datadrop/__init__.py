"""Materialize data URIs, base64 payloads, and local files as fingerprinted temp files."""

from importlib import metadata as _metadata

from datadrop.parsing import DataParser, SmartFile, parse_base64_data, parse_data, parse_text_data

__all__ = [
    "__version__",
    "DataParser",
    "SmartFile",
    "parse_data",
    "parse_base64_data",
    "parse_text_data",
]


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("datadrop")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(list(globals().keys()) + ["__version__"])
