"""abiscope - calldata encoder and breakdown visualizer."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("abiscope")
except PackageNotFoundError:
    __version__ = "(local)"
