"""Authenticated thread/message chat API and its command line client."""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("chatapi")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0"
