"""Resource loaders, one per resource kind."""

from shopfront.loaders.base import Fetched, ResourceLoader
from shopfront.loaders.http import (
    DataLoader,
    ImageLoader,
    LoadError,
    ScriptLoader,
    StyleLoader,
    build_http_loaders,
)

__all__ = [
    "DataLoader",
    "Fetched",
    "ImageLoader",
    "LoadError",
    "ResourceLoader",
    "ScriptLoader",
    "StyleLoader",
    "build_http_loaders",
]
