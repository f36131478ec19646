from __future__ import annotations

from functools import lru_cache

from pdf_navigator.library import DocumentLibrary, LibraryConfig, build_library


@lru_cache(maxsize=1)
def get_config() -> LibraryConfig:
    return LibraryConfig.from_env()


@lru_cache(maxsize=1)
def get_library() -> DocumentLibrary:
    return build_library(get_config())
