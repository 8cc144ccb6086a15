"""Load and validate configuration for a sitefold generation run.

This subpackage parses the project's YAML configuration, resolves the content
directory, CDN image rewriting and nofollow exceptions, and produces immutable
dataclasses (:class:`PipelineConfig`, :class:`MarkupOptions`,
:class:`CdnConfig`) that are passed explicitly into the pipeline. Nothing here
is stored as module-level state.

Examples
--------
>>> from pathlib import Path
>>> from sitefold.config import load_pipeline_config
>>> config = load_pipeline_config(Path("sitefold.yaml"))  # doctest: +SKIP
>>> sorted(config.markup.nofollow_exceptions)  # doctest: +SKIP
['example.com']
"""

from .helpers import normalize_domain, normalize_nofollow_exceptions
from .loader import load_pipeline_config, load_tag_descriptions
from .models import CdnConfig, ConfigError, MarkupOptions, PipelineConfig

__all__ = [
    "CdnConfig",
    "ConfigError",
    "MarkupOptions",
    "PipelineConfig",
    "load_pipeline_config",
    "load_tag_descriptions",
    "normalize_domain",
    "normalize_nofollow_exceptions",
]
