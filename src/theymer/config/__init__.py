"""Project configuration loading, schema, and defaults."""

from theymer.config.loader import (
    expand_and_resolve,
    find_project_root,
    load_config,
    merge_providers_with_defaults,
)
from theymer.config.schema import Config, Dirs, ProjectConfig, ProjectType, Provider

__all__ = [
    "Config",
    "Dirs",
    "ProjectConfig",
    "ProjectType",
    "Provider",
    "expand_and_resolve",
    "find_project_root",
    "load_config",
    "merge_providers_with_defaults",
]
