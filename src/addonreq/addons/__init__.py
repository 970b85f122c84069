# -*- coding: utf-8 -*-
"""
插件依赖管理

提供插件记录、版本兼容性检查、依赖解析和插件目录等功能。
"""

from .catalog import AddOnCatalog
from .compatibility import (
    AddOnStatus,
    ReleaseComparator,
    get_minimum_runtime_version,
    is_host_compatible,
    is_runtime_version_satisfied,
    is_upgrade,
    runtime_version_as_int,
)
from .manifest import ManifestLoader
from .record import (
    AddOnDependencies,
    AddOnDependency,
    AddOnRecord,
    is_addon_file_name,
    parse_semantic_version,
    parse_version_range,
)
from .requirements import DependencyIssue, RunRequirements
from .resolver import DependencyResolver

__all__ = [
    "AddOnRecord",
    "AddOnDependency",
    "AddOnDependencies",
    "AddOnStatus",
    "is_addon_file_name",
    "parse_semantic_version",
    "parse_version_range",
    "ReleaseComparator",
    "is_host_compatible",
    "is_upgrade",
    "is_runtime_version_satisfied",
    "runtime_version_as_int",
    "get_minimum_runtime_version",
    "DependencyResolver",
    "DependencyIssue",
    "RunRequirements",
    "ManifestLoader",
    "AddOnCatalog",
]
