# -*- coding: utf-8 -*-
"""
addonreq: 插件运行要求与依赖解析
"""

__author__ = "addonreq"
__version__ = "1.0.0"

# 插件依赖管理
from .addons import (
    AddOnCatalog,
    AddOnDependencies,
    AddOnDependency,
    AddOnRecord,
    AddOnStatus,
    DependencyIssue,
    DependencyResolver,
    ManifestLoader,
    ReleaseComparator,
    RunRequirements,
    get_minimum_runtime_version,
    is_host_compatible,
    is_upgrade,
)

# 配置
from .config import ResolverConfig

# 异常
from .exceptions import (
    AddOnError,
    AddOnMismatchError,
    AddOnNotFoundError,
    AddOnReqException,
    ConfigurationError,
    InvalidAddOnFileNameError,
    ManifestError,
)

__all__ = [
    # 插件依赖管理
    "AddOnRecord",
    "AddOnDependency",
    "AddOnDependencies",
    "AddOnStatus",
    "AddOnCatalog",
    "DependencyResolver",
    "DependencyIssue",
    "RunRequirements",
    "ManifestLoader",
    "ReleaseComparator",
    "is_host_compatible",
    "is_upgrade",
    "get_minimum_runtime_version",
    # 配置
    "ResolverConfig",
    # 异常
    "AddOnReqException",
    "AddOnError",
    "AddOnMismatchError",
    "AddOnNotFoundError",
    "InvalidAddOnFileNameError",
    "ManifestError",
    "ConfigurationError",
]
