# -*- coding: utf-8 -*-
"""
插件运行要求

依赖解析的结果：能否运行、首个阻塞问题及其详情、传递依赖集合、
运行时版本要求。
"""

from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from .record import AddOnRecord


class DependencyIssue(str, Enum):
    """
    导致插件无法运行的依赖问题

    各问题的详情 (issue_details) 内容:
    - CYCLIC: 循环中的所有插件
    - OLDER_VERSION: 候选集中同ID的另一个版本
    - MISSING: 缺失插件的ID
    - PACKAGE_VERSION_NOT_BEFORE / PACKAGE_VERSION_NOT_FROM: (找到的插件, 文件版本边界)
    - VERSION: (找到的插件, 语义化版本范围)
    """

    CYCLIC = "cyclic"
    OLDER_VERSION = "older_version"
    MISSING = "missing"
    PACKAGE_VERSION_NOT_BEFORE = "package_version_not_before"
    PACKAGE_VERSION_NOT_FROM = "package_version_not_from"
    VERSION = "version"


class RunRequirements:
    """
    插件运行要求

    由 DependencyResolver 在一次解析中创建并填充，之后只读。

    注意 dependencies 有两种含义：存在 CYCLIC 问题时为参与循环的插件，
    否则为解析到的传递依赖（每个插件都排在它的依赖之后）。
    """

    def __init__(self):
        self._addon: Optional[AddOnRecord] = None
        self._runnable = True
        self._issue: Optional[DependencyIssue] = None
        self._issue_details: Tuple[Any, ...] = ()
        self._dependencies: Tuple[AddOnRecord, ...] = ()
        self._minimum_runtime_version: Optional[str] = None
        self._addon_minimum_runtime_version: Optional[AddOnRecord] = None

    # region 只读接口

    @property
    def addon(self) -> Optional[AddOnRecord]:
        """被检查的插件"""
        return self._addon

    @property
    def runnable(self) -> bool:
        return self._runnable

    def is_runnable(self) -> bool:
        """插件能否运行"""
        return self._runnable

    @property
    def issue(self) -> Optional[DependencyIssue]:
        return self._issue

    @property
    def issue_details(self) -> Tuple[Any, ...]:
        """问题详情，没有问题时为空元组"""
        return self._issue_details

    @property
    def has_dependency_issue(self) -> bool:
        return self._issue is not None

    @property
    def dependencies(self) -> Tuple[AddOnRecord, ...]:
        return self._dependencies

    @property
    def is_newer_runtime_version_required(self) -> bool:
        """
        是否需要更新的运行时版本

        要求可能来自插件本身，也可能来自某个依赖，
        通过 addon_minimum_runtime_version 区分。
        """
        return self._minimum_runtime_version is not None

    @property
    def minimum_runtime_version(self) -> Optional[str]:
        return self._minimum_runtime_version

    @property
    def addon_minimum_runtime_version(self) -> Optional[AddOnRecord]:
        """提出最低运行时版本要求的插件"""
        return self._addon_minimum_runtime_version

    # endregion

    # region 解析器使用的修改接口

    def _set_addon(self, addon: AddOnRecord) -> None:
        self._addon = addon

    def _set_not_runnable(self) -> None:
        self._runnable = False

    def _set_issue(self, issue: DependencyIssue, *details: Any) -> None:
        self._issue = issue
        self._issue_details = tuple(details)

    def _set_dependencies(self, dependencies: Iterable[AddOnRecord]) -> None:
        self._dependencies = tuple(dependencies)

    def _set_minimum_runtime_version_issue(self, addon: AddOnRecord, required_version: str) -> None:
        # 按字符串比较保留最严格的要求
        if self._minimum_runtime_version is None or required_version > self._minimum_runtime_version:
            self._minimum_runtime_version = required_version
            self._addon_minimum_runtime_version = addon

    # endregion

    def to_dict(self) -> Dict[str, Any]:
        """转换为可序列化的字典（插件以ID表示）"""

        def convert(detail):
            if isinstance(detail, AddOnRecord):
                return detail.id
            if isinstance(detail, (tuple, list, set, frozenset)):
                return sorted(convert(d) for d in detail)
            return detail

        return {
            "addon": self._addon.id if self._addon else None,
            "runnable": self._runnable,
            "issue": self._issue.value if self._issue else None,
            "issue_details": [convert(d) for d in self._issue_details],
            "dependencies": [d.id for d in self._dependencies],
            "minimum_runtime_version": self._minimum_runtime_version,
            "addon_minimum_runtime_version": (
                self._addon_minimum_runtime_version.id
                if self._addon_minimum_runtime_version
                else None
            ),
        }

    def _key(self):
        return (
            self._addon,
            self._runnable,
            self._issue,
            self._issue_details,
            frozenset(self._dependencies),
            self._minimum_runtime_version,
            self._addon_minimum_runtime_version,
        )

    def __eq__(self, other):
        if not isinstance(other, RunRequirements):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"RunRequirements(addon={self._addon}, runnable={self._runnable}, "
            f"issue={self._issue}, details={self._issue_details})"
        )
