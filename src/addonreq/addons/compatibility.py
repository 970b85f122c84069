# -*- coding: utf-8 -*-
"""
版本兼容性检查

提供运行时版本比较、宿主程序版本兼容性判断和插件状态等级排序。
"""

import re
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional, Tuple

from packaging.version import InvalidVersion, Version

if TYPE_CHECKING:
    from .record import AddOnRecord


# 运行时版本分隔符
RUNTIME_VERSION_SEPARATORS = re.compile(r"[._\- ]")

# 运行时版本最多取前两个数字分量
RUNTIME_VERSION_COMPONENTS = 2

# 宿主版本比较器签名: (a, b) -> 负数/0/正数
ReleaseOrdering = Callable[[str, str], int]


class AddOnStatus(str, Enum):
    """插件状态等级，按成熟度从低到高排列"""

    UNKNOWN = "unknown"
    EXAMPLE = "example"
    ALPHA = "alpha"
    BETA = "beta"
    WEEKLY = "weekly"
    RELEASE = "release"

    @property
    def rank(self) -> int:
        """状态等级的序号，越大越成熟"""
        return _STATUS_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, AddOnStatus):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, AddOnStatus):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, AddOnStatus):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, AddOnStatus):
            return NotImplemented
        return self.rank >= other.rank


_STATUS_ORDER: Tuple[AddOnStatus, ...] = tuple(AddOnStatus)


def status_order() -> Tuple[AddOnStatus, ...]:
    """获取状态等级的全序（由低到高）"""
    return _STATUS_ORDER


def parse_runtime_version(version: Optional[str]) -> List[int]:
    """
    将运行时版本字符串解析为数字分量

    按分隔符拆分后依次解析，无法解析为整数的分量直接跳过，
    最多保留前两个分量。

    Args:
        version: 版本字符串，如 "1.8.0_45"

    Returns:
        数字分量列表，如 [1, 8]
    """
    if version is None:
        return []

    components: List[int] = []
    for part in RUNTIME_VERSION_SEPARATORS.split(version):
        if len(components) >= RUNTIME_VERSION_COMPONENTS:
            break
        if not part:
            continue
        try:
            components.append(int(part))
        except ValueError:
            continue
    return components


def runtime_version_as_int(version: Optional[str]) -> int:
    """将运行时版本编码为整数: major*100 + minor*10"""
    components = parse_runtime_version(version)
    value = 0
    if len(components) >= 1:
        value = components[0] * 100
    if len(components) >= 2:
        value += components[1] * 10
    return value


def is_runtime_version_satisfied(required: Optional[str], actual: Optional[str]) -> bool:
    """
    检查实际运行时版本是否满足最低要求

    Args:
        required: 要求的最低版本，None 表示没有要求
        actual: 实际运行时版本

    Returns:
        满足要求返回 True
    """
    if required is None:
        return True
    if actual is None:
        return False
    return runtime_version_as_int(actual) >= runtime_version_as_int(required)


class ReleaseComparator:
    """
    宿主程序版本比较器

    可解析的版本按 PEP 440 排序；无法解析的版本（如 "D-2024-01-01"
    这类开发构建）视为比所有正式版本都新，彼此之间按字符串排序。
    """

    def __call__(self, a: str, b: str) -> int:
        key_a = self._sort_key(a)
        key_b = self._sort_key(b)
        return (key_a > key_b) - (key_a < key_b)

    @staticmethod
    def _sort_key(release: str):
        release = release.strip()
        try:
            return (0, Version(release), "")
        except InvalidVersion:
            return (1, None, release)


def is_host_compatible(
    record: "AddOnRecord",
    host_version: str,
    comparator: Optional[ReleaseOrdering] = None,
) -> bool:
    """
    检查插件能否在给定的宿主程序版本中加载

    not_before_version 存在且宿主版本更早时返回 False；
    否则若 not_from_version 存在，结果完全由"宿主版本早于 not_from_version"决定；
    两者都没有时返回 True。

    Args:
        record: 插件记录
        host_version: 宿主程序版本
        comparator: 版本比较器，默认使用 ReleaseComparator

    Returns:
        是否可以加载
    """
    compare = comparator or ReleaseComparator()

    if record.not_before_version:
        if compare(host_version, record.not_before_version) < 0:
            return False

    if record.not_from_version:
        return compare(host_version, record.not_from_version) < 0

    return True


def is_upgrade(addon: "AddOnRecord", other: "AddOnRecord") -> bool:
    """检查 addon 是否是 other 的更新版本"""
    return addon.is_update_to(other)


def get_minimum_runtime_version(record: "AddOnRecord") -> Optional[str]:
    """获取插件要求的最低运行时版本"""
    return record.minimum_runtime_version
