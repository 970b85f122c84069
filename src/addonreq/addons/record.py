# -*- coding: utf-8 -*-
"""
插件记录模型

定义插件的标识、版本、状态等级和依赖声明。
"""

import re
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from semantic_version import NpmSpec, Version

from ..exceptions import AddOnMismatchError, InvalidAddOnFileNameError
from .compatibility import (
    AddOnStatus,
    ReleaseOrdering,
    is_host_compatible,
    is_runtime_version_satisfied,
)

# 插件文件名格式: <id>-<status>-<fileVersion>.zap
ADDON_FILE_EXTENSION = ".zap"
_FILE_NAME_SEPARATOR = re.compile(r"-")

# 范围表达式中的 "&"/"|" 连接符和运算符后的空白，如 ">= 1.0.0 & < 2.0.0"
_RANGE_AND = re.compile(r"\s*&\s*")
_RANGE_OR = re.compile(r"\s*\|{1,2}\s*")
_RANGE_OPERATOR_SPACE = re.compile(r"(<=|>=|<|>|=|\^|~)\s+")


class AddOnDependency(BaseModel):
    """
    对另一个插件的依赖声明

    文件版本上下界都包含在允许范围内（低于下界或高于上界即违反）；
    负数边界等同于未设置。
    """

    id: str = Field(..., min_length=1, description="被依赖插件的ID")
    not_before_version: Optional[int] = Field(default=None, description="最低文件版本")
    not_from_version: Optional[int] = Field(default=None, description="最高文件版本")
    semver: Optional[str] = Field(default=None, description="语义化版本范围")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("not_before_version", "not_from_version", mode="before")
    @classmethod
    def validate_bound(cls, v):
        """负数边界视为未设置"""
        if v is not None and int(v) < 0:
            return None
        return v

    @field_validator("semver")
    @classmethod
    def validate_semver(cls, v):
        """空字符串视为没有版本约束"""
        if v is not None and not v.strip():
            return None
        return v

    def is_satisfied_by(self, record: "AddOnRecord") -> bool:
        """检查给定插件是否满足本依赖的文件版本和语义化版本约束"""
        if self.not_before_version is not None and record.file_version < self.not_before_version:
            return False
        if self.not_from_version is not None and record.file_version > self.not_from_version:
            return False
        if self.semver:
            return record.matches_semver(self.semver)
        return True


class AddOnDependencies(BaseModel):
    """插件的依赖块：运行时版本要求和插件依赖列表"""

    runtime_version: Optional[str] = Field(default=None, description="最低运行时版本")
    addons: List[AddOnDependency] = Field(default_factory=list, description="插件依赖，按声明顺序")

    model_config = ConfigDict(frozen=True, extra="forbid")


class AddOnRecord(BaseModel):
    """
    插件记录

    两个记录当且仅当 id、file_version 和语义化版本都相等时视为同一个插件，
    其余字段不参与比较。
    """

    # 标识
    id: str = Field(..., min_length=1, description="插件唯一ID")
    file_version: int = Field(..., ge=0, description="打包版本号")
    version: Optional[str] = Field(default=None, description="语义化版本")
    status: AddOnStatus = Field(default=AddOnStatus.UNKNOWN, description="状态等级")

    # 描述信息
    name: Optional[str] = Field(default=None, description="插件名称")
    description: str = Field(default="", description="插件描述")
    author: str = Field(default="", description="插件作者")
    changes: str = Field(default="", description="变更说明")
    url: Optional[str] = Field(default=None, description="下载地址")
    info: Optional[str] = Field(default=None, description="信息页面")
    size: int = Field(default=0, ge=0, description="文件大小(字节)")
    hash: Optional[str] = Field(default=None, description="文件哈希")

    # 内容
    extensions: List[str] = Field(default_factory=list)
    ascanrules: List[str] = Field(default_factory=list)
    pscanrules: List[str] = Field(default_factory=list)
    files: List[str] = Field(default_factory=list)

    # 宿主版本边界
    not_before_version: Optional[str] = Field(default=None, description="最低宿主版本")
    not_from_version: Optional[str] = Field(default=None, description="宿主版本上限(不含)")

    # 依赖块，None 表示没有声明任何依赖
    dependencies: Optional[AddOnDependencies] = Field(default=None)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("version")
    @classmethod
    def validate_version(cls, v):
        """验证语义化版本格式"""
        if v is None:
            return v
        try:
            parse_semantic_version(v)
        except ValueError:
            raise ValueError(f"无效的版本格式: {v}")
        return v

    @classmethod
    def from_file_name(cls, file_name: str, **kwargs: Any) -> "AddOnRecord":
        """
        从插件文件名创建记录

        Args:
            file_name: 形如 "ascanrules-beta-12.zap" 的文件名
            **kwargs: 其他字段

        Returns:
            插件记录，名称默认与ID相同

        Raises:
            InvalidAddOnFileNameError: 文件名格式无效
        """
        parts = _split_file_name(file_name)
        if parts is None:
            raise InvalidAddOnFileNameError(f"无效的插件文件名: {file_name}")

        addon_id, status, file_version = parts
        kwargs.setdefault("name", addon_id)
        return cls(id=addon_id, status=status, file_version=file_version, **kwargs)

    # region 标识

    @property
    def semantic_version(self) -> Optional[Version]:
        """解析后的语义化版本"""
        if self.version is None:
            return None
        return parse_semantic_version(self.version)

    def identity(self) -> Tuple[str, int, Optional[Version]]:
        """身份三元组 (id, file_version, semantic_version)"""
        return (self.id, self.file_version, self.semantic_version)

    def __eq__(self, other):
        if not isinstance(other, AddOnRecord):
            return NotImplemented
        return self.identity() == other.identity()

    def __hash__(self):
        return hash(self.identity())

    def __str__(self) -> str:
        text = f"[id={self.id}, fileVersion={self.file_version}"
        if self.version is not None:
            text += f", version={self.version}"
        return text + "]"

    def is_same_addon(self, other: "AddOnRecord") -> bool:
        """检查是否是同一个插件（不比较版本）"""
        return self.id == other.id

    def is_same_identity(self, other: "AddOnRecord") -> bool:
        """检查是否是同一个插件的同一个版本"""
        return self == other

    def is_update_to(self, other: "AddOnRecord") -> bool:
        """
        检查本记录是否是另一个记录的更新版本

        文件版本更大即为更新；否则比较状态等级。

        Raises:
            AddOnMismatchError: 两个记录的ID不同
        """
        if not self.is_same_addon(other):
            raise AddOnMismatchError(f"不同的插件: {self.id} != {other.id}")
        if self.file_version > other.file_version:
            return True
        return self.status > other.status

    # endregion

    # region 版本要求

    def matches_semver(self, expression: str) -> bool:
        """检查语义化版本是否匹配范围表达式，没有语义化版本时不匹配"""
        version = self.semantic_version
        if version is None:
            return False
        try:
            version_range = parse_version_range(expression)
        except ValueError:
            return False
        return version_range.match(version)

    @property
    def has_dependency_block(self) -> bool:
        return self.dependencies is not None

    @property
    def minimum_runtime_version(self) -> Optional[str]:
        """
        最低运行时版本

        没有依赖块时返回空字符串，依赖块中未声明时返回 None。
        """
        if self.dependencies is None:
            return ""
        return self.dependencies.runtime_version

    def can_run_in_runtime_version(self, runtime_version: Optional[str]) -> bool:
        """检查插件能否在给定的运行时版本中运行"""
        if self.dependencies is None:
            return True
        return is_runtime_version_satisfied(self.dependencies.runtime_version, runtime_version)

    def can_load_in_version(
        self, host_version: str, comparator: Optional[ReleaseOrdering] = None
    ) -> bool:
        """检查插件能否在给定的宿主程序版本中加载"""
        return is_host_compatible(self, host_version, comparator)

    # endregion

    # region 依赖关系

    @property
    def dependency_ids(self) -> List[str]:
        """直接依赖的插件ID列表"""
        if self.dependencies is None:
            return []
        return [dep.id for dep in self.dependencies.addons]

    def depends_on(self, other: "AddOnRecord") -> bool:
        """检查是否直接依赖给定插件（包括版本约束）"""
        if self.dependencies is None:
            return False

        for dependency in self.dependencies.addons:
            if dependency.id == other.id:
                return dependency.is_satisfied_by(other)
        return False

    def depends_on_any(self, others: Iterable["AddOnRecord"]) -> bool:
        """检查是否直接依赖给定插件中的任意一个"""
        if self.dependencies is None or not self.dependencies.addons:
            return False
        return any(self.depends_on(other) for other in others)

    # endregion


def _split_file_name(file_name: str) -> Optional[Tuple[str, AddOnStatus, int]]:
    if not file_name.lower().endswith(ADDON_FILE_EXTENSION):
        return None

    stem = file_name[: file_name.index(".")]
    parts = _FILE_NAME_SEPARATOR.split(stem)
    if len(parts) < 3:
        return None

    try:
        status = AddOnStatus(parts[1])
        file_version = int(parts[2])
    except ValueError:
        return None
    if not parts[0] or file_version < 0:
        return None
    return parts[0], status, file_version


def is_addon_file_name(file_name: str) -> bool:
    """检查文件名是否符合 <id>-<status>-<fileVersion>.zap 格式"""
    return _split_file_name(file_name) is not None


def parse_semantic_version(text: str) -> Version:
    """
    解析语义化版本，必须是完整的 MAJOR.MINOR.PATCH 形式

    Raises:
        ValueError: 版本格式无效
    """
    return Version(text.strip())


def parse_version_range(expression: str) -> NpmSpec:
    """
    解析语义化版本范围表达式

    支持 npm 风格的范围（"^1.2", "~1.2.3", "1.x", "1.*", "1.0.0 - 2.0.0"），
    以及用 "&" 表示"且"、"|" 表示"或"的写法，如 ">= 1.0.0 & < 2.0.0"。
    预发布版本只匹配同一个 MAJOR.MINOR.PATCH 上带预发布标记的范围。

    Raises:
        ValueError: 表达式无效
    """
    text = _RANGE_OR.sub(" || ", expression.strip())
    text = _RANGE_AND.sub(" ", text)
    text = _RANGE_OPERATOR_SPACE.sub(r"\1", text)
    text = " ".join(text.split())
    if not text:
        raise ValueError(f"空的版本范围: {expression!r}")
    return NpmSpec(text)
