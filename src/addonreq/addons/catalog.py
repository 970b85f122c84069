# -*- coding: utf-8 -*-
"""
插件目录

保存可用的候选插件，并提供查询和运行要求计算功能。
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from ..config import ResolverConfig
from ..exceptions import AddOnNotFoundError, ManifestError
from .compatibility import AddOnStatus, ReleaseOrdering
from .manifest import MANIFEST_SUFFIXES, ManifestLoader
from .record import AddOnRecord
from .requirements import RunRequirements
from .resolver import DependencyResolver

MANIFEST_FILE_STEM = "addon_manifest"


class AddOnCatalog:
    """
    插件目录

    每个插件ID只保存一个版本，注册同ID的新记录会替换旧记录。
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._addons: Dict[str, AddOnRecord] = {}
        self._paths: Dict[str, Path] = {}

    def register(self, addon: AddOnRecord, path: Optional[Path] = None) -> bool:
        """
        注册插件

        Args:
            addon: 插件记录
            path: 插件清单所在目录

        Returns:
            注册是否成功
        """
        errors = ManifestLoader.validate_record(addon)
        if errors:
            # 问题留给解析器按 CYCLIC/VERSION 等结果报告
            self.logger.warning(f"插件记录存在问题 {addon.id}: {errors}")

        existing = self._addons.get(addon.id)
        if existing is not None:
            self.logger.warning(f"插件 {addon.id} 已存在 ({existing}), 将被替换为 {addon}")
            self._paths.pop(addon.id, None)

        self._addons[addon.id] = addon
        if path:
            self._paths[addon.id] = path

        self.logger.info(f"插件 {addon} 注册成功")
        return True

    def register_from_directory(self, directory: Path, recursive: bool = True) -> int:
        """
        从目录注册插件

        Args:
            directory: 插件目录
            recursive: 是否递归扫描

        Returns:
            成功注册的插件数量
        """
        directory = Path(directory)
        if not directory.is_dir():
            self.logger.error(f"插件目录不存在: {directory}")
            return 0

        pattern = "**/" if recursive else "*/"
        manifest_files: List[Path] = []
        for suffix in MANIFEST_SUFFIXES:
            manifest_files.extend(sorted(directory.glob(f"{pattern}{MANIFEST_FILE_STEM}{suffix}")))

        self.logger.info(f"在 {directory} 中找到 {len(manifest_files)} 个插件清单文件")

        registered_count = 0
        for manifest_file in manifest_files:
            try:
                addon = ManifestLoader.load_from_file(manifest_file)
            except ManifestError as e:
                self.logger.error(f"加载插件清单失败 {manifest_file}: {e}")
                continue
            if self.register(addon, manifest_file.parent):
                registered_count += 1

        self.logger.info(f"从 {directory} 成功注册了 {registered_count} 个插件")
        return registered_count

    def unregister(self, addon_id: str) -> bool:
        """注销插件"""
        if addon_id not in self._addons:
            self.logger.warning(f"尝试注销不存在的插件: {addon_id}")
            return False

        del self._addons[addon_id]
        self._paths.pop(addon_id, None)
        self.logger.info(f"插件 {addon_id} 注销成功")
        return True

    def get(self, addon_id: str) -> Optional[AddOnRecord]:
        return self._addons.get(addon_id)

    def require(self, addon_id: str) -> AddOnRecord:
        """获取插件，不存在时抛出 AddOnNotFoundError"""
        addon = self._addons.get(addon_id)
        if addon is None:
            raise AddOnNotFoundError(addon_id)
        return addon

    def has(self, addon_id: str) -> bool:
        return addon_id in self._addons

    def get_path(self, addon_id: str) -> Optional[Path]:
        return self._paths.get(addon_id)

    def list_addons(self, status: Optional[AddOnStatus] = None) -> List[AddOnRecord]:
        """列出插件，可按状态等级筛选"""
        if status is None:
            return list(self._addons.values())
        return [addon for addon in self._addons.values() if addon.status == status]

    def get_dependents(self, addon_id: str) -> List[AddOnRecord]:
        """获取直接依赖于指定插件（且版本约束满足）的其他插件"""
        addon = self._addons.get(addon_id)
        if addon is None:
            return []
        return [other for other in self._addons.values() if other.depends_on(addon)]

    def get_loadable(
        self, host_version: str, comparator: Optional[ReleaseOrdering] = None
    ) -> List[AddOnRecord]:
        """获取可以在给定宿主版本中加载的插件"""
        return [
            addon
            for addon in self._addons.values()
            if addon.can_load_in_version(host_version, comparator)
        ]

    def check(self, addon_id: str, config: Optional[ResolverConfig] = None) -> RunRequirements:
        """
        计算目录中某个插件的运行要求

        Raises:
            AddOnNotFoundError: 插件不存在
        """
        addon = self.require(addon_id)
        resolver = DependencyResolver(config)
        return resolver.resolve(addon, self._addons.values())

    def clear(self) -> None:
        """清空目录"""
        self._addons.clear()
        self._paths.clear()
        self.logger.info("插件目录已清空")

    def __len__(self) -> int:
        return len(self._addons)

    def __iter__(self) -> Iterator[AddOnRecord]:
        return iter(list(self._addons.values()))

    def __contains__(self, addon_id: object) -> bool:
        return addon_id in self._addons
