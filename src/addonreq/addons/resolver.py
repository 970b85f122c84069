# -*- coding: utf-8 -*-
"""
依赖解析引擎

针对一组候选插件计算目标插件的运行要求：检测版本冲突、循环依赖、
缺失依赖、文件版本和语义化版本约束，并汇总最严格的运行时版本要求。
"""

import logging
from typing import Dict, Iterable, List, Optional

import networkx as nx

from ..config import ResolverConfig
from .record import AddOnDependency, AddOnRecord
from .requirements import DependencyIssue, RunRequirements


class DependencyResolver:
    """
    插件依赖解析引擎

    每次解析都使用独立的依赖图和结果对象，解析器本身不保存解析状态，
    可以在多个线程中共享（前提是候选插件集合在解析期间不被修改）。
    """

    def __init__(self, config: Optional[ResolverConfig] = None):
        """
        初始化依赖解析器

        Args:
            config: 解析器配置，默认使用当前运行时版本且不限制宿主版本
        """
        self.config = config or ResolverConfig()
        self.logger = logging.getLogger(__name__)

    def resolve(self, target: AddOnRecord, available: Iterable[AddOnRecord]) -> RunRequirements:
        """
        计算插件的运行要求

        按声明顺序深度优先遍历依赖，遇到第一个问题即停止。

        Args:
            target: 目标插件
            available: 可用的候选插件

        Returns:
            运行要求，不可运行时包含原因
        """
        candidates = self._index_candidates(available)
        requirements = RunRequirements()
        graph = nx.DiGraph()

        self.logger.debug(f"开始计算插件运行要求: {target}")

        self._walk(target, candidates, graph, requirements)

        if requirements.issue is not DependencyIssue.CYCLIC:
            requirements._set_dependencies(self._load_order(graph, target))

        self.logger.debug(
            f"插件 {target} 运行要求计算完成: runnable={requirements.runnable}, "
            f"issue={requirements.issue}"
        )
        return requirements

    calculate_run_requirements = resolve

    def resolve_all(
        self, targets: Iterable[AddOnRecord], available: Iterable[AddOnRecord]
    ) -> Dict[str, RunRequirements]:
        """
        计算多个插件的运行要求

        Returns:
            {插件ID: 运行要求}
        """
        available = list(available)
        return {target.id: self.resolve(target, available) for target in targets}

    def _index_candidates(self, available: Iterable[AddOnRecord]) -> Dict[str, AddOnRecord]:
        """按ID索引候选插件，同ID只保留第一个"""
        host_version = self.config.host_version
        candidates: Dict[str, AddOnRecord] = {}
        for addon in available:
            if self.config.filter_unloadable and not addon.can_load_in_version(host_version):
                self.logger.debug(f"插件 {addon} 无法在宿主版本 {host_version} 中加载，已忽略")
                continue
            candidates.setdefault(addon.id, addon)
        return candidates

    def _walk(
        self,
        target: AddOnRecord,
        candidates: Dict[str, AddOnRecord],
        graph: nx.DiGraph,
        requirements: RunRequirements,
    ) -> None:
        """显式栈实现的深度优先遍历"""
        if not self._visit(None, target, candidates, graph, requirements):
            return
        if target.dependencies is None:
            return

        stack = [(target, iter(target.dependencies.addons))]
        while stack:
            addon, pending = stack[-1]
            dependency = next(pending, None)
            if dependency is None:
                stack.pop()
                continue

            found = self._check_dependency(dependency, candidates, requirements)
            if found is None:
                return

            if not self._visit(addon, found, candidates, graph, requirements):
                return

            if found.dependencies is not None:
                stack.append((found, iter(found.dependencies.addons)))

    def _visit(
        self,
        parent: Optional[AddOnRecord],
        addon: AddOnRecord,
        candidates: Dict[str, AddOnRecord],
        graph: nx.DiGraph,
        requirements: RunRequirements,
    ) -> bool:
        """
        进入一个插件节点

        Returns:
            False 表示发现了问题，遍历应停止
        """
        installed = candidates.get(addon.id)
        if installed is not None and installed != addon:
            requirements._set_not_runnable()
            requirements._set_issue(DependencyIssue.OLDER_VERSION, installed)
            self.logger.debug(f"插件 {addon} 无法运行，仍安装了旧版本: {installed}")
            return False

        if not self._add_dependency(parent, addon, graph, requirements):
            return False

        if addon.dependencies is None:
            return True

        if not addon.can_run_in_runtime_version(self.config.runtime_version):
            required_version = addon.dependencies.runtime_version
            requirements._set_minimum_runtime_version_issue(addon, required_version)
            if parent is None:
                requirements._set_not_runnable()
            self.logger.info(
                f"插件 {addon} 需要运行时版本 {required_version}，"
                f"当前版本: {self.config.runtime_version}"
            )

        return True

    def _add_dependency(
        self,
        parent: Optional[AddOnRecord],
        addon: AddOnRecord,
        graph: nx.DiGraph,
        requirements: RunRequirements,
    ) -> bool:
        """添加依赖边，形成循环时记录循环中的插件并返回 False"""
        if parent is None:
            requirements._set_addon(addon)
            graph.add_node(addon)
            return True

        closes_cycle = graph.has_node(addon) and nx.has_path(graph, addon, parent)
        graph.add_edge(parent, addon)
        if not closes_cycle:
            return True

        # 加边前无环，所以所有环都经过新边 parent -> addon
        cycle = (nx.descendants(graph, addon) & nx.ancestors(graph, parent)) | {parent, addon}
        requirements._set_not_runnable()
        requirements._set_dependencies(cycle)
        requirements._set_issue(DependencyIssue.CYCLIC, frozenset(cycle))
        self.logger.warning(f"检测到循环依赖: {sorted(str(a) for a in cycle)}")
        return False

    def _check_dependency(
        self,
        dependency: AddOnDependency,
        candidates: Dict[str, AddOnRecord],
        requirements: RunRequirements,
    ) -> Optional[AddOnRecord]:
        """查找被依赖的插件并检查版本约束，不满足时返回 None"""
        found = candidates.get(dependency.id)
        if found is None:
            requirements._set_not_runnable()
            requirements._set_issue(DependencyIssue.MISSING, dependency.id)
            self.logger.debug(f"缺少依赖: {dependency.id}")
            return None

        if dependency.not_before_version is not None and found.file_version < dependency.not_before_version:
            requirements._set_not_runnable()
            requirements._set_issue(
                DependencyIssue.PACKAGE_VERSION_NOT_BEFORE, found, dependency.not_before_version
            )
            self.logger.debug(f"依赖 {found} 的文件版本低于 {dependency.not_before_version}")
            return None

        if dependency.not_from_version is not None and found.file_version > dependency.not_from_version:
            requirements._set_not_runnable()
            requirements._set_issue(
                DependencyIssue.PACKAGE_VERSION_NOT_FROM, found, dependency.not_from_version
            )
            self.logger.debug(f"依赖 {found} 的文件版本高于 {dependency.not_from_version}")
            return None

        if dependency.semver and not found.matches_semver(dependency.semver):
            requirements._set_not_runnable()
            requirements._set_issue(DependencyIssue.VERSION, found, dependency.semver)
            self.logger.debug(f"依赖 {found} 的版本不满足 {dependency.semver}")
            return None

        return found

    @staticmethod
    def _load_order(graph: nx.DiGraph, target: AddOnRecord) -> List[AddOnRecord]:
        """依赖在前的加载顺序，不包括目标插件本身"""
        order = reversed(list(nx.topological_sort(graph)))
        return [addon for addon in order if addon != target]
