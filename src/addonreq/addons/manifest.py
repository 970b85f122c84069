# -*- coding: utf-8 -*-
"""
插件清单加载

从 YAML/JSON 文件加载插件记录，并检查清单内容的合理性。
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from ..exceptions import ManifestError
from .record import AddOnRecord, parse_version_range

MANIFEST_SUFFIXES = (".yaml", ".yml", ".json")


class ManifestLoader:
    """
    插件清单加载器

    提供单个插件清单和插件目录文档的加载与验证功能。
    """

    @staticmethod
    def load_from_dict(data: Dict[str, Any]) -> AddOnRecord:
        """从字典创建插件记录"""
        if not isinstance(data, dict):
            raise ManifestError(f"插件清单必须是字典，实际为: {type(data).__name__}")
        try:
            return AddOnRecord(**data)
        except ValidationError as e:
            raise ManifestError(f"插件清单验证失败 {data.get('id')}: {e}") from e

    @staticmethod
    def load_from_file(manifest_path: Path) -> AddOnRecord:
        """从文件加载单个插件清单"""
        data = _read_document(Path(manifest_path))
        return ManifestLoader.load_from_dict(data)

    @staticmethod
    def load_catalog(catalog_path: Path) -> List[AddOnRecord]:
        """
        加载插件目录文档

        文档格式:
            addons:
              - id: ...
                file_version: ...

        Returns:
            插件记录列表，保持文档中的顺序
        """
        catalog_path = Path(catalog_path)
        data = _read_document(catalog_path)
        if not isinstance(data, dict) or not isinstance(data.get("addons"), list):
            raise ManifestError(f"插件目录缺少 addons 列表: {catalog_path}")
        return [ManifestLoader.load_from_dict(entry) for entry in data["addons"]]

    @staticmethod
    def validate_record(record: AddOnRecord) -> List[str]:
        """验证插件记录，返回验证错误列表"""
        errors = []

        if record.dependencies is None:
            return errors

        seen = set()
        for dependency in record.dependencies.addons:
            if dependency.id == record.id:
                errors.append("插件不能依赖自己")

            if dependency.id in seen:
                errors.append(f"重复的依赖声明: {dependency.id}")
            seen.add(dependency.id)

            if (
                dependency.not_before_version is not None
                and dependency.not_from_version is not None
                and dependency.not_before_version > dependency.not_from_version
            ):
                errors.append(
                    f"依赖 {dependency.id} 的文件版本范围无效: "
                    f"{dependency.not_before_version} > {dependency.not_from_version}"
                )

            if dependency.semver:
                try:
                    parse_version_range(dependency.semver)
                except ValueError:
                    errors.append(f"无效的版本范围 {dependency.id}: {dependency.semver}")

        return errors


def _read_document(path: Path) -> Any:
    if not path.exists():
        raise ManifestError(f"插件清单文件不存在: {path}")

    suffix = path.suffix.lower()
    if suffix not in MANIFEST_SUFFIXES:
        raise ManifestError(f"不支持的清单文件格式: {path.suffix}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if suffix == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ManifestError(f"读取插件清单失败 {path}: {e}") from e
