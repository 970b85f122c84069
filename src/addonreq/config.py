# -*- coding: utf-8 -*-
"""
解析器配置

基于 Pydantic 的配置验证，支持环境变量解析和多环境配置。
"""

import copy
import json
import os
import platform
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .exceptions import ConfigurationError

# 环境变量匹配模式: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\${([A-Za-z0-9_]+)}")


class ResolverConfig(BaseModel):
    """
    依赖解析器配置

    host_version: 宿主程序版本，None 时不按宿主版本过滤候选插件
    runtime_version: 运行时版本，默认为当前 Python 解释器版本
    filter_unloadable: 解析前是否剔除无法在宿主版本中加载的候选插件
    """

    host_version: Optional[str] = None
    runtime_version: Optional[str] = Field(default_factory=platform.python_version)
    filter_unloadable: bool = False

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    @model_validator(mode="before")
    @classmethod
    def _resolve_env_vars(cls, data: Any) -> Any:
        """在其他验证执行前解析 ${VAR_NAME} 格式的环境变量"""
        if not isinstance(data, dict):
            return data

        def _resolve(value: Any) -> Any:
            if isinstance(value, str):
                match = ENV_VAR_PATTERN.match(value)
                if not match:
                    return value
                env_var_name = match.group(1)
                env_var_value = os.getenv(env_var_name)
                if env_var_value is None:
                    raise ValueError(f"环境变量 '{env_var_name}' 未设置")
                return env_var_value
            elif isinstance(value, dict):
                return {k: _resolve(v) for k, v in value.items()}
            elif isinstance(value, list):
                return [_resolve(v) for v in value]
            return value

        return _resolve(data)

    @model_validator(mode="after")
    def _check_filter(self) -> "ResolverConfig":
        if self.filter_unloadable and not self.host_version:
            raise ValueError("启用 filter_unloadable 时必须设置 host_version")
        return self

    @classmethod
    def load_from_dict(
        cls, config_data: Dict[str, Any], env: Optional[str] = None
    ) -> "ResolverConfig":
        """
        从字典加载配置，支持环境特定的配置覆盖

        配置结构示例：
        {
            "default": {"host_version": "2.5.0"},
            "production": {"runtime_version": "3.12"}
        }

        Args:
            config_data: 配置字典
            env: 目标环境，为 None 时使用 os.getenv("APP_ENV", "development")

        Returns:
            配置实例

        Raises:
            ConfigurationError: 配置验证失败
        """
        if env is None:
            env = os.getenv("APP_ENV", "development")

        base_config = config_data.get("default", {})
        env_config = config_data.get(env, {})

        def deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
            result = copy.deepcopy(base)
            for key, value in overrides.items():
                if isinstance(value, dict) and isinstance(result.get(key), dict):
                    result[key] = deep_merge(result[key], value)
                else:
                    result[key] = value
            return result

        merged_config = deep_merge(base_config, env_config)

        try:
            return cls(**merged_config)
        except ValidationError as e:
            raise ConfigurationError(f"解析器配置无效: {e}") from e

    @classmethod
    def load_from_file(cls, config_path: Path, env: Optional[str] = None) -> "ResolverConfig":
        """从 YAML 或 JSON 文件加载配置"""
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"配置文件不存在: {config_path}")

        suffix = config_path.suffix.lower()
        with open(config_path, "r", encoding="utf-8") as f:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f) or {}
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(f"不支持的配置文件格式: {config_path.suffix}")

        if not isinstance(data, dict):
            raise ConfigurationError(f"配置文件内容必须是字典: {config_path}")
        return cls.load_from_dict(data, env=env)
