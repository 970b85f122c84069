# -*- coding: utf-8 -*-
"""
全局测试配置
提供基本的测试环境设置和共享fixture
"""

import tempfile
from pathlib import Path

import pytest

from addonreq.addons.record import AddOnDependencies, AddOnDependency, AddOnRecord
from addonreq.config import ResolverConfig


def build_addon(
    addon_id,
    file_version=1,
    version=None,
    depends=None,
    runtime_version=None,
    no_dependency_block=False,
    **kwargs,
):
    """
    构造插件记录

    depends 中的元素可以是插件ID字符串，也可以是 AddOnDependency 的参数字典。
    """
    dependencies = None
    if not no_dependency_block and (depends is not None or runtime_version is not None):
        addons = []
        for dep in depends or []:
            if isinstance(dep, str):
                addons.append(AddOnDependency(id=dep))
            else:
                addons.append(AddOnDependency(**dep))
        dependencies = AddOnDependencies(runtime_version=runtime_version, addons=addons)

    return AddOnRecord(
        id=addon_id,
        file_version=file_version,
        version=version,
        dependencies=dependencies,
        **kwargs,
    )


@pytest.fixture
def make_addon():
    """插件记录工厂"""
    return build_addon


@pytest.fixture
def resolver_config():
    """固定运行时版本的解析器配置"""
    return ResolverConfig(host_version="2.5.0", runtime_version="1.8.0_45")


@pytest.fixture
def temp_addon_dir():
    """临时插件目录"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)
