# -*- coding: utf-8 -*-
"""
插件记录模型测试
"""

import pytest
from pydantic import ValidationError

from addonreq.addons.compatibility import AddOnStatus
from addonreq.addons.record import (
    AddOnDependencies,
    AddOnDependency,
    AddOnRecord,
    is_addon_file_name,
)
from addonreq.exceptions import AddOnMismatchError, InvalidAddOnFileNameError


class TestAddOnDependency:
    """测试依赖声明"""

    def test_defaults(self):
        """测试默认没有任何约束"""
        dep = AddOnDependency(id="base")
        assert dep.not_before_version is None
        assert dep.not_from_version is None
        assert dep.semver is None

    def test_negative_bounds_mean_unset(self):
        """测试负数边界等同于未设置"""
        dep = AddOnDependency(id="base", not_before_version=-1, not_from_version=-1)
        assert dep.not_before_version is None
        assert dep.not_from_version is None

    def test_blank_semver_means_unset(self):
        """测试空白版本范围等同于未设置"""
        assert AddOnDependency(id="base", semver="  ").semver is None

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            AddOnDependency(id="")

    def test_is_satisfied_by(self, make_addon):
        """测试依赖约束检查"""
        dep = AddOnDependency(id="base", not_before_version=2, not_from_version=4, semver=">=1.0 <2.0")
        assert dep.is_satisfied_by(make_addon("base", file_version=3, version="1.5.0"))
        assert not dep.is_satisfied_by(make_addon("base", file_version=1, version="1.5.0"))
        assert not dep.is_satisfied_by(make_addon("base", file_version=5, version="1.5.0"))
        assert not dep.is_satisfied_by(make_addon("base", file_version=3, version="2.0.0"))
        assert not dep.is_satisfied_by(make_addon("base", file_version=3))


class TestAddOnRecordIdentity:
    """测试插件身份"""

    def test_same_identity_ignores_other_fields(self):
        """测试 id、文件版本和语义化版本相同即为同一身份"""
        a = AddOnRecord(id="x", file_version=3, version="1.0.0", name="X", status=AddOnStatus.BETA)
        b = AddOnRecord(
            id="x",
            file_version=3,
            version="1.0.0",
            name="Other",
            status=AddOnStatus.RELEASE,
            dependencies=AddOnDependencies(runtime_version="1.8"),
        )
        assert a == b
        assert a.is_same_identity(b)
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    @pytest.mark.parametrize(
        "other",
        [
            AddOnRecord(id="y", file_version=3, version="1.0.0"),
            AddOnRecord(id="x", file_version=4, version="1.0.0"),
            AddOnRecord(id="x", file_version=3, version="1.0.1"),
            AddOnRecord(id="x", file_version=3),
        ],
    )
    def test_different_identity(self, other):
        """测试任意一个身份字段不同即不相等"""
        assert AddOnRecord(id="x", file_version=3, version="1.0.0") != other

    def test_prerelease_is_different_identity(self):
        """测试预发布版本与正式版本是不同的身份"""
        assert AddOnRecord(id="x", file_version=1, version="1.0.0-alpha.beta") != AddOnRecord(
            id="x", file_version=1, version="1.0.0"
        )

    def test_not_equal_to_other_types(self):
        assert AddOnRecord(id="x", file_version=1) != "x"

    @pytest.mark.parametrize("version", ["not a version", "1.0", "2.0.0b1"])
    def test_invalid_version_rejected(self, version):
        """测试版本必须是完整的语义化版本"""
        with pytest.raises(ValidationError, match="无效的版本格式"):
            AddOnRecord(id="x", file_version=1, version=version)

    def test_semver_prerelease_and_build_accepted(self):
        addon = AddOnRecord(id="x", file_version=1, version="1.0.0-alpha.beta+build.7")
        assert addon.semantic_version.prerelease == ("alpha", "beta")
        assert addon.semantic_version.build == ("build", "7")

    def test_negative_file_version_rejected(self):
        with pytest.raises(ValidationError):
            AddOnRecord(id="x", file_version=-1)

    def test_records_are_immutable(self):
        addon = AddOnRecord(id="x", file_version=1)
        with pytest.raises(ValidationError):
            addon.file_version = 2

    def test_str(self):
        assert str(AddOnRecord(id="x", file_version=2)) == "[id=x, fileVersion=2]"
        assert (
            str(AddOnRecord(id="x", file_version=2, version="1.2.3"))
            == "[id=x, fileVersion=2, version=1.2.3]"
        )


class TestIsUpdateTo:
    """测试更新判断"""

    def test_higher_file_version_wins(self):
        newer = AddOnRecord(id="x", file_version=5, status=AddOnStatus.ALPHA)
        older = AddOnRecord(id="x", file_version=4, status=AddOnStatus.RELEASE)
        assert newer.is_update_to(older)

    def test_same_file_version_compares_status(self):
        beta = AddOnRecord(id="x", file_version=4, status=AddOnStatus.BETA)
        release = AddOnRecord(id="x", file_version=4, status=AddOnStatus.RELEASE)
        assert release.is_update_to(beta)
        assert not beta.is_update_to(release)
        assert not beta.is_update_to(beta)

    def test_lower_file_version_falls_back_to_status(self):
        """测试文件版本较低时仍按状态等级判断"""
        lower = AddOnRecord(id="x", file_version=3, status=AddOnStatus.RELEASE)
        higher = AddOnRecord(id="x", file_version=4, status=AddOnStatus.BETA)
        assert lower.is_update_to(higher)

    def test_different_addons_raise(self):
        with pytest.raises(AddOnMismatchError, match="不同的插件"):
            AddOnRecord(id="x", file_version=1).is_update_to(AddOnRecord(id="y", file_version=1))


class TestVersionRequirements:
    """测试版本要求相关方法"""

    def test_matches_semver(self, make_addon):
        addon = make_addon("x", version="1.4.2")
        assert addon.matches_semver(">=1.0.0")
        assert addon.matches_semver("~1.4")
        assert addon.matches_semver("^1.2")
        assert not addon.matches_semver(">=2.0")

    @pytest.mark.parametrize(
        "expression",
        ["1.*", "1.x", "1.4.*", ">= 1.0.0 & < 2.0.0", ">=1.0.0 <2.0.0", "0.9 | 1.4.2", "1.0.0 - 2.0.0"],
    )
    def test_matches_semver_range_syntax(self, make_addon, expression):
        """测试通配符、"&"/"|" 连接符和连字符范围"""
        assert make_addon("x", version="1.4.2").matches_semver(expression)

    @pytest.mark.parametrize("expression", ["2.*", ">= 2.0.0 & < 3.0.0", "0.9 | 1.5"])
    def test_does_not_match_semver_range(self, make_addon, expression):
        assert not make_addon("x", version="1.4.2").matches_semver(expression)

    def test_matches_semver_without_version(self, make_addon):
        assert not make_addon("x").matches_semver(">=1.0")

    def test_matches_semver_with_invalid_expression(self, make_addon):
        assert not make_addon("x", version="1.0.0").matches_semver("not-a-range")

    def test_matches_prerelease(self, make_addon):
        """测试预发布版本只匹配同一版本号上带预发布标记的范围"""
        addon = make_addon("x", version="1.0.0-alpha.beta")
        assert addon.matches_semver(">=1.0.0-alpha")
        assert not addon.matches_semver(">=0.9.0")

    def test_runtime_version(self, make_addon):
        addon = make_addon("x", runtime_version="1.8")
        assert addon.minimum_runtime_version == "1.8"
        assert addon.can_run_in_runtime_version("1.8.0_45")
        assert not addon.can_run_in_runtime_version("1.7.0")
        assert not addon.can_run_in_runtime_version(None)

    def test_no_dependency_block_can_always_run(self, make_addon):
        addon = make_addon("x")
        assert not addon.has_dependency_block
        assert addon.minimum_runtime_version == ""
        assert addon.can_run_in_runtime_version(None)

    def test_can_load_in_version(self, make_addon):
        addon = make_addon("x", not_before_version="2.4.0")
        assert addon.can_load_in_version("2.4.0")
        assert not addon.can_load_in_version("2.3.0")


class TestDependsOn:
    """测试依赖关系查询"""

    def test_dependency_ids(self, make_addon):
        assert make_addon("x", depends=["a", "b"]).dependency_ids == ["a", "b"]
        assert make_addon("x").dependency_ids == []

    def test_depends_on(self, make_addon):
        addon = make_addon("x", depends=[{"id": "a", "not_before_version": 2}])
        assert addon.depends_on(make_addon("a", file_version=2))
        assert not addon.depends_on(make_addon("a", file_version=1))
        assert not addon.depends_on(make_addon("b", file_version=2))

    def test_depends_on_semver(self, make_addon):
        addon = make_addon("x", depends=[{"id": "a", "semver": ">=1.0"}])
        assert addon.depends_on(make_addon("a", version="1.2.0"))
        assert not addon.depends_on(make_addon("a", version="0.9.0"))
        assert not addon.depends_on(make_addon("a"))

    def test_depends_on_any(self, make_addon):
        addon = make_addon("x", depends=["a"])
        assert addon.depends_on_any([make_addon("b"), make_addon("a")])
        assert not addon.depends_on_any([make_addon("b")])
        assert not make_addon("y").depends_on_any([make_addon("a")])


class TestFileName:
    """测试插件文件名解析"""

    @pytest.mark.parametrize(
        "file_name,expected",
        [
            ("ascanrules-beta-12.zap", True),
            ("ascanrules-release-1.ZAP", True),
            ("ascanrules-beta-12.jar", False),
            ("ascanrules-beta.zap", False),
            ("ascanrules-stable-12.zap", False),
            ("ascanrules-beta-x.zap", False),
        ],
    )
    def test_is_addon_file_name(self, file_name, expected):
        assert is_addon_file_name(file_name) is expected

    def test_from_file_name(self):
        addon = AddOnRecord.from_file_name("ascanrules-beta-12.zap")
        assert addon.id == "ascanrules"
        assert addon.name == "ascanrules"
        assert addon.status is AddOnStatus.BETA
        assert addon.file_version == 12
        assert addon.version is None

    def test_from_file_name_with_extra_fields(self):
        addon = AddOnRecord.from_file_name("ascanrules-beta-12.zap", name="Active Scan Rules")
        assert addon.name == "Active Scan Rules"

    def test_invalid_file_name(self):
        with pytest.raises(InvalidAddOnFileNameError):
            AddOnRecord.from_file_name("readme.txt")
