# -*- coding: utf-8 -*-
"""
addonreq 核心异常

依赖解析中的问题（缺失、循环、版本不符等）不会以异常形式抛出，
而是记录在 RunRequirements 中。这里只定义调用错误和输入数据错误。
"""


class AddOnReqException(Exception):
    """所有 addonreq 自定义异常的基类。"""

    pass


# region 插件异常


class AddOnError(AddOnReqException):
    """与插件相关的错误的基类。"""

    pass


class AddOnMismatchError(AddOnError, ValueError):
    """比较两个不同ID的插件版本时引发。"""

    pass


class AddOnNotFoundError(AddOnError, KeyError):
    """当目录中找不到指定的插件时引发。"""

    pass


class InvalidAddOnFileNameError(AddOnError, ValueError):
    """当插件文件名不符合 <id>-<status>-<version>.zap 格式时引发。"""

    pass


class ManifestError(AddOnError, ValueError):
    """当插件清单无法加载或验证失败时引发。"""

    pass


# endregion

# region 配置异常


class ConfigurationError(AddOnReqException, ValueError):
    """当解析器配置无效时引发。"""

    pass


# endregion
