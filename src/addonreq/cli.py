# -*- coding: utf-8 -*-
"""
addonreq 命令行接口
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .addons.catalog import AddOnCatalog
from .addons.manifest import ManifestLoader
from .addons.requirements import RunRequirements
from .config import ResolverConfig
from .exceptions import AddOnReqException

EXIT_RUNNABLE = 0
EXIT_NOT_RUNNABLE = 1
EXIT_INPUT_ERROR = 2


def _print_requirements(requirements: RunRequirements) -> None:
    """格式化并打印运行要求。"""
    summary = requirements.to_dict()

    print(f"\n--- 插件运行要求: {summary['addon']} ---")
    print(f"{'可运行':<12}: {'是' if summary['runnable'] else '否'}")

    if summary["issue"]:
        details = ", ".join(str(d) for d in summary["issue_details"])
        print(f"{'依赖问题':<12}: {summary['issue']} ({details})")

    if summary["dependencies"]:
        print(f"{'依赖':<12}: {', '.join(summary['dependencies'])}")

    if summary["minimum_runtime_version"]:
        print(
            f"{'运行时版本':<12}: >= {summary['minimum_runtime_version']} "
            f"(来自 {summary['addon_minimum_runtime_version']})"
        )

    print("-" * 22)


def main(argv: Optional[List[str]] = None) -> int:
    """命令行主入口"""
    parser = argparse.ArgumentParser(
        description="addonreq - 检查插件能否在当前环境中运行",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("catalog", help="插件目录文件 (YAML/JSON)")
    parser.add_argument("addon_id", help="要检查的插件ID")
    parser.add_argument("--config", "-c", help="解析器配置文件路径")
    parser.add_argument("--host-version", help="宿主程序版本，指定后忽略无法在该版本中加载的插件")
    parser.add_argument("--runtime-version", help="运行时版本，默认为当前 Python 版本")
    parser.add_argument("--json", action="store_true", help="以 JSON 格式输出")
    parser.add_argument("--verbose", "-v", action="store_true", help="输出调试日志")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    catalog_path = Path(args.catalog)
    if not catalog_path.exists():
        print(f"插件目录文件不存在: {catalog_path}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        if args.config:
            config = ResolverConfig.load_from_file(Path(args.config))
        else:
            config = ResolverConfig()
        if args.host_version:
            config.host_version = args.host_version
            config.filter_unloadable = True
        if args.runtime_version:
            config.runtime_version = args.runtime_version

        catalog = AddOnCatalog()
        for addon in ManifestLoader.load_catalog(catalog_path):
            catalog.register(addon)

        target = catalog.require(args.addon_id)
        if config.filter_unloadable and not target.can_load_in_version(config.host_version):
            print(f"插件 {target} 无法在宿主版本 {config.host_version} 中加载", file=sys.stderr)
            return EXIT_NOT_RUNNABLE

        requirements = catalog.check(args.addon_id, config)

    except (AddOnReqException, ValueError) as e:
        print(f"错误: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    if args.json:
        print(json.dumps(requirements.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_requirements(requirements)

    return EXIT_RUNNABLE if requirements.runnable else EXIT_NOT_RUNNABLE


if __name__ == "__main__":
    sys.exit(main())
