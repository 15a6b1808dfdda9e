#!/usr/bin/env python3
"""SurveyLens 命令行入口。 / Command-line entry point.

    surveylens survey.json
    surveylens survey.json --section implementation_roadmap --section jobs_to_be_done
    surveylens survey.json --config surveylens.yaml --output insights.json -v
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from surveylens import __version__
from surveylens.api.synthesize import SECTIONS, synthesize
from surveylens.config import ConfigurationError
from surveylens.primitives.validation import SurveyValidationError

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )


def create_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="surveylens",
        description="从多 Agent 调查结果合成路线图、JTBD 与投放文案",
    )
    parser.add_argument("survey", help="调查结果 JSON 文件路径")
    parser.add_argument(
        "--section",
        action="append",
        choices=list(SECTIONS),
        help="只输出指定段落（可重复；默认全部）",
    )
    parser.add_argument("--config", help="配置文件路径（默认自动搜索 surveylens.yaml）")
    parser.add_argument("--output", help="结果写入该文件（默认输出到 stdout）")
    parser.add_argument("-v", "--verbose", action="store_true", help="输出 DEBUG 日志")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _fail(message: str) -> int:
    print(f"surveylens: error: {message}", file=sys.stderr)
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = create_arg_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    survey_path = Path(args.survey)
    if not survey_path.is_file():
        return _fail(f"调查结果文件不存在: {survey_path}")
    try:
        with open(survey_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        return _fail(f"JSON 解析失败: {survey_path}: {exc}")

    sections: Optional[List[str]] = args.section
    try:
        result = asyncio.run(synthesize(payload, sections=sections, config_file=args.config))
    except (SurveyValidationError, ConfigurationError) as exc:
        return _fail(str(exc))

    text = json.dumps(result, ensure_ascii=False, indent=2)
    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text + "\n", encoding="utf-8")
        logger.info("结果已保存至 %s", out.resolve())
    else:
        print(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
