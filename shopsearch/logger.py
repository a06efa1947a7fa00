#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
巡回ログ
========
標準出力は巡回結果（1行1件）専用なので、ログは次の2か所にだけ出す。

- 標準エラー: rich の RichHandler（集計表と同じ stderr コンソール）
- <log_dir>/crawl.log: 0時ローテーション、30日分保持

requests が内部で使う urllib3 の接続ログは WARNING 以上に絞る
（1ページごとに出るため、巡回ログが埋もれる）。
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FILENAME = "crawl.log"
BACKUP_DAYS = 30
FILE_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
NOISY_LOGGERS = ("urllib3",)

# setup_logging が追加したハンドラ（2回目以降の呼び出しと teardown 用）
_handlers: list[logging.Handler] = []


def default_log_dir() -> Path:
    """<プロジェクトルート>/Logs/"""
    return Path(__file__).parent.parent / "Logs"


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    console: Optional[Console] = None,
) -> Optional[Path]:
    """
    ルートロガーに巡回用のハンドラを設定する。2回目以降はレベルだけ更新する。

    Args:
        log_dir: crawl.log の出力先。None なら <プロジェクトルート>/Logs/
        level:   ログレベル
        console: コンソール出力先（省略時は stderr）

    Returns:
        ログファイルのパス。ディレクトリが使えずコンソールのみの場合は None
    """
    root = logging.getLogger()
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if _handlers:
        for handler in _handlers:
            handler.setLevel(level)
            if isinstance(handler, TimedRotatingFileHandler):
                return Path(handler.baseFilename)
        return None

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    _attach(root, console_handler)

    log_dir = log_dir or default_log_dir()
    log_file = log_dir / LOG_FILENAME
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=str(log_file),
            when="midnight",
            backupCount=BACKUP_DAYS,
            encoding="utf-8",
        )
    except OSError as exc:
        root.warning("crawl.log を開けません。コンソールのみに出力します: %s", exc)
        return None

    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    file_handler.setLevel(level)
    _attach(root, file_handler)

    root.info("ログ出力先: %s（%d日分保持）", log_file, BACKUP_DAYS)
    return log_file


def teardown_logging() -> None:
    """setup_logging が追加したハンドラを外して閉じる"""
    root = logging.getLogger()
    while _handlers:
        handler = _handlers.pop()
        root.removeHandler(handler)
        handler.close()


def _attach(root: logging.Logger, handler: logging.Handler) -> None:
    root.addHandler(handler)
    _handlers.append(handler)
