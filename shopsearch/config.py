#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
設定
====
環境変数（~/.env.local も読み込む）からクローラーの設定を組み立てる。

| 環境変数                     | 既定値                                  |
|------------------------------|-----------------------------------------|
| SHOPSEARCH_BASE_URL          | https://www.clubdam.com/shopsearch/     |
| SHOPSEARCH_REQUEST_DELAY     | 0.5（秒。取得ごとに必ず待つ）           |
| SHOPSEARCH_REQUEST_TIMEOUT   | 30（秒）                                |
| SHOPSEARCH_USER_AGENT        | shopsearch-crawler/<version>            |
| SHOPSEARCH_LOG_DIR           | <プロジェクトルート>/Logs               |
| SHOPSEARCH_LOG_LEVEL         | INFO                                    |
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from . import __version__
from .logger import default_log_dir

DEFAULT_BASE_URL = "https://www.clubdam.com/shopsearch/"
DEFAULT_REQUEST_DELAY = 0.5
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"shopsearch-crawler/{__version__}"
DEFAULT_ENV_FILE = Path.home() / ".env.local"


@dataclass
class Settings:
    """クローラー設定"""
    base_url: str = DEFAULT_BASE_URL
    request_delay: float = DEFAULT_REQUEST_DELAY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    log_dir: Path = field(default_factory=default_log_dir)
    log_level: int = logging.INFO


def _read_seconds(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} は秒数で指定してください: {raw!r}") from None
    if not value >= 0:
        raise ValueError(f"{name} は0以上で指定してください: {raw!r}")
    return value


def _read_level(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"{name} のログレベルが不正です: {raw!r}")
    return level


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    設定を読み込む。

    Args:
        env_file: 読み込む .env ファイル。None の場合は ~/.env.local
                  （既に設定済みの環境変数は上書きしない）

    Raises:
        ValueError: 数値・ログレベルの指定が不正な場合
    """
    load_dotenv(env_file or DEFAULT_ENV_FILE)

    log_dir = os.getenv("SHOPSEARCH_LOG_DIR")
    return Settings(
        base_url=os.getenv("SHOPSEARCH_BASE_URL") or DEFAULT_BASE_URL,
        request_delay=_read_seconds("SHOPSEARCH_REQUEST_DELAY", DEFAULT_REQUEST_DELAY),
        request_timeout=_read_seconds("SHOPSEARCH_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        user_agent=os.getenv("SHOPSEARCH_USER_AGENT") or DEFAULT_USER_AGENT,
        log_dir=Path(log_dir) if log_dir else default_log_dir(),
        log_level=_read_level("SHOPSEARCH_LOG_LEVEL", logging.INFO),
    )
