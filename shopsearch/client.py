#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
店舗検索サイト クライアント
===========================
ページの取得（requests）と解析（parsers）をつなぐ。

- 取得は1件ずつ順番に行い、取得のたびに一定時間待つ（成功・失敗を問わない）
- 通信エラー・HTTPエラーは TransportError にしてそのまま送出する（リトライしない）
"""

import logging
import time
from typing import Callable, Optional

import requests

from .codes import CityCode, PrefectureCode
from .config import Settings
from .errors import TransportError
from .models import Store
from .parsers import parse_city_list, parse_store_list

logger = logging.getLogger(__name__)


class ShopSearchClient:
    """
    店舗検索サイトのクライアント

    使用例:
        with ShopSearchClient(load_settings()) as client:
            for city in client.get_city_list(PrefectureCode(13)):
                stores = client.get_store_list(PrefectureCode(13), city)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            settings: 接続先・待ち時間などの設定（未指定時は既定値）
            session: 使用する requests.Session（テスト用に差し替え可能）
            sleep: 待機関数（テスト用に差し替え可能）
        """
        self.settings = settings or Settings()
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": self.settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "ja,en-US;q=0.7,en;q=0.3",
        })
        self._sleep = sleep
        self._pages_fetched = 0

    @property
    def pages_fetched(self) -> int:
        """取得したページ数（失敗した取得も含む）"""
        return self._pages_fetched

    def index_url(self, prefecture: PrefectureCode) -> str:
        return f"{self.settings.base_url}?todofukenCode={prefecture.format()}"

    def listing_url(self, prefecture: PrefectureCode, city: CityCode) -> str:
        return f"{self.index_url(prefecture)}&cityCode={city.format()}"

    def fetch(self, url: str) -> str:
        """
        ページを取得してHTML文字列を返す。

        Raises:
            TransportError: 接続失敗・タイムアウト・4xx/5xx の場合
        """
        logger.debug("GET %s", url)
        self._pages_fetched += 1
        try:
            response = self.session.get(url, timeout=self.settings.request_timeout)
            response.raise_for_status()
            response.encoding = response.apparent_encoding
            return response.text
        except requests.RequestException as e:
            raise TransportError(f"ページ取得に失敗しました: {url} ({e})", url=url) from e
        finally:
            self._sleep(self.settings.request_delay)

    def get_city_list(self, prefecture: PrefectureCode) -> list[CityCode]:
        """都道府県ページを取得して市区町村コードを返す"""
        logger.info("都道府県 %s（%s）を処理中", prefecture, prefecture.name or "不明")
        return parse_city_list(self.fetch(self.index_url(prefecture)), prefecture)

    def get_store_list(self, prefecture: PrefectureCode, city: CityCode) -> list[Store]:
        """市区町村ページを取得して店舗情報を返す"""
        logger.info("都道府県 %s / 市区町村 %s を処理中", prefecture, city)
        return parse_store_list(self.fetch(self.listing_url(prefecture, city)), prefecture, city)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ShopSearchClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
