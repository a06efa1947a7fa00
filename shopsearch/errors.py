#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
エラー定義
==========
クロール・解析で発生するエラーの分類。

【方針】
- 想定外のマークアップは必ず例外にする（ベストエフォートで読み飛ばさない）
- 例外は巻き戻りながら add_context() で文脈（どの要素か、どの市区町村か）を積む
- 文脈を積んでも例外クラスは変わらないので、呼び出し側はクラスで判別できる

【表示例】
    都道府県 13 / 市区町村 101 の店舗一覧: 解析中の要素 '<li class="result-item">…': 未知の機種: 'Unknown DAM'
"""

from typing import Optional


class ShopSearchError(Exception):
    """店舗検索クローラーの基底例外"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: list[str] = []

    def add_context(self, context: str) -> "ShopSearchError":
        """
        文脈を外側に1段追加する。

        Returns:
            自分自身（`raise exc.add_context(...)` と書けるように）
        """
        self.context.insert(0, context)
        return self

    def __str__(self) -> str:
        return ": ".join([*self.context, self.message])


class FormatError(ShopSearchError):
    """識別子・数値・URL の書式が不正"""


class MissingElementError(ShopSearchError):
    """必要な要素・属性が見つからない"""


class UnrecognizedValueError(ShopSearchError):
    """値は存在するが、既知のラベルのどれでもない"""

    def __init__(self, message: str, value: str):
        super().__init__(message)
        self.value = value


class ConsistencyError(ShopSearchError):
    """相互チェックの不一致（リクエストした都道府県と異なる等）"""


class TransportError(ShopSearchError):
    """HTTP 取得の失敗（ネットワーク・DNS・ステータスコード）"""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url
