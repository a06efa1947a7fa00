#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
フィールド抽出ユーティリティ
============================
HTML要素1つから値を1つ取り出し、取り出せなければ理由付きの例外を投げる。

【方針】
- 「見つからない」は MissingElementError、「形が違う」は FormatError
- ラベル照合は既知ラベルの対応表のみ。表にないラベルは UnrecognizedValueError
- セレクタ・正規表現はモジュール読み込み時に1回だけコンパイルして使い回す
"""

import math
import re
from typing import Callable, Iterable, TypeVar
from urllib.parse import urlparse

import soupsieve as sv
from bs4 import Tag

from .errors import (
    FormatError,
    MissingElementError,
    ShopSearchError,
    UnrecognizedValueError,
)

T = TypeVar("T")
R = TypeVar("R")


def compile_selector(css: str) -> sv.SoupSieve:
    """CSSセレクタをコンパイル（モジュール定数の定義用）"""
    return sv.compile(css)


def select_one(node: Tag, selector: sv.SoupSieve, what: str) -> Tag:
    """最初に一致した要素を返す。なければ MissingElementError"""
    found = selector.select_one(node)
    if found is None:
        raise MissingElementError(f"{what}が見つかりません（{selector.pattern}）")
    return found


def attr(node: Tag, name: str, what: str) -> str:
    """属性値を返す。属性がなければ MissingElementError"""
    value = node.get(name)
    if value is None:
        raise MissingElementError(f"{what}に {name} 属性がありません")
    if isinstance(value, list):
        # class のような複数値属性
        value = " ".join(value)
    return value


def text_of(node: Tag, what: str, required: bool = True) -> str:
    """
    要素のテキストを前後の空白を除いて返す。

    Args:
        node: 対象要素
        what: エラーメッセージ用の項目名
        required: True なら空文字列を MissingElementError にする
    """
    text = node.get_text(" ", strip=True)
    if required and not text:
        raise MissingElementError(f"{what}が空です")
    return text


def match(pattern: re.Pattern, text: str, what: str) -> re.Match:
    """正規表現で検索する。一致しなければ FormatError"""
    m = pattern.search(text)
    if m is None:
        raise FormatError(f"{what}の形式が不正です: {text!r}")
    return m


def parse_float(text: str, what: str) -> float:
    """有限の浮動小数点数に変換する"""
    try:
        value = float(text)
    except (TypeError, ValueError):
        raise FormatError(f"{what}を数値に変換できません: {text!r}") from None
    if not math.isfinite(value):
        raise FormatError(f"{what}が有限の数値ではありません: {text!r}")
    return value


def parse_url(text: str) -> str:
    """
    http/https の絶対URLとして検証する。

    Returns:
        前後の空白を除いたURL
    """
    url = text.strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise FormatError(f"URLを解析できません: {text!r} ({e})") from e
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise FormatError(f"絶対URLではありません: {text!r}")
    return url


def apply_labels(
    labels: Iterable[str],
    table: dict[str, tuple[str, str]],
    targets: dict[str, object],
    what: str,
) -> None:
    """
    既知ラベルに対応するフラグを立てる。

    Args:
        labels: ページ上のラベル文字列
        table: ラベル → (targets のキー, 属性名)
        targets: フラグを立てる対象オブジェクト
        what: エラーメッセージ用の項目名

    Raises:
        UnrecognizedValueError: table にないラベルがあった場合
    """
    for label in labels:
        try:
            group, flag = table[label]
        except KeyError:
            raise UnrecognizedValueError(f"未知の{what}: {label!r}", label) from None
        setattr(targets[group], flag, True)


def collect_all(
    items: Iterable[T],
    parse_one: Callable[[T], R],
    describe: Callable[[T], str],
) -> list[R]:
    """
    全要素を順に解析し、結果をリストで返す（全件成功か、失敗か）。

    最初に失敗した要素で打ち切り、describe(item) を文脈に積んで再送出する。
    途中までの結果は返さない。
    """
    results = []
    for item in items:
        try:
            results.append(parse_one(item))
        except ShopSearchError as exc:
            exc.add_context(describe(item))
            raise
    return results


def describe_markup(node: Tag) -> str:
    """エラー文脈用: 要素の生HTML"""
    return f"解析中の要素 {str(node)!r}"
