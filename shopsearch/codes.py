#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
識別子型
========
都道府県コード・市区町村コードの値型。

- PrefectureCode: 1〜47（JIS X 0401）。文字列表現は常に2桁ゼロ埋め（"03"）
- CityCode: 0以上の整数。文字列表現はゼロ埋めなしの10進数

都道府県と市区町村を取り違えないよう、素の int とは混ぜずに扱う。
"""

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from .errors import FormatError

# 符号・空白・区切り文字を許さない（int() は "+1" や " 1" も通すため）
_DIGITS_RE = re.compile(r"[0-9]+")

# 都道府県名（JIS X 0401 のコード順）
PREFECTURE_NAMES = [
    "北海道", "青森県", "岩手県", "宮城県", "秋田県", "山形県", "福島県",
    "茨城県", "栃木県", "群馬県", "埼玉県", "千葉県", "東京都", "神奈川県",
    "新潟県", "富山県", "石川県", "福井県", "山梨県", "長野県", "岐阜県",
    "静岡県", "愛知県", "三重県", "滋賀県", "京都府", "大阪府", "兵庫県",
    "奈良県", "和歌山県", "鳥取県", "島根県", "岡山県", "広島県", "山口県",
    "徳島県", "香川県", "愛媛県", "高知県", "福岡県", "佐賀県", "長崎県",
    "熊本県", "大分県", "宮崎県", "鹿児島県", "沖縄県"
]


def _parse_unsigned(text: str, what: str) -> int:
    if not isinstance(text, str) or not _DIGITS_RE.fullmatch(text):
        raise FormatError(f"{what}として解釈できません: {text!r}")
    return int(text)


def _check_value(value: int, what: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise FormatError(f"{what}は0以上の整数である必要があります: {value!r}")


@dataclass(frozen=True, order=True)
class PrefectureCode:
    """都道府県コード"""
    value: int

    def __post_init__(self):
        _check_value(self.value, "都道府県コード")

    @classmethod
    def parse(cls, text: str) -> "PrefectureCode":
        """
        文字列から変換する。先頭の "0" は1つだけ取り除く。

        範囲（1〜47）はここでは検証しない。

        Examples:
            >>> PrefectureCode.parse("07") == PrefectureCode.parse("7")
            True
        """
        if isinstance(text, str) and text.startswith("0"):
            text = text[1:]
        return cls(_parse_unsigned(text, "都道府県コード"))

    @staticmethod
    def enumerate() -> Iterator["PrefectureCode"]:
        """1〜47 を昇順に返す"""
        return (PrefectureCode(i) for i in range(1, len(PREFECTURE_NAMES) + 1))

    def format(self) -> str:
        return f"{self.value:02d}"

    @property
    def name(self) -> Optional[str]:
        """都道府県名（範囲外なら None）"""
        if 1 <= self.value <= len(PREFECTURE_NAMES):
            return PREFECTURE_NAMES[self.value - 1]
        return None

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True, order=True)
class CityCode:
    """市区町村コード"""
    value: int

    def __post_init__(self):
        _check_value(self.value, "市区町村コード")

    @classmethod
    def parse(cls, text: str) -> "CityCode":
        return cls(_parse_unsigned(text, "市区町村コード"))

    def format(self) -> str:
        return str(self.value)

    def __str__(self) -> str:
        return self.format()
