#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
ページ解析
==========
店舗検索サイトのHTMLを型付きの値に分解する。

【対象ページ】
1. 都道府県ページ（?todofukenCode=PP）→ 市区町村コードの一覧
2. 市区町村ページ（?todofukenCode=PP&cityCode=C）→ 店舗情報の一覧

【失敗時の動作】
1件でも解析できない要素があれば、そのページ全体を失敗とする。
例外には失敗した要素の生HTMLと、処理中の都道府県・市区町村が文脈として付く。

ネットワークには触れない（HTML文字列を受け取るだけの純粋関数）。
"""

import logging
import re

from bs4 import BeautifulSoup, Tag

from .codes import CityCode, PrefectureCode
from .errors import ConsistencyError, ShopSearchError
from .extract import (
    apply_labels,
    attr,
    collect_all,
    compile_selector,
    describe_markup,
    match,
    parse_float,
    parse_url,
    select_one,
    text_of,
)
from .models import Machines, Recordings, Scorings, Store

logger = logging.getLogger(__name__)

# 閉じタグ省略（<li> の </li> なし）を HTML の規則どおりに閉じるため lxml を使う
HTML_PARSER = "lxml"


# ====================================
# 都道府県ページ
# ====================================
CITY_LINK_SELECTOR = compile_selector('a[href*="?todofukenCode="]')

CITY_LINK_RE = re.compile(
    r"""
    \./\?
    todofukenCode = (?P<pref> \d+ ) &
    cityCode = (?P<city> \d+ )
    """,
    re.VERBOSE,
)


# ====================================
# 市区町村ページ
# ====================================
STORE_ITEM_SELECTOR = compile_selector("li.result-item")
# 店舗名は「ラベル」と「リンク付きラベル」の2通り
STORE_NAME_SELECTOR = compile_selector(".result-name > span, .result-name > a")
ADDRESS_SELECTOR = compile_selector(".result-address")
MAP_LINK_SELECTOR = compile_selector("a.result-map")
TEL_LINK_SELECTOR = compile_selector('a[href^="tel:"]')
WEBSITE_LINK_SELECTOR = compile_selector("a.result-website")
MACHINE_ICON_SELECTOR = compile_selector(".result-machine img")
FEATURE_LABEL_SELECTOR = compile_selector(".result-feature span")

MAP_QUERY_RE = re.compile(
    r"/maps\?q=(?P<lat>[-+]?\d+(?:\.\d+)?),(?P<lon>[-+]?\d+(?:\.\d+)?)"
)

# 機種アイコンの alt → Machines の属性
MACHINE_LABELS = {
    "LIVE DAM Ai": ("machines", "ai"),
    "LIVE DAM STADIUM": ("machines", "studium"),
    "LIVE DAM": ("machines", "normal"),
    "Premier DAM": ("machines", "premier"),
}

# 機能ラベル → (Recordings / Scorings, 属性)
FEATURE_LABELS = {
    "DAM★とも録画": ("recordings", "video"),
    "DAM★とも録音": ("recordings", "voice"),
    "精密採点Ai": ("scorings", "ai"),
    "精密採点DX-G": ("scorings", "dx_g"),
    "精密採点DX": ("scorings", "dx"),
}


def parse_city_list(html: str, prefecture: PrefectureCode) -> list[CityCode]:
    """
    都道府県ページから市区町村コードを抽出する。

    Args:
        html: 都道府県ページのHTML
        prefecture: このページを取得したときの都道府県コード

    Returns:
        文書順の市区町村コード（重複はそのまま）

    Raises:
        ShopSearchError: どれか1つのリンクが解析できない・都道府県が一致しない場合
    """
    soup = BeautifulSoup(html, HTML_PARSER)

    def parse_link(link: Tag) -> CityCode:
        href = attr(link, "href", "市区町村リンク")
        m = match(CITY_LINK_RE, href, "市区町村リンク")
        found = PrefectureCode.parse(m["pref"])
        if found != prefecture:
            raise ConsistencyError(
                f"都道府県コードが一致しません: 要求 {prefecture}, 取得 {found}"
            )
        return CityCode.parse(m["city"])

    try:
        cities = collect_all(CITY_LINK_SELECTOR.select(soup), parse_link, describe_markup)
    except ShopSearchError as exc:
        exc.add_context(f"都道府県 {prefecture} の市区町村一覧")
        raise

    logger.debug("都道府県 %s: 市区町村 %d件", prefecture, len(cities))
    return cities


def _parse_store(item: Tag, prefecture: PrefectureCode, city: CityCode) -> Store:
    """店舗1件（li.result-item）を解析"""
    # 別の店舗を内包していると、子孫検索が他店舗の値を拾ってしまう
    if STORE_ITEM_SELECTOR.select_one(item) is not None:
        raise ConsistencyError("店舗要素の中に別の店舗要素があります")

    name = text_of(select_one(item, STORE_NAME_SELECTOR, "店舗名"), "店舗名")
    address = text_of(select_one(item, ADDRESS_SELECTOR, "住所"), "住所")

    map_href = attr(select_one(item, MAP_LINK_SELECTOR, "地図リンク"), "href", "地図リンク")
    coords = match(MAP_QUERY_RE, map_href, "地図リンク")
    latitude = parse_float(coords["lat"], "緯度")
    longitude = parse_float(coords["lon"], "経度")

    phone = text_of(select_one(item, TEL_LINK_SELECTOR, "電話番号リンク"), "電話番号")

    # 店舗サイトはリンクがなければ None（リンクがあって不正なら失敗）
    website = WEBSITE_LINK_SELECTOR.select_one(item)
    url = parse_url(attr(website, "href", "店舗サイトリンク")) if website is not None else None

    machines = Machines()
    apply_labels(
        (attr(img, "alt", "機種アイコン") for img in MACHINE_ICON_SELECTOR.select(item)),
        MACHINE_LABELS,
        {"machines": machines},
        "機種",
    )

    recordings = Recordings()
    scorings = Scorings()
    apply_labels(
        (text_of(span, "機能ラベル", required=False) for span in FEATURE_LABEL_SELECTOR.select(item)),
        FEATURE_LABELS,
        {"recordings": recordings, "scorings": scorings},
        "機能ラベル",
    )

    return Store(
        prefecture=prefecture,
        city=city,
        name=name,
        address=address,
        latitude=latitude,
        longitude=longitude,
        phone=phone,
        url=url,
        machines=machines,
        recordings=recordings,
        scorings=scorings,
    )


def parse_store_list(html: str, prefecture: PrefectureCode, city: CityCode) -> list[Store]:
    """
    市区町村ページから店舗情報を抽出する。

    Args:
        html: 市区町村ページのHTML
        prefecture: 都道府県コード（店舗の出所・エラー文脈用）
        city: 市区町村コード（同上）

    Returns:
        文書順の店舗情報

    Raises:
        ShopSearchError: どれか1件でも解析できない場合（途中までの結果は返さない）
    """
    soup = BeautifulSoup(html, HTML_PARSER)

    try:
        stores = collect_all(
            STORE_ITEM_SELECTOR.select(soup),
            lambda item: _parse_store(item, prefecture, city),
            describe_markup,
        )
    except ShopSearchError as exc:
        exc.add_context(f"都道府県 {prefecture} / 市区町村 {city} の店舗一覧")
        raise

    logger.debug("都道府県 %s / 市区町村 %s: 店舗 %d件", prefecture, city, len(stores))
    return stores
