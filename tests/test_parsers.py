#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
shopsearch/parsers.py のテスト
==============================
都道府県ページ・店舗一覧ページの解析と、失敗時に全体が失敗することを検証する。
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from shopsearch.codes import CityCode, PrefectureCode
from shopsearch.errors import (
    ConsistencyError,
    FormatError,
    MissingElementError,
    UnrecognizedValueError,
)
from shopsearch.models import Machines, Recordings, Scorings
from shopsearch.parsers import parse_city_list, parse_store_list

TOKYO = PrefectureCode(13)
SHINJUKU = CityCode(104)


# ====================================
# 都道府県ページ
# ====================================
class TestParseCityList:
    """parse_city_list() のテスト"""

    def test_single_link(self, index_page):
        """リンク1件から市区町村コードを取り出す"""
        html = index_page("./?todofukenCode=13&cityCode=101")
        assert parse_city_list(html, TOKYO) == [CityCode(101)]

    def test_escaped_ampersand(self):
        """&amp; でエスケープされた href も読める"""
        html = '<a href="./?todofukenCode=13&amp;cityCode=101">千代田区</a>'
        assert parse_city_list(html, TOKYO) == [CityCode(101)]

    def test_document_order_and_duplicates_kept(self, index_page):
        """文書順のまま返し、重複も除去しない"""
        html = index_page(
            "./?todofukenCode=13&cityCode=104",
            "./?todofukenCode=13&cityCode=101",
            "./?todofukenCode=13&cityCode=104",
        )
        assert parse_city_list(html, TOKYO) == [CityCode(104), CityCode(101), CityCode(104)]

    def test_zero_padded_prefecture_in_link(self, index_page):
        """リンク側の都道府県コードが2桁ゼロ埋めでも一致とみなす"""
        html = index_page("./?todofukenCode=03&cityCode=201")
        assert parse_city_list(html, PrefectureCode(3)) == [CityCode(201)]

    def test_no_links(self):
        """該当リンクがなければ空リスト"""
        assert parse_city_list("<html><body><a href='/'>top</a></body></html>", TOKYO) == []

    def test_mismatched_prefecture(self, index_page):
        """別の都道府県のリンクは ConsistencyError（両方のコードを含む）"""
        html = index_page("./?todofukenCode=13&cityCode=101")
        with pytest.raises(ConsistencyError) as exc_info:
            parse_city_list(html, PrefectureCode(14))
        message = str(exc_info.value)
        assert "13" in message
        assert "14" in message

    def test_malformed_link_fails_whole_page(self, index_page):
        """1件でも形式が違えば全体が失敗し、該当リンクのHTMLが文脈に入る"""
        html = index_page(
            "./?todofukenCode=13&cityCode=101",
            "./?todofukenCode=13&cityCode=abc",
        )
        with pytest.raises(FormatError) as exc_info:
            parse_city_list(html, TOKYO)
        assert "cityCode=abc" in str(exc_info.value)
        assert any("cityCode=abc" in ctx for ctx in exc_info.value.context)

    def test_idempotent(self, index_page):
        """同じ入力からは同じ結果"""
        html = index_page("./?todofukenCode=13&cityCode=101", "./?todofukenCode=13&cityCode=102")
        assert parse_city_list(html, TOKYO) == parse_city_list(html, TOKYO)


# ====================================
# 店舗一覧ページ
# ====================================
class TestParseStoreList:
    """parse_store_list() のテスト"""

    def test_full_item(self, store_item, listing_page):
        """全項目を解析できる"""
        stores = parse_store_list(listing_page(store_item()), TOKYO, SHINJUKU)

        assert len(stores) == 1
        store = stores[0]
        assert store.prefecture == TOKYO
        assert store.city == SHINJUKU
        assert store.name == "カラオケDAM 新宿東口店"
        assert store.address == "東京都新宿区新宿3-1-1"
        assert store.latitude == 35.6895
        assert store.longitude == 139.6917
        assert store.phone == "03-1234-5678"
        assert store.url == "https://example.com/shop/1"
        assert store.machines == Machines(ai=True, premier=True)
        assert store.recordings == Recordings(video=True)
        assert store.scorings == Scorings(dx_g=True)

    def test_link_style_name(self, store_item, listing_page):
        """店舗名がリンク形式でも読める"""
        item = store_item(name_html='<a href="/shop/1">ビッグエコー 渋谷店</a>')
        store = parse_store_list(listing_page(item), TOKYO, SHINJUKU)[0]
        assert store.name == "ビッグエコー 渋谷店"

    def test_all_labels(self, store_item, listing_page):
        """既知ラベルはすべて対応するフラグを立てる"""
        item = store_item(
            machines=("LIVE DAM Ai", "LIVE DAM STADIUM", "LIVE DAM", "Premier DAM"),
            features=("DAM★とも録画", "DAM★とも録音", "精密採点Ai", "精密採点DX-G", "精密採点DX"),
        )
        store = parse_store_list(listing_page(item), TOKYO, SHINJUKU)[0]
        assert store.machines == Machines(ai=True, studium=True, normal=True, premier=True)
        assert store.recordings == Recordings(video=True, voice=True)
        assert store.scorings == Scorings(ai=True, dx_g=True, dx=True)

    def test_no_labels(self, store_item, listing_page):
        """アイコン・ラベルがなければ全て False"""
        item = store_item(machines=(), features=())
        store = parse_store_list(listing_page(item), TOKYO, SHINJUKU)[0]
        assert store.machines == Machines()
        assert store.recordings == Recordings()
        assert store.scorings == Scorings()

    def test_missing_website_is_none(self, store_item, listing_page):
        """店舗サイトのリンクがなければ url は None（エラーではない）"""
        store = parse_store_list(listing_page(store_item(website=None)), TOKYO, SHINJUKU)[0]
        assert store.url is None

    def test_malformed_website_fails(self, store_item, listing_page):
        """店舗サイトのリンクがあって不正なら FormatError"""
        with pytest.raises(FormatError):
            parse_store_list(listing_page(store_item(website="not a url")), TOKYO, SHINJUKU)

    def test_negative_coordinates(self, store_item, listing_page):
        """符号付きの座標"""
        item = store_item(map_href="https://maps.google.com/maps?q=-33.8688,151.2093")
        store = parse_store_list(listing_page(item), TOKYO, SHINJUKU)[0]
        assert store.latitude == -33.8688
        assert store.longitude == 151.2093

    def test_explicit_plus_sign_coordinates(self, store_item, listing_page):
        """先頭の + 記号付きの座標も読める"""
        item = store_item(map_href="https://maps.google.com/maps?q=+35.5,+139.5")
        store = parse_store_list(listing_page(item), TOKYO, SHINJUKU)[0]
        assert store.latitude == 35.5
        assert store.longitude == 139.5

    def test_missing_map_link(self, store_item, listing_page):
        """地図リンクがなければ MissingElementError（既定座標で埋めない）"""
        with pytest.raises(MissingElementError):
            parse_store_list(listing_page(store_item(map_href=None)), TOKYO, SHINJUKU)

    def test_malformed_map_link(self, store_item, listing_page):
        """地図リンクの形式が違えば FormatError"""
        item = store_item(map_href="https://maps.google.com/maps?ll=35.6895,139.6917")
        with pytest.raises(FormatError):
            parse_store_list(listing_page(item), TOKYO, SHINJUKU)

    def test_missing_phone(self, store_item, listing_page):
        """電話番号リンクがなければ MissingElementError"""
        with pytest.raises(MissingElementError):
            parse_store_list(listing_page(store_item(phone=None)), TOKYO, SHINJUKU)

    def test_missing_name(self, store_item, listing_page):
        """店舗名要素がなければ MissingElementError"""
        with pytest.raises(MissingElementError):
            parse_store_list(listing_page(store_item(name_html="<p>名前</p>")), TOKYO, SHINJUKU)

    def test_empty_address(self, store_item, listing_page):
        """住所が空なら MissingElementError"""
        with pytest.raises(MissingElementError):
            parse_store_list(listing_page(store_item(address="  ")), TOKYO, SHINJUKU)

    def test_unknown_machine_fails_whole_page(self, store_item, listing_page):
        """未知の機種は UnrecognizedValueError。他の店舗も返さない"""
        html = listing_page(
            store_item(),
            store_item(machines=("Unknown DAM",)),
        )
        with pytest.raises(UnrecognizedValueError) as exc_info:
            parse_store_list(html, TOKYO, SHINJUKU)

        exc = exc_info.value
        assert exc.value == "Unknown DAM"
        assert "Unknown DAM" in str(exc)

    def test_unknown_feature_label(self, store_item, listing_page):
        """未知の機能ラベルは UnrecognizedValueError"""
        item = store_item(features=("精密採点DX", "採点ゲーム"))
        with pytest.raises(UnrecognizedValueError, match="採点ゲーム"):
            parse_store_list(listing_page(item), TOKYO, SHINJUKU)

    def test_error_context_names_page_and_item(self, store_item, listing_page):
        """エラーには都道府県・市区町村と、失敗した店舗のHTMLが付く"""
        html = listing_page(store_item(machines=("Unknown DAM",)))
        with pytest.raises(UnrecognizedValueError) as exc_info:
            parse_store_list(html, TOKYO, SHINJUKU)

        context = exc_info.value.context
        assert len(context) == 2
        assert "13" in context[0] and "104" in context[0]
        assert "result-item" in context[1]
        assert str(exc_info.value).startswith(context[0])

    def test_document_order(self, store_item, listing_page):
        """文書順に返す"""
        html = listing_page(
            store_item(name_html="<span>A店</span>"),
            store_item(name_html="<span>B店</span>"),
            store_item(name_html="<span>C店</span>"),
        )
        names = [s.name for s in parse_store_list(html, TOKYO, SHINJUKU)]
        assert names == ["A店", "B店", "C店"]

    def test_unclosed_items_do_not_share_values(self):
        """</li> を省略した店舗同士で、機種・リンクが混ざらない"""
        html = (
            '<html><body><ul class="result-list">'
            '<li class="result-item">'
            '<div class="result-name"><span>A店</span></div>'
            '<p class="result-address">住所A</p>'
            '<a class="result-map" href="https://maps.google.com/maps?q=35.1,139.1">地図</a>'
            '<a href="tel:03-1111-1111">03-1111-1111</a>'
            '<div class="result-machine"><img alt="LIVE DAM"></div>'
            '<div class="result-feature"><span>精密採点DX</span></div>'
            '<li class="result-item">'
            '<div class="result-name"><span>B店</span></div>'
            '<p class="result-address">住所B</p>'
            '<a class="result-map" href="https://maps.google.com/maps?q=35.2,139.2">地図</a>'
            '<a href="tel:03-2222-2222">03-2222-2222</a>'
            '<a class="result-website" href="https://example.com/b">店舗サイト</a>'
            '<div class="result-machine"><img alt="Premier DAM"></div>'
            '<div class="result-feature"><span>DAM★とも録音</span></div>'
            "</ul></body></html>"
        )

        stores = parse_store_list(html, TOKYO, SHINJUKU)

        assert [s.name for s in stores] == ["A店", "B店"]
        a, b = stores
        assert a.machines == Machines(normal=True)
        assert a.recordings == Recordings()
        assert a.scorings == Scorings(dx=True)
        assert a.url is None
        assert a.phone == "03-1111-1111"
        assert b.machines == Machines(premier=True)
        assert b.recordings == Recordings(voice=True)
        assert b.url == "https://example.com/b"

    def test_nested_item_fails(self, store_item, listing_page):
        """店舗要素の中に別の店舗要素があれば ConsistencyError"""
        outer = store_item(name_html="<span>外側</span>")
        outer = outer[: outer.rfind("</li>")] + "<ul>" + store_item() + "</ul></li>"

        with pytest.raises(ConsistencyError):
            parse_store_list(listing_page(outer), TOKYO, SHINJUKU)

    def test_no_items(self, listing_page):
        """店舗がなければ空リスト"""
        assert parse_store_list(listing_page(), TOKYO, SHINJUKU) == []

    def test_idempotent(self, store_item, listing_page):
        """同じ入力からは同じ結果"""
        html = listing_page(store_item(), store_item(website=None))
        assert parse_store_list(html, TOKYO, SHINJUKU) == parse_store_list(html, TOKYO, SHINJUKU)
