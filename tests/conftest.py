#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
pytest共通フィクスチャ
"""

import sys
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock

import pytest

# プロジェクトルートをパスに追加
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


# ====================================
# HTML組み立て
# ====================================
def _make_store_item(
    name_html: str = "<span>カラオケDAM 新宿東口店</span>",
    address: str = "東京都新宿区新宿3-1-1",
    map_href: Optional[str] = "https://maps.google.com/maps?q=35.6895,139.6917",
    phone: Optional[str] = "03-1234-5678",
    website: Optional[str] = "https://example.com/shop/1",
    machines: tuple = ("LIVE DAM Ai", "Premier DAM"),
    features: tuple = ("DAM★とも録画", "精密採点DX-G"),
) -> str:
    """店舗1件分の li.result-item を組み立てる（None の項目は要素ごと省略）"""
    parts = [
        '<li class="result-item">',
        f'<div class="result-name">{name_html}</div>',
        f'<p class="result-address">{address}</p>',
    ]
    if map_href is not None:
        parts.append(f'<a class="result-map" href="{map_href}">地図を見る</a>')
    if phone is not None:
        parts.append(f'<a class="result-tel" href="tel:{phone}">{phone}</a>')
    if website is not None:
        parts.append(f'<a class="result-website" href="{website}">店舗サイト</a>')
    parts.append('<ul class="result-machine">')
    parts.extend(f'<li><img src="/img/machine.png" alt="{alt}"></li>' for alt in machines)
    parts.append("</ul>")
    parts.append('<ul class="result-feature">')
    parts.extend(f"<li><span>{label}</span></li>" for label in features)
    parts.append("</ul>")
    parts.append("</li>")
    return "\n".join(parts)


def _make_listing_page(*items: str) -> str:
    return (
        "<html><head><title>店舗検索</title></head><body>"
        '<ul class="result-list">' + "\n".join(items) + "</ul>"
        "</body></html>"
    )


def _make_index_page(*hrefs: str) -> str:
    links = "\n".join(f'<li><a href="{href}">市区町村</a></li>' for href in hrefs)
    return (
        "<html><body>"
        '<a href="/shopsearch/">トップ</a>'
        f'<ul class="city-list">{links}</ul>'
        "</body></html>"
    )


@pytest.fixture
def store_item():
    """店舗1件分のHTMLを作る関数"""
    return _make_store_item


@pytest.fixture
def listing_page():
    """店舗一覧ページのHTMLを作る関数"""
    return _make_listing_page


@pytest.fixture
def index_page():
    """都道府県ページのHTMLを作る関数（市区町村リンクの href を渡す）"""
    return _make_index_page


# ====================================
# HTTP モック
# ====================================
@pytest.fixture
def mock_session():
    """requests.Session のモック（get の戻り値は response 属性で差し替え）"""
    session = MagicMock()
    session.headers = {}

    response = MagicMock()
    response.text = "<html><body></body></html>"
    response.apparent_encoding = "utf-8"
    response.raise_for_status = MagicMock()
    session.get.return_value = response
    session.response = response
    return session
