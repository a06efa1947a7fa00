#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
店舗データ型定義
================
"""

from dataclasses import dataclass, asdict, field
from typing import Optional

from .codes import CityCode, PrefectureCode


@dataclass
class Machines:
    """設置機種"""
    ai: bool = False        # LIVE DAM Ai
    studium: bool = False   # LIVE DAM STADIUM
    normal: bool = False    # LIVE DAM
    premier: bool = False   # Premier DAM


@dataclass
class Recordings:
    """録画・録音サービス"""
    video: bool = False     # DAM★とも録画
    voice: bool = False     # DAM★とも録音


@dataclass
class Scorings:
    """採点機能"""
    ai: bool = False        # 精密採点Ai
    dx_g: bool = False      # 精密採点DX-G
    dx: bool = False        # 精密採点DX


@dataclass(frozen=True)
class Store:
    """
    店舗情報

    【フィールド説明】
    - prefecture / city: この店舗が載っていた一覧ページの都道府県・市区町村
    - name: 店舗名
    - address: 住所
    - latitude / longitude: 地図リンクから取り出した緯度・経度
    - phone: 電話番号（リンクのテキストそのまま）
    - url: 店舗サイト（リンクがなければ None）
    - machines / recordings / scorings: 機種・録画録音・採点の有無
    """
    prefecture: PrefectureCode
    city: CityCode
    name: str
    address: str
    latitude: float
    longitude: float
    phone: str
    url: Optional[str] = None
    machines: Machines = field(default_factory=Machines)
    recordings: Recordings = field(default_factory=Recordings)
    scorings: Scorings = field(default_factory=Scorings)

    def to_dict(self) -> dict:
        """JSON 出力用の辞書に変換（コードは正規の文字列表現）"""
        return {
            "prefecture": self.prefecture.format(),
            "city": self.city.format(),
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "phone": self.phone,
            "url": self.url,
            "machines": asdict(self.machines),
            "recordings": asdict(self.recordings),
            "scorings": asdict(self.scorings),
        }
