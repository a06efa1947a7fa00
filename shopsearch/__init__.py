#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
カラオケ店舗検索クローラー - コアモジュール
============================================
"""

__version__ = "0.1.0"

from .codes import CityCode, PrefectureCode
from .errors import (
    ConsistencyError,
    FormatError,
    MissingElementError,
    ShopSearchError,
    TransportError,
    UnrecognizedValueError,
)
from .models import Machines, Recordings, Scorings, Store
from .parsers import parse_city_list, parse_store_list
from .config import Settings, load_settings
from .client import ShopSearchClient
from .logger import setup_logging

__all__ = [
    "CityCode",
    "PrefectureCode",
    "ConsistencyError",
    "FormatError",
    "MissingElementError",
    "ShopSearchError",
    "TransportError",
    "UnrecognizedValueError",
    "Machines",
    "Recordings",
    "Scorings",
    "Store",
    "parse_city_list",
    "parse_store_list",
    "Settings",
    "load_settings",
    "ShopSearchClient",
    "setup_logging",
]
