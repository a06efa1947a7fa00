#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
カラオケ店舗検索クローラー
==========================
都道府県 → 市区町村 → 店舗 の順に店舗検索サイトを巡回し、店舗情報を標準出力に書き出す。

【使い方】
1. 環境準備:
   pip install -e .

2. 実行:
   python shop_crawler.py                       # 全47都道府県
   python shop_crawler.py -p 13 -p 14           # 東京都・神奈川県のみ
   python shop_crawler.py --cities-only         # 市区町村コードだけ列挙
   python shop_crawler.py --format json > stores.jsonl

3. 結果:
   - 標準出力: 市区町村1件ごと・店舗1件ごとに1行
   - 標準エラー: ログ・集計表
   - Logs/crawl.log: ログ（日次ローテーション）

【注意事項】
- 取得ごとに一定時間（既定0.5秒）待機します
- 想定外のページ構造を見つけた時点でエラー終了します（途中結果は出力済みの分のみ）
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shopsearch import (
    CityCode,
    PrefectureCode,
    ShopSearchClient,
    ShopSearchError,
    Store,
    load_settings,
    setup_logging,
)

logger = logging.getLogger(__name__)

# 集計表・エラー表示用（標準出力は結果専用）
console = Console(stderr=True)


# ====================================
# データクラス
# ====================================
@dataclass
class CrawlSummary:
    """巡回結果の集計（都道府県ごとの市区町村数・店舗数）"""
    cities: dict[PrefectureCode, int] = field(default_factory=dict)
    stores: dict[PrefectureCode, int] = field(default_factory=dict)

    @property
    def total_cities(self) -> int:
        return sum(self.cities.values())

    @property
    def total_stores(self) -> int:
        return sum(self.stores.values())


# ====================================
# 巡回
# ====================================
def crawl(
    client: ShopSearchClient,
    prefectures: Iterable[PrefectureCode],
    cities_only: bool = False,
    on_city: Optional[Callable[[PrefectureCode, CityCode], None]] = None,
    on_store: Optional[Callable[[Store], None]] = None,
) -> CrawlSummary:
    """
    都道府県ごとに市区町村を列挙し、市区町村ごとに店舗を取得する。

    最初のエラーでそのまま例外を送出する（次の都道府県には進まない）。

    Args:
        client: 店舗検索クライアント
        prefectures: 巡回する都道府県
        cities_only: True なら市区町村の列挙だけで止める
        on_city: 市区町村を1件見つけるたびに呼ばれる
        on_store: 店舗を1件解析するたびに呼ばれる
    """
    summary = CrawlSummary()

    for prefecture in prefectures:
        cities = client.get_city_list(prefecture)
        summary.cities[prefecture] = summary.cities.get(prefecture, 0) + len(cities)
        summary.stores.setdefault(prefecture, 0)
        for city in cities:
            if on_city:
                on_city(prefecture, city)

        if cities_only:
            continue

        for city in cities:
            stores = client.get_store_list(prefecture, city)
            summary.stores[prefecture] += len(stores)
            for store in stores:
                if on_store:
                    on_store(store)

    return summary


# ====================================
# 出力
# ====================================
def format_city(prefecture: PrefectureCode, city: CityCode, output_format: str) -> str:
    if output_format == "json":
        return json.dumps({"prefecture": prefecture.format(), "city": city.format()})
    return f"{prefecture}\t{city}"


def format_store(store: Store, output_format: str) -> str:
    if output_format == "json":
        return json.dumps(store.to_dict(), ensure_ascii=False)
    return f"{store.prefecture}\t{store.city}\t{store!r}"


def print_summary(summary: CrawlSummary, cities_only: bool) -> None:
    """都道府県別の集計表を表示"""
    table = Table(title="📊 巡回結果サマリー", show_header=True, header_style="bold magenta")
    table.add_column("都道府県", style="cyan")
    table.add_column("市区町村数", justify="right")
    if not cities_only:
        table.add_column("店舗数", justify="right")

    for prefecture in sorted(summary.cities):
        row = [f"{prefecture} {prefecture.name or ''}".strip(), str(summary.cities[prefecture])]
        if not cities_only:
            row.append(str(summary.stores[prefecture]))
        table.add_row(*row)

    total = ["[bold]合計[/]", f"[bold]{summary.total_cities}[/]"]
    if not cities_only:
        total.append(f"[bold]{summary.total_stores}[/]")
    table.add_row(*total)

    console.print(table)


# ====================================
# CLI
# ====================================
def _prefecture_arg(text: str) -> PrefectureCode:
    try:
        return PrefectureCode.parse(text)
    except ShopSearchError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="カラオケ店舗検索クローラー")
    parser.add_argument(
        "-p", "--prefecture",
        action="append",
        type=_prefecture_arg,
        help="巡回する都道府県コード（複数指定可。省略時は全47都道府県）",
    )
    parser.add_argument(
        "--cities-only",
        action="store_true",
        help="市区町村コードの列挙だけ行う",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="出力形式（text: タブ区切り / json: 1行1オブジェクト）",
    )
    parser.add_argument("--env-file", type=Path, help="読み込む .env ファイル")
    parser.add_argument("--log-level", help="ログレベル（DEBUG / INFO / WARNING ...）")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI エントリーポイント。終了コードを返す"""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.env_file)
    except ValueError as e:
        console.print(f"[bold red]設定エラー:[/] {escape(str(e))}")
        return 2

    level = settings.log_level
    if args.log_level:
        level = logging.getLevelName(args.log_level.upper())
        if not isinstance(level, int):
            console.print(f"[bold red]エラー: ログレベルが不正です: {escape(args.log_level)}[/]")
            return 2
    setup_logging(settings.log_dir, level, console)

    # 同じ都道府県を2回指定しても巡回は1回（指定順は保つ）
    prefectures = list(dict.fromkeys(args.prefecture)) if args.prefecture else list(PrefectureCode.enumerate())

    def emit_city(prefecture: PrefectureCode, city: CityCode) -> None:
        print(format_city(prefecture, city, args.format), flush=True)

    def emit_store(store: Store) -> None:
        print(format_store(store, args.format), flush=True)

    with ShopSearchClient(settings) as client:
        try:
            summary = crawl(
                client,
                prefectures,
                cities_only=args.cities_only,
                on_city=emit_city,
                on_store=emit_store,
            )
        except ShopSearchError as e:
            logger.error("巡回を中断しました: %s", e, exc_info=True)
            console.print(f"[bold red]エラー:[/] {escape(str(e))}", highlight=False)
            return 1

        logger.info("巡回完了: 取得ページ %d件", client.pages_fetched)

    print_summary(summary, args.cities_only)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
