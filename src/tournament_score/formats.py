"""形式識別子モジュール

永続化形式の識別子(例: best_ball)とルートパス形式(例: bestball)の相互変換、
および表示名を提供する。対応表はパッケージ同梱のYAMLファイルで管理する。
"""

from enum import StrEnum
from functools import cache
from pathlib import Path

import yaml

FORMATS_FILE = Path(__file__).parent / "data" / "formats.yaml"


class RoundFormat(StrEnum):
    """ラウンド形式(永続化形式の識別子)"""

    INDIVIDUAL_STROKE = "individual_stroke"
    INDIVIDUAL_STABLEFORD = "individual_stableford"
    MATCH_PLAY_SINGLES = "match_play_singles"
    FOUR_BALL = "four_ball"
    FOURSOMES = "foursomes"
    SCRAMBLE = "scramble"
    BEST_BALL = "best_ball"
    TEAM_STABLEFORD = "team_stableford"
    SHAMBLE = "shamble"


STABLEFORD_FORMATS = frozenset(
    {RoundFormat.INDIVIDUAL_STABLEFORD, RoundFormat.TEAM_STABLEFORD}
)


class FormatMapping:
    """形式識別子の対応表"""

    def __init__(self, mapping_file: Path = FORMATS_FILE):
        """初期化

        Args:
            mapping_file: 対応表YAMLファイルのパス
        """
        with mapping_file.open(encoding="utf-8") as f:
            entries: dict[str, dict[str, str]] = yaml.safe_load(f) or {}

        self.database_to_route = {key: value["route"] for key, value in entries.items()}
        self.route_to_database = {
            route: key for key, route in self.database_to_route.items()
        }
        self.display_names: dict[str, str] = {}
        for key, value in entries.items():
            self.display_names[key] = value["display"]
            self.display_names[value["route"]] = value["display"]

    def to_route(self, db_format: str | None) -> str:
        """永続化形式の識別子をルートパス形式に変換する

        Args:
            db_format: 永続化形式の識別子(例: "best_ball")

        Returns:
            str: ルートパス形式(例: "bestball")。未登録の値はそのまま返す

        Examples:
            >>> FormatMapping().to_route("team_stableford")
            'team-stableford'
            >>> FormatMapping().to_route("scramble")
            'scramble'
        """
        if not db_format:
            return ""
        return self.database_to_route.get(db_format, db_format)

    def from_route(self, route_format: str | None) -> str:
        """ルートパス形式を永続化形式の識別子に変換する

        Args:
            route_format: ルートパス形式(例: "bestball")

        Returns:
            str: 永続化形式の識別子(例: "best_ball")。未登録の値はそのまま返す
        """
        if not route_format:
            return ""
        return self.route_to_database.get(route_format, route_format)

    def display_name(self, format_id: str) -> str:
        """表示名を取得する(どちらの形式の識別子でも可)"""
        return self.display_names.get(format_id, format_id)


@cache
def get_format_mapping() -> FormatMapping:
    """同梱の対応表を読み込んだインスタンスを取得する"""
    return FormatMapping()


def to_route(db_format: str | None) -> str:
    return get_format_mapping().to_route(db_format)


def from_route(route_format: str | None) -> str:
    return get_format_mapping().from_route(route_format)


def display_name(format_id: str) -> str:
    return get_format_mapping().display_name(format_id)


def is_stableford_round(round_format: str, scoring_format: str = "") -> bool:
    """ステーブルフォードで集計するラウンドか判定する"""
    return round_format in STABLEFORD_FORMATS or scoring_format == "stableford"
