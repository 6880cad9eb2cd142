"""例外定義モジュール

スコア計算そのものは例外を送出せず、未入力や算出不能はNone等で表す。
ここで定義する例外は状態遷移、スナップショット読み込み、リポジトリ操作で使う。
"""


class ScoringError(Exception):
    """本パッケージの例外の基底クラス"""

    pass


class MatchStateError(ScoringError):
    """マッチの状態遷移が不正な場合の例外"""

    pass


class SnapshotError(ScoringError):
    """スナップショットの読み込み失敗時の例外"""

    pass


class NotFoundError(ScoringError):
    """リポジトリに対象のドキュメントが存在しない場合の例外"""

    pass
