"""ゴルフトーナメント スコア計算エンジン

ハンディキャップ配分、ネットスコア、ステーブルフォード、マッチプレーの状況判定、
トーナメントポイント集計を提供する。
"""

__version__ = "0.1.0"
