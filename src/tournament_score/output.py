"""入出力処理モジュール

トーナメントのスナップショット(JSON)の読み込みと、
集計レポートのJSONファイル出力を行う。
"""

import json
import logging
from datetime import datetime
from pathlib import Path

from pydantic import Field, ValidationError

from .exceptions import SnapshotError
from .models import HistoricHonour, Player, ScoringModel, Tournament

logger = logging.getLogger(__name__)


class TournamentSnapshot(ScoringModel):
    """永続化層から書き出したトーナメント一式"""

    tournament: Tournament
    players: list[Player] = Field(default_factory=list)
    honours: list[HistoricHonour] = Field(default_factory=list)


def load_snapshot(file_path: Path) -> TournamentSnapshot:
    """JSONファイルからスナップショットを読み込む

    Args:
        file_path: JSONファイルのパス

    Returns:
        TournamentSnapshot: スナップショット

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        SnapshotError: JSONまたはドキュメントの形式が不正な場合
    """
    with file_path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"JSONの形式が不正です: {file_path}") from e

    try:
        snapshot = TournamentSnapshot.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"スナップショットの形式が不正です: {file_path}") from e

    logger.info(
        "スナップショットを読み込みました: %s (ラウンド %d件, プレーヤー %d人)",
        file_path,
        len(snapshot.tournament.rounds),
        len(snapshot.players),
    )
    return snapshot


def save_snapshot(snapshot: TournamentSnapshot, file_path: Path) -> Path:
    """スナップショットをJSONファイルに保存する"""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8") as f:
        json.dump(snapshot.to_dict(), f, ensure_ascii=False, indent=2)
    return file_path


def save_report_to_json(
    report: dict,
    output_dir: Path,
    filename: str | None = None,
) -> Path:
    """集計レポートをJSONファイルに保存する

    Args:
        report: 集計レポート
        output_dir: 出力ディレクトリ
        filename: ファイル名(省略時は自動生成)

    Returns:
        Path: 保存したファイルのパス
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    if filename is None:
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        filename = f"report_{timestamp}.json"

    output_path = output_dir / filename

    with output_path.open("w", encoding="utf-8") as f:
        json.dump(report, f, ensure_ascii=False, indent=2)

    logger.info("レポートを保存しました: %s", output_path)
    return output_path
