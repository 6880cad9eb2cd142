"""チームハンディキャップ計算モジュール

スクランブル等のチーム戦で使うチームハンディキャップの計算と、
スクランブルのドライブ使用数トラッカーを提供する。
"""

import logging
import math
from collections.abc import Sequence
from enum import StrEnum

from pydantic import BaseModel, Field

from .handicap import round_one_decimal
from .models import Player

logger = logging.getLogger(__name__)


class HandicapMethod(StrEnum):
    """チームハンディキャップの算出方式"""

    NONE = "none"
    USGA = "usga"
    AMBROSE = "ambrose"
    PERCENTAGE = "percentage"


# チーム人数ごとの係数(ハンディキャップ昇順に適用)
USGA_WEIGHTS: dict[int, tuple[float, ...]] = {
    2: (0.35, 0.15),
    3: (0.20, 0.15, 0.10),
    4: (0.20, 0.15, 0.10, 0.05),
}


def team_handicap(
    handicaps: Sequence[float],
    method: HandicapMethod | str = HandicapMethod.USGA,
    custom_percentages: Sequence[float] | None = None,
) -> float | None:
    """チームハンディキャップを計算する

    Args:
        handicaps: 各選手のハンディキャップ
        method: 算出方式
        custom_percentages: percentage方式の係数(%、ハンディキャップ昇順に適用)

    Returns:
        float | None: 小数1桁に丸めたチームハンディキャップ。
            算出できない場合(USGA方式で未対応の人数、係数の数が人数と
            一致しない、未知の方式)はNone
    """
    if method == HandicapMethod.NONE:
        return 0.0

    team_size = len(handicaps)
    sorted_handicaps = sorted(handicaps)

    if method == HandicapMethod.USGA:
        weights = USGA_WEIGHTS.get(team_size)
        if weights is None:
            logger.debug("USGA方式に対応していないチーム人数です: %d", team_size)
            return None
        total = sum(h * w for h, w in zip(sorted_handicaps, weights))
    elif method == HandicapMethod.AMBROSE:
        if team_size == 0:
            return None
        total = sum(sorted_handicaps) / (team_size * 2)
    elif method == HandicapMethod.PERCENTAGE:
        if custom_percentages is None or len(custom_percentages) != team_size:
            logger.debug("カスタム係数の数がチーム人数と一致しません")
            return None
        total = sum(h * p / 100 for h, p in zip(sorted_handicaps, custom_percentages))
    else:
        logger.debug("未知の算出方式です: %s", method)
        return None

    return round_one_decimal(total)


def method_description(
    method: HandicapMethod | str,
    team_size: int,
    custom_percentages: Sequence[float] | None = None,
) -> str:
    """算出方式の説明文を返す"""
    if method == HandicapMethod.NONE:
        return "No handicap - Gross scores only"
    if method == HandicapMethod.USGA:
        weights = USGA_WEIGHTS.get(team_size)
        breakdown = (
            " + ".join(f"{round(w * 100)}%" for w in weights) if weights else "N/A"
        )
        return f"USGA Scramble Method ({breakdown})"
    if method == HandicapMethod.AMBROSE:
        return f"Traditional Ambrose (Sum ÷ {team_size * 2})"
    if method == HandicapMethod.PERCENTAGE:
        if custom_percentages and len(custom_percentages) == team_size:
            return "Custom ({})".format(
                " + ".join(f"{p:g}%" for p in custom_percentages)
            )
        return "Custom percentages"
    return "Unknown method"


def team_strokes_received(handicap: float, stroke_index: int) -> int:
    """チームハンディキャップでホールに受け取るストローク数

    個人とは異なり、チームハンディキャップは整数に四捨五入してから配分し、
    1ホールあたり最大2ストローク。

    Examples:
        >>> team_strokes_received(6.5, 7)
        1
        >>> team_strokes_received(40, 1)
        2
    """
    rounded = math.floor(handicap + 0.5)
    if rounded <= 0:
        return 0
    if rounded >= 18:
        return 2 if stroke_index <= rounded - 18 else 1
    return 1 if stroke_index <= rounded else 0


def net_team_score(
    gross: int | None, handicap: float, stroke_index: int
) -> int | None:
    """チームのネットスコア(グロス未入力はNone)"""
    if not gross:
        return None
    return gross - team_strokes_received(handicap, stroke_index)


def format_team_handicap(handicap: float | None) -> str:
    """チームハンディキャップの表示文字列"""
    if handicap is None:
        return "N/A"
    if handicap == 0:
        return "Scratch"
    return f"{handicap:g}"


class DriveUsage(BaseModel):
    """選手ごとのドライブ使用数"""

    used: int = 0
    required: int
    remaining: int


class DriveStatus(BaseModel):
    """ある時点でのドライブ使用状況"""

    used: int
    required: int
    remaining: int
    holes_left: int
    is_compliant: bool
    warning: bool


class DriveViolation(BaseModel):
    """最低ドライブ数を満たしていない選手"""

    player_id: str
    player_name: str
    used: int
    required: int
    missing: int


class DriveValidation(BaseModel):
    is_valid: bool
    violations: list[DriveViolation]


class DriveTracker(BaseModel):
    """スクランブルの最低ドライブ数トラッカー

    更新系メソッドは新しいインスタンスを返し、自身は変更しない。
    """

    players: list[Player]
    min_drives_required: int = 3
    total_holes: int = 18
    drive_usage: dict[str, DriveUsage] = Field(default_factory=dict)

    @classmethod
    def create(
        cls,
        players: Sequence[Player],
        min_drives_required: int = 3,
        total_holes: int = 18,
    ) -> "DriveTracker":
        """全選手の使用数0で初期化したトラッカーを生成する"""
        usage = {
            p.id: DriveUsage(
                required=min_drives_required, remaining=min_drives_required
            )
            for p in players
        }
        return cls(
            players=list(players),
            min_drives_required=min_drives_required,
            total_holes=total_holes,
            drive_usage=usage,
        )

    def record_drive(self, player_id: str) -> "DriveTracker":
        """ドライブ使用を1回記録したトラッカーを返す(未登録の選手は無視)"""
        usage = self.drive_usage.get(player_id)
        if usage is None:
            return self

        used = usage.used + 1
        updated = dict(self.drive_usage)
        updated[player_id] = DriveUsage(
            used=used,
            required=usage.required,
            remaining=max(0, self.min_drives_required - used),
        )
        return self.model_copy(update={"drive_usage": updated})

    def player_status(self, player_id: str, current_hole: int) -> DriveStatus:
        usage = self.drive_usage[player_id]
        holes_left = self.total_holes - current_hole
        return DriveStatus(
            used=usage.used,
            required=usage.required,
            remaining=usage.remaining,
            holes_left=holes_left,
            is_compliant=usage.used >= usage.required,
            warning=usage.remaining > holes_left,
        )

    def status_message(self, player_id: str, current_hole: int) -> str:
        """選手のドライブ使用状況メッセージ"""
        player = self._find_player(player_id)
        if player is None or player_id not in self.drive_usage:
            return ""

        status = self.player_status(player_id, current_hole)
        plural = "s" if status.remaining > 1 else ""
        if status.is_compliant:
            return f"✓ {player.name} has met minimum ({status.used}/{status.required})"
        if status.warning:
            return (
                f"⚠️ {player.name} needs {status.remaining} more drive{plural} "
                f"({status.holes_left} holes left)"
            )
        return f"{player.name} needs {status.remaining} more drive{plural}"

    def summary(self, current_hole: int) -> list[dict]:
        return [
            {
                "player_id": p.id,
                "player_name": p.name,
                **self.player_status(p.id, current_hole).model_dump(),
            }
            for p in self.players
            if p.id in self.drive_usage
        ]

    def validate_round(self) -> DriveValidation:
        """ラウンド終了時に最低ドライブ数を満たしているか検証する"""
        violations = []
        for player_id, usage in self.drive_usage.items():
            if usage.used >= usage.required:
                continue
            player = self._find_player(player_id)
            violations.append(
                DriveViolation(
                    player_id=player_id,
                    player_name=player.name if player else "Unknown",
                    used=usage.used,
                    required=usage.required,
                    missing=usage.remaining,
                )
            )
        return DriveValidation(is_valid=not violations, violations=violations)

    def _find_player(self, player_id: str) -> Player | None:
        return next((p for p in self.players if p.id == player_id), None)
