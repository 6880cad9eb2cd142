"""ハンディキャップ計算モジュール

ストロークインデックスに基づくハンディキャップストロークの配分、
ネットスコアとステーブルフォードポイントの計算を提供する。

グロスが0またはNoneのホールは「未入力」として扱い、ネットはNone、
ポイントは0になる。例外は送出しない。
"""

import math
from collections.abc import Sequence

from pydantic import BaseModel

from .models import Hole, ScorecardHole

MAX_HANDICAP = 54.0
STABLEFORD_TARGET_POINTS = 36


def strokes_received(handicap: float, stroke_index: int) -> int:
    """ホールで受け取るハンディキャップストローク数を計算する

    小数部は切り捨てる(12.5 -> 12)。ハンディキャップ54まで対応し、
    1ホールあたり最大3ストローク。

    Args:
        handicap: コースハンディキャップ
        stroke_index: ホールのストロークインデックス(1-18)

    Returns:
        int: 受け取るストローク数(0-3)

    Examples:
        >>> strokes_received(12.5, 12)
        1
        >>> strokes_received(23, 5)
        2
        >>> strokes_received(54, 18)
        3
    """
    full_strokes = math.floor(handicap)

    strokes = 0
    if stroke_index <= full_strokes:
        strokes = 1
    if stroke_index <= full_strokes - 18:
        strokes = 2
    if stroke_index <= full_strokes - 36:
        strokes = 3
    return strokes


def net_score(gross: int | None, handicap: float, stroke_index: int) -> int | None:
    """ホールのネットスコアを計算する

    Args:
        gross: グロススコア(0またはNoneは未入力)
        handicap: コースハンディキャップ
        stroke_index: ホールのストロークインデックス

    Returns:
        int | None: ネットスコア。未入力の場合はNone
    """
    if not gross:
        return None
    return gross - strokes_received(handicap, stroke_index)


def points_for_net(net: int, par: int) -> int:
    """ネットスコアとパーの差からステーブルフォードポイントを求める"""
    diff = par - net
    if diff >= 3:
        return 5
    if diff == 2:
        return 4
    if diff == 1:
        return 3
    if diff == 0:
        return 2
    if diff == -1:
        return 1
    return 0


def stableford_points(
    gross: int | None, par: int, stroke_index: int, handicap: float
) -> int:
    """ホールのステーブルフォードポイントを計算する

    ダブルボギー以下0点、ボギー1点、パー2点、バーディ3点、イーグル4点、
    アルバトロス以上5点(いずれもネット)。

    Args:
        gross: グロススコア(0またはNoneは未入力)
        par: ホールのパー
        stroke_index: ホールのストロークインデックス
        handicap: コースハンディキャップ

    Returns:
        int: ポイント(0-5)
    """
    net = net_score(gross, handicap, stroke_index)
    if net is None:
        return 0
    return points_for_net(net, par)


class HoleResult(BaseModel):
    """1ホールの計算結果"""

    hole_number: int
    par: int
    stroke_index: int
    gross_score: int | None = None
    strokes_received: int = 0
    net_score: int | None = None
    points: int = 0
    score_to_par: int | None = None
    completed: bool = False


class RoundScore(BaseModel):
    """1ラウンドの計算結果"""

    holes: list[HoleResult]
    total_gross: int
    total_net: int
    total_points: int
    holes_completed: int
    target_points: int = STABLEFORD_TARGET_POINTS
    points_vs_target: int


def calculate_hole_score(gross: int | None, hole: Hole, handicap: float) -> HoleResult:
    """1ホールのグロス、ネット、ポイントをまとめて計算する"""
    received = strokes_received(handicap, hole.stroke_index)
    if not gross:
        return HoleResult(
            hole_number=hole.number,
            par=hole.par,
            stroke_index=hole.stroke_index,
        )

    net = gross - received
    return HoleResult(
        hole_number=hole.number,
        par=hole.par,
        stroke_index=hole.stroke_index,
        gross_score=gross,
        strokes_received=received,
        net_score=net,
        points=points_for_net(net, hole.par),
        score_to_par=net - hole.par,
        completed=True,
    )


def calculate_round_score(
    holes: Sequence[ScorecardHole | None],
    course_holes: Sequence[Hole],
    handicap: float,
) -> RoundScore:
    """ラウンド全体のスコアを計算する

    グロス未入力のホールは合計に含めない。

    Args:
        holes: スコアカードのホール(コースのホール順)
        course_holes: コースのホール情報
        handicap: コースハンディキャップ

    Returns:
        RoundScore: ホールごとの結果と合計
    """
    results: list[HoleResult] = []
    for index, course_hole in enumerate(course_holes):
        entry = holes[index] if index < len(holes) else None
        gross = entry.gross_score if entry is not None else None
        results.append(calculate_hole_score(gross, course_hole, handicap))

    played = [r for r in results if r.completed]
    total_points = sum(r.points for r in played)
    return RoundScore(
        holes=results,
        total_gross=sum(r.gross_score for r in played),
        total_net=sum(r.net_score for r in played),
        total_points=total_points,
        holes_completed=len(played),
        points_vs_target=total_points - STABLEFORD_TARGET_POINTS,
    )


def format_score_to_par(score_to_par: int) -> str:
    """パーとの差を表示用に整形する(例: "E", "+2", "-1")"""
    if score_to_par == 0:
        return "E"
    if score_to_par > 0:
        return f"+{score_to_par}"
    return str(score_to_par)


def score_description(score_to_par: int) -> str:
    """パーとの差の呼び名を返す"""
    names = {
        -2: "Eagle",
        -1: "Birdie",
        0: "Par",
        1: "Bogey",
        2: "Double Bogey",
        3: "Triple Bogey",
    }
    if score_to_par <= -3:
        return "Albatross"
    return names.get(score_to_par, f"+{score_to_par}")


def format_handicap(handicap: float | None) -> str:
    """ハンディキャップを小数1桁で表示する"""
    if handicap is None:
        return "0.0"
    return f"{float(handicap):.1f}"


def validate_handicap(handicap: float | str) -> bool:
    """ハンディキャップが0.0-54.0の範囲か検証する"""
    try:
        value = float(handicap)
    except (TypeError, ValueError):
        return False
    if math.isnan(value):
        return False
    return 0.0 <= value <= MAX_HANDICAP


def parse_handicap(value: float | str) -> float:
    """入力値を小数1桁のハンディキャップに変換する(変換できない場合は0.0)"""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(parsed):
        return 0.0
    return round_one_decimal(parsed)


def round_one_decimal(value: float) -> float:
    """小数1桁に四捨五入する(偶数丸めではない)"""
    return math.floor(value * 10 + 0.5) / 10
