"""チーム戦スコア集計モジュール

チームステーブルフォード、ベストボール、シャンブル、スクランブルの
ホールごとのチームスコアと合計を計算する。
"""

from collections.abc import Mapping, Sequence
from typing import Literal

from pydantic import BaseModel

from .handicap import points_for_net, stableford_points, strokes_received
from .models import Hole, Player
from .team_handicap import net_team_score

Scoring = Literal["stableford", "stroke"]

BEST_BALL_ALLOWANCE_PAIR = 0.90
BEST_BALL_ALLOWANCE_GROUP = 0.85


class PlayerHoleScore(BaseModel):
    gross: int | None = None
    handicap: float = 0.0


class TeamStablefordHole(BaseModel):
    """チームステーブルフォードの1ホール"""

    team_points: int
    player_points: list[int]


class BestBallHole(BaseModel):
    """ベストボールの1ホール(採用されたスコアと選手)"""

    net_score: int | None = None
    points: int | None = None
    player_name: str | None = None


class TeamTotals(BaseModel):
    total_gross: int = 0
    total_net: int = 0
    total_points: int = 0


def calculate_team_stableford_hole(
    player_scores: Sequence[PlayerHoleScore | Mapping],
    par: int,
    stroke_index: int,
) -> TeamStablefordHole:
    """チームステーブルフォードの1ホールを計算する(ベストボール)

    各選手のポイントを個別に計算し、最大値をチームのポイントとする。

    Args:
        player_scores: 各選手のグロスとハンディキャップ
        par: ホールのパー
        stroke_index: ホールのストロークインデックス

    Returns:
        TeamStablefordHole: チームのポイントと選手ごとのポイント(入力順)
    """
    scores = [PlayerHoleScore.model_validate(s) for s in player_scores]
    player_points = [
        stableford_points(s.gross, par, stroke_index, s.handicap) for s in scores
    ]
    return TeamStablefordHole(
        team_points=max(player_points, default=0),
        player_points=player_points,
    )


def best_ball_allowance(
    team_size: int,
    pair: float = BEST_BALL_ALLOWANCE_PAIR,
    group: float = BEST_BALL_ALLOWANCE_GROUP,
) -> float:
    """ベストボールのハンディキャップ許容率(2人以下と3人以上で異なる)"""
    return pair if team_size <= 2 else group


def best_ball_hole(
    players: Sequence[Player],
    grosses: Mapping[str, int | None],
    hole: Hole,
    scoring: Scoring = "stableford",
    allowance: float = 1.0,
) -> BestBallHole:
    """チーム内の最良スコアを求める

    ステーブルフォードは最大ポイント、ストロークは最小ネットを採用する。
    同点の場合は先に並んでいる選手を採用する。

    Args:
        players: チームの選手
        grosses: 選手IDごとのグロス
        hole: ホール情報
        scoring: 集計方式
        allowance: ハンディキャップ許容率(シャンブルは1.0)

    Returns:
        BestBallHole: 採用されたネットまたはポイントと選手名
    """
    best = BestBallHole()
    for player in players:
        gross = grosses.get(player.id)
        if not gross:
            continue

        received = strokes_received(player.handicap * allowance, hole.stroke_index)
        net = gross - received
        if scoring == "stableford":
            points = points_for_net(net, hole.par)
            if best.points is None or points > best.points:
                best = BestBallHole(points=points, player_name=player.name)
        elif best.net_score is None or net < best.net_score:
            best = BestBallHole(net_score=net, player_name=player.name)
    return best


def team_scorecard_totals(
    players: Sequence[Player],
    scores: Mapping[str, Sequence[int | None]],
    course_holes: Sequence[Hole],
    scoring: Scoring = "stableford",
    allowance: float = 1.0,
) -> TeamTotals:
    """ベストボール/シャンブルのチーム合計を計算する

    グロスはホールごとの最少グロス、ネットは最少ネットの合計。
    ステーブルフォードのポイントはホールごとの最大ポイントの合計。

    Args:
        players: チームの選手
        scores: 選手IDごとのホール順グロス
        course_holes: コースのホール情報
        scoring: 集計方式
        allowance: ハンディキャップ許容率

    Returns:
        TeamTotals: グロス、ネット、ポイントの合計
    """
    totals = TeamTotals()
    for index, hole in enumerate(course_holes):
        grosses = {
            player.id: _gross_at(scores.get(player.id, ()), index)
            for player in players
        }
        entered = [g for g in grosses.values() if g]
        if entered:
            totals.total_gross += min(entered)

        best_net = best_ball_hole(players, grosses, hole, "stroke", allowance)
        totals.total_net += best_net.net_score or 0
        if scoring == "stableford":
            best = best_ball_hole(players, grosses, hole, "stableford", allowance)
            totals.total_points += best.points or 0
    return totals


def scramble_totals(
    grosses: Sequence[int | None],
    team_handicap: float,
    course_holes: Sequence[Hole],
) -> TeamTotals:
    """スクランブルのチーム合計(1ホール1スコア)を計算する"""
    totals = TeamTotals()
    for index, hole in enumerate(course_holes):
        gross = _gross_at(grosses, index)
        if not gross:
            continue
        net = net_team_score(gross, team_handicap, hole.stroke_index)
        totals.total_gross += gross
        totals.total_net += net
        totals.total_points += points_for_net(net, hole.par)
    return totals


def _gross_at(grosses: Sequence[int | None], index: int) -> int | None:
    return grosses[index] if index < len(grosses) else None
