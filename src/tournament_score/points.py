"""トーナメントポイント集計モジュール

マッチ結果からのチームポイント、進行中マッチを含む予想ポイント、
スコアカード形式のチームポイント、個人ステーブルフォードの順位表を計算する。
"""

from collections.abc import Iterable, Sequence
from typing import Literal

from pydantic import BaseModel, Field

from .formats import is_stableford_round
from .match_play import get_provisional_result
from .models import (
    HOLES_PER_ROUND,
    Match,
    MatchResult,
    MatchState,
    Player,
    PointTally,
    ProjectedTally,
    Round,
    Scorecard,
    ScorecardHole,
    ScorecardState,
    TeamScorecard,
)

# 未入力のスコアを最下位に並べるための値
UNSCORED = 999


def _award(result: MatchResult | None) -> tuple[float, float]:
    if result == MatchResult.TEAM1_WIN:
        return 1.0, 0.0
    if result == MatchResult.TEAM2_WIN:
        return 0.0, 1.0
    if result == MatchResult.HALVED:
        return 0.5, 0.5
    return 0.0, 0.0


def calculate_tournament_points(matches: Iterable[Match]) -> PointTally:
    """結果の出たマッチからチームポイントを集計する

    勝ち1ポイント、引き分けは両チーム0.5ポイント。結果のないマッチは数えない。

    Args:
        matches: マッチの一覧

    Returns:
        PointTally: チームごとのポイント
    """
    team1_points = 0.0
    team2_points = 0.0
    for match in matches:
        team1, team2 = _award(match.result)
        team1_points += team1
        team2_points += team2
    return PointTally(team1_points=team1_points, team2_points=team2_points)


def calculate_projected_points(matches: Sequence[Match]) -> ProjectedTally:
    """進行中のマッチの暫定結果を加えた予想ポイントを計算する

    Args:
        matches: マッチの一覧

    Returns:
        ProjectedTally: 確定ポイントと予想ポイント
    """
    actual = calculate_tournament_points(matches)
    team1_projected = actual.team1_points
    team2_projected = actual.team2_points

    for match in matches:
        if match.status != MatchState.IN_PROGRESS:
            continue
        team1, team2 = _award(get_provisional_result(match.hole_scores))
        team1_projected += team1
        team2_projected += team2

    return ProjectedTally(
        team1_points=actual.team1_points,
        team2_points=actual.team2_points,
        team1_projected=team1_projected,
        team2_projected=team2_projected,
    )


def scorecard_status(holes: Sequence[ScorecardHole | None]) -> ScorecardState:
    """グロスの入力状況からスコアカードの状態を求める"""
    entered = sum(1 for hole in holes if hole is not None and hole.gross_score)
    if entered == 0:
        return ScorecardState.NOT_STARTED
    if entered >= HOLES_PER_ROUND:
        return ScorecardState.COMPLETED
    return ScorecardState.IN_PROGRESS


class TeamPoints(BaseModel):
    """スコアカード形式のチームポイント"""

    team_id: str
    points: float = 0.0
    projected: float = 0.0


def calculate_scorecard_team_points(
    team_scorecards: Iterable[TeamScorecard],
    team_ids: Sequence[str],
) -> dict[str, TeamPoints]:
    """チームスコアカードからチームポイントを集計する

    完了したスコアカードは1ポイント確定、進行中のスコアカードは予想ポイントにのみ
    加算する。未開始のスコアカードは数えない。

    Args:
        team_scorecards: チームスコアカードの一覧
        team_ids: 集計対象のチームID

    Returns:
        dict[str, TeamPoints]: チームIDごとのポイント
    """
    tally = {team_id: TeamPoints(team_id=team_id) for team_id in team_ids}
    for scorecard in team_scorecards:
        team = tally.get(scorecard.team_id)
        if team is None:
            continue
        if scorecard.status == ScorecardState.COMPLETED:
            team.points += 1
            team.projected += 1
        elif scorecard.status == ScorecardState.IN_PROGRESS:
            team.projected += 1
    return tally


def rank_scorecards(
    scorecards: Iterable[Scorecard],
    scoring: Literal["stableford", "stroke"] = "stableford",
) -> list[Scorecard]:
    """スコアカードを順位順に並べた新しいリストを返す

    ステーブルフォードはポイントの多い順、ストロークはネット(なければグロス)の
    少ない順。
    """
    if scoring == "stableford":
        return sorted(scorecards, key=lambda sc: sc.total_points or 0, reverse=True)
    return sorted(scorecards, key=lambda sc: sc.total_net or sc.total_gross or UNSCORED)


class RoundPoints(BaseModel):
    points: int
    round_number: int
    course_name: str


class StablefordStanding(BaseModel):
    """個人ステーブルフォード順位表の1行"""

    player_id: str
    name: str
    handicap: float
    round_scores: dict[str, RoundPoints] = Field(default_factory=dict)
    total_points: int = 0
    rounds_played: int = 0
    average_points: str = "0.0"
    position: int = 0


def stableford_leaderboard(
    rounds: Sequence[Round],
    players: Iterable[Player],
    round_id: str | None = None,
) -> list[StablefordStanding]:
    """複数ラウンドの個人ステーブルフォード順位表を作成する

    完了したスコアカードのみ集計する。round_idを指定した場合は
    そのラウンドのポイントのみ合計に含める。

    Args:
        rounds: トーナメントのラウンド
        players: プレーヤー一覧
        round_id: 合計の対象とするラウンド(Noneは全ラウンド)

    Returns:
        list[StablefordStanding]: ポイントの多い順(1ラウンド以上の選手のみ)
    """
    standings = {
        p.id: StablefordStanding(player_id=p.id, name=p.name, handicap=p.handicap)
        for p in players
    }

    for number, rnd in enumerate(rounds, start=1):
        if not is_stableford_round(rnd.format, rnd.scoring_format):
            continue
        for scorecard in rnd.scorecards:
            if scorecard.status != ScorecardState.COMPLETED:
                continue
            standing = standings.get(scorecard.player_id)
            if standing is None:
                continue

            points = scorecard.total_points or 0
            standing.round_scores[rnd.id] = RoundPoints(
                points=points,
                round_number=number,
                course_name=rnd.course_data.name or "Unknown Course",
            )
            if round_id is None or round_id == rnd.id:
                standing.total_points += points
                standing.rounds_played += 1

    board = [s for s in standings.values() if s.rounds_played > 0]
    for standing in board:
        standing.average_points = f"{standing.total_points / standing.rounds_played:.1f}"
    board.sort(key=lambda s: s.total_points, reverse=True)
    for position, standing in enumerate(board, start=1):
        standing.position = position
    return board


class PlayerTotal(BaseModel):
    player_id: str
    points: int


class Playoff(BaseModel):
    """首位タイ(プレーオフ対象)"""

    tied_players: list[PlayerTotal]
    top_score: int


def detect_playoff(rounds: Sequence[Round]) -> Playoff | None:
    """ステーブルフォードの合計ポイントで首位が並んでいるか判定する

    Args:
        rounds: トーナメントのラウンド

    Returns:
        Playoff | None: 首位タイの選手。タイでない場合はNone
    """
    if not any(is_stableford_round(r.format, r.scoring_format) for r in rounds):
        return None

    totals: dict[str, int] = {}
    for rnd in rounds:
        for scorecard in rnd.scorecards:
            if scorecard.status == ScorecardState.COMPLETED:
                totals[scorecard.player_id] = (
                    totals.get(scorecard.player_id, 0) + (scorecard.total_points or 0)
                )

    results = sorted(
        (PlayerTotal(player_id=pid, points=pts) for pid, pts in totals.items()),
        key=lambda r: r.points,
        reverse=True,
    )
    if len(results) < 2:
        return None

    top_score = results[0].points
    tied = [r for r in results if r.points == top_score]
    if len(tied) > 1:
        return Playoff(tied_players=tied, top_score=top_score)
    return None
