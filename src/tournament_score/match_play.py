"""マッチプレーモジュール

ホールの勝者判定、マッチの途中経過(何アップ、ドーミー、早期決着)の計算、
ホールスコア記録によるマッチの状態遷移を提供する。
"""

from collections.abc import Mapping, Sequence
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

from .exceptions import MatchStateError
from .handicap import net_score
from .models import (
    HOLES_PER_ROUND,
    Hole,
    HoleScore,
    HoleWinner,
    Match,
    MatchFormat,
    MatchResult,
    MatchState,
    MatchStatus,
    ScoringModel,
)


class SinglesNets(ScoringModel):
    """シングルス: 1対1の選手ネット"""

    format: Literal[MatchFormat.SINGLES] = MatchFormat.SINGLES
    team1_player1: int | None = None
    team2_player1: int | None = None


class FoursomesNets(ScoringModel):
    """フォアサム: 1つのボールを交互に打つため、チームごとに1つのネット"""

    format: Literal[MatchFormat.FOURSOMES] = MatchFormat.FOURSOMES
    team1_score: int | None = None
    team2_score: int | None = None


class FourballNets(ScoringModel):
    """フォアボール: チームごとに最大2人の選手ネット"""

    format: Literal[MatchFormat.FOURBALL] = MatchFormat.FOURBALL
    team1_player1: int | None = None
    team1_player2: int | None = None
    team2_player1: int | None = None
    team2_player2: int | None = None


HoleNets = Annotated[
    SinglesNets | FoursomesNets | FourballNets, Field(discriminator="format")
]
_hole_nets_adapter: TypeAdapter[HoleNets] = TypeAdapter(HoleNets)


def _compare(team1: int, team2: int) -> HoleWinner:
    if team1 < team2:
        return HoleWinner.TEAM1
    if team2 < team1:
        return HoleWinner.TEAM2
    return HoleWinner.HALVED


def _coerce_nets(
    match_format: MatchFormat | str, scores: HoleNets | HoleScore | Mapping
) -> HoleNets | None:
    if isinstance(scores, (SinglesNets, FoursomesNets, FourballNets)):
        return scores
    try:
        fmt = MatchFormat(match_format)
    except ValueError:
        return None
    if isinstance(scores, BaseModel):
        scores = scores.model_dump()
    return _hole_nets_adapter.validate_python({**scores, "format": fmt})


def determine_hole_winner(
    match_format: MatchFormat | str,
    scores: HoleNets | HoleScore | Mapping | None,
    hole: Hole | Mapping | None,
) -> HoleWinner | None:
    """ホールの勝者を判定する

    ネットは呼び出し側でハンディキャップ適用済みであること。
    低いネットが勝ち、同じなら引き分け。

    Args:
        match_format: マッチ形式
        scores: 形式ごとのネット(ネットのモデル、HoleScoreまたは辞書)
        hole: ホール情報

    Returns:
        HoleWinner | None: 勝者。入力不足で判定できない場合はNone
    """
    if not scores or not hole:
        return None

    nets = _coerce_nets(match_format, scores)
    match nets:
        case SinglesNets(team1_player1=team1, team2_player1=team2):
            if not team1 or not team2:
                return None
            return _compare(team1, team2)
        case FoursomesNets(team1_score=team1, team2_score=team2):
            if not team1 or not team2:
                return None
            return _compare(team1, team2)
        case FourballNets():
            # 未入力の選手は除外する(0として扱わない)
            team1_nets = [s for s in (nets.team1_player1, nets.team1_player2) if s]
            team2_nets = [s for s in (nets.team2_player1, nets.team2_player2) if s]
            if not team1_nets or not team2_nets:
                return None
            return _compare(min(team1_nets), min(team2_nets))
        case _:
            return None


def score_match_hole(
    match_format: MatchFormat | str,
    gross: Mapping[str, int | None],
    team1_handicaps: Sequence[float],
    team2_handicaps: Sequence[float],
    hole: Hole,
) -> HoleScore:
    """グロスからネットを計算し、勝者を判定したホールスコアを作成する

    フォアサムはペアのハンディキャップの平均を使う。

    Args:
        match_format: マッチ形式
        gross: グロス入力
            (singles/fourball: team1Player1等、foursomes: team1Score/team2Score)
        team1_handicaps: チーム1選手のハンディキャップ(選手順)
        team2_handicaps: チーム2選手のハンディキャップ(選手順)
        hole: ホール情報

    Returns:
        HoleScore: グロス、ネット、勝者を含むホールスコア
    """
    fmt = MatchFormat(match_format)
    si = hole.stroke_index

    def _hcp(handicaps: Sequence[float], index: int) -> float:
        return handicaps[index] if index < len(handicaps) else 0.0

    if fmt == MatchFormat.SINGLES:
        t1 = gross.get("team1Player1")
        t2 = gross.get("team2Player1")
        nets = SinglesNets(
            team1_player1=net_score(t1, _hcp(team1_handicaps, 0), si),
            team2_player1=net_score(t2, _hcp(team2_handicaps, 0), si),
        )
        return HoleScore(
            team1_gross=t1,
            team2_gross=t2,
            team1_player1=nets.team1_player1,
            team2_player1=nets.team2_player1,
            winner=determine_hole_winner(fmt, nets, hole),
        )

    if fmt == MatchFormat.FOURSOMES:
        t1 = gross.get("team1Score")
        t2 = gross.get("team2Score")
        avg1 = (_hcp(team1_handicaps, 0) + _hcp(team1_handicaps, 1)) / 2
        avg2 = (_hcp(team2_handicaps, 0) + _hcp(team2_handicaps, 1)) / 2
        nets = FoursomesNets(
            team1_score=net_score(t1, avg1, si),
            team2_score=net_score(t2, avg2, si),
        )
        return HoleScore(
            team1_gross=t1,
            team2_gross=t2,
            team1_score=nets.team1_score,
            team2_score=nets.team2_score,
            winner=determine_hole_winner(fmt, nets, hole),
        )

    keys = ("team1Player1", "team1Player2", "team2Player1", "team2Player2")
    raw = [gross.get(key) for key in keys]
    handicaps = [
        _hcp(team1_handicaps, 0),
        _hcp(team1_handicaps, 1),
        _hcp(team2_handicaps, 0),
        _hcp(team2_handicaps, 1),
    ]
    computed = [net_score(g, h, si) for g, h in zip(raw, handicaps)]
    nets = FourballNets(
        team1_player1=computed[0],
        team1_player2=computed[1],
        team2_player1=computed[2],
        team2_player2=computed[3],
    )
    return HoleScore(
        team1_player1_gross=raw[0],
        team1_player2_gross=raw[1],
        team2_player1_gross=raw[2],
        team2_player2_gross=raw[3],
        team1_player1=computed[0],
        team1_player2=computed[1],
        team2_player1=computed[2],
        team2_player2=computed[3],
        winner=determine_hole_winner(fmt, nets, hole),
    )


def match_status_text(
    differential: int,
    holes_remaining: int,
    is_complete: bool,
    team1_name: str = "Team 1",
    team2_name: str = "Team 2",
) -> str:
    """マッチ状況の表示テキスト(例: "2 UP", "3&2", "AS")を返す"""
    if differential == 0:
        return "AS"

    margin = abs(differential)
    leader = team1_name if differential > 0 else team2_name
    if is_complete and holes_remaining > 0:
        # 早期決着(例: 3&2 は残り2ホールで3アップ)
        return f"{leader} {margin}&{holes_remaining}"
    return f"{leader} {margin} UP"


def calculate_match_status(
    hole_scores: Sequence[HoleScore | None],
    current_hole: int = HOLES_PER_ROUND,
    team1_name: str = "Team 1",
    team2_name: str = "Team 2",
) -> MatchStatus:
    """マッチの途中経過を計算する

    current_holeまでの勝者が決まったホールを集計する。
    18ホール終了、またはリードが残りホール数を上回った時点で決着とする。

    Args:
        hole_scores: 各ホールのスコア
        current_hole: 集計対象とするホール数
        team1_name: チーム1の表示名
        team2_name: チーム2の表示名

    Returns:
        MatchStatus: リード、消化ホール数、残りホール数、決着有無、表示テキスト
    """
    team1_up = 0
    holes_played = 0

    for hole in hole_scores[:current_hole]:
        if hole is None or hole.winner is None:
            continue
        holes_played += 1
        if hole.winner == HoleWinner.TEAM1:
            team1_up += 1
        elif hole.winner == HoleWinner.TEAM2:
            team1_up -= 1

    holes_remaining = HOLES_PER_ROUND - holes_played
    is_complete = holes_played == HOLES_PER_ROUND or abs(team1_up) > holes_remaining

    return MatchStatus(
        team1_up=team1_up,
        holes_played=holes_played,
        holes_remaining=holes_remaining,
        is_complete=is_complete,
        status=match_status_text(
            team1_up, holes_remaining, is_complete, team1_name, team2_name
        ),
    )


def _result_from_differential(team1_up: int) -> MatchResult:
    if team1_up > 0:
        return MatchResult.TEAM1_WIN
    if team1_up < 0:
        return MatchResult.TEAM2_WIN
    return MatchResult.HALVED


def get_match_result(hole_scores: Sequence[HoleScore | None]) -> MatchResult | None:
    """マッチの結果を返す(決着していない場合はNone)"""
    status = calculate_match_status(hole_scores)
    if not status.is_complete:
        return None
    return _result_from_differential(status.team1_up)


def get_provisional_result(hole_scores: Sequence[HoleScore | None]) -> MatchResult:
    """現時点で終了した場合の暫定結果を返す(進行中のマッチの予想用)"""
    return _result_from_differential(calculate_match_status(hole_scores).team1_up)


def new_match(
    match_format: MatchFormat | str,
    team1_players: Sequence[str],
    team2_players: Sequence[str],
    match_id: str = "",
) -> Match:
    """18ホール分の空スコアを持つ未開始のマッチを作成する"""
    return Match(
        id=match_id,
        format=MatchFormat(match_format),
        team1_players=list(team1_players),
        team2_players=list(team2_players),
    )


def record_hole(
    match: Match,
    hole_number: int,
    hole_score: HoleScore,
    team1_name: str = "Team 1",
    team2_name: str = "Team 2",
) -> Match:
    """ホールスコアを記録した新しいマッチを返す

    元のマッチは変更しない。現在のホールを記録した場合のみ次のホールへ進む。
    過去のホールの修正では現在のホールは変わらない。

    Args:
        match: 記録前のマッチ
        hole_number: ホール番号(1-18)
        hole_score: 記録するホールスコア
        team1_name: チーム1の表示名
        team2_name: チーム2の表示名

    Returns:
        Match: 記録後のマッチ

    Raises:
        MatchStateError: 決着済みのマッチ、または範囲外のホール番号の場合
    """
    if match.status == MatchState.COMPLETED:
        raise MatchStateError(f"マッチは既に終了しています: {match.id}")
    if not 1 <= hole_number <= HOLES_PER_ROUND:
        raise MatchStateError(f"ホール番号が不正です: {hole_number}")

    hole_scores = [
        match.hole_scores[i] if i < len(match.hole_scores) else None
        for i in range(HOLES_PER_ROUND)
    ]
    hole_scores[hole_number - 1] = hole_score

    status = calculate_match_status(
        hole_scores, HOLES_PER_ROUND, team1_name, team2_name
    )
    if status.is_complete:
        next_state = MatchState.COMPLETED
        result = _result_from_differential(status.team1_up)
    else:
        next_state = (
            MatchState.IN_PROGRESS if status.holes_played > 0 else match.status
        )
        result = None

    current_hole = match.current_hole
    if hole_number == match.current_hole and not status.is_complete:
        current_hole = min(hole_number + 1, HOLES_PER_ROUND)

    return match.model_copy(
        update={
            "hole_scores": hole_scores,
            "current_hole": current_hole,
            "status": next_state,
            "result": result,
        }
    )
