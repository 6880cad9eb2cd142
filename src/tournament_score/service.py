"""スコア入力サービスモジュール

入力されたスコアを計算エンジンで処理し、結果をリポジトリに保存する。
"""

import logging
from collections.abc import Mapping, Sequence

from .config import Settings
from .exceptions import NotFoundError
from .handicap import calculate_round_score, points_for_net
from .match_play import record_hole, score_match_hole
from .models import (
    HOLES_PER_ROUND,
    Hole,
    Match,
    Player,
    Round,
    Scorecard,
    ScorecardHole,
    ScorecardState,
    TeamScorecard,
    Tournament,
)
from .points import scorecard_status
from .repositories import TournamentRepository
from .team_handicap import DriveTracker, net_team_score, team_handicap
from .team_stableford import best_ball_allowance, scramble_totals

logger = logging.getLogger(__name__)

_STATE_ORDER = {
    ScorecardState.NOT_STARTED: 0,
    ScorecardState.IN_PROGRESS: 1,
    ScorecardState.COMPLETED: 2,
}


class ScoringService:
    """スコア入力を処理するクラス"""

    def __init__(
        self,
        repository: TournamentRepository,
        players: Sequence[Player],
        settings: Settings,
    ):
        """初期化

        Args:
            repository: トーナメントのリポジトリ
            players: プレーヤー一覧(ハンディキャップ参照用)
            settings: アプリケーション設定
        """
        self.repository = repository
        self.players = {p.id: p for p in players}
        self.settings = settings

    def _handicap(self, player_id: str) -> float:
        player = self.players.get(player_id)
        return player.handicap if player else 0.0

    def _load(self, tournament_id: str) -> Tournament:
        tournament = self.repository.get_tournament(tournament_id)
        if tournament is None:
            raise NotFoundError(f"トーナメントが見つかりません: {tournament_id}")
        return tournament

    def _team_names(self, tournament: Tournament) -> tuple[str, str]:
        names = {team.id: team.name for team in tournament.teams}
        return (
            names.get("team1", self.settings.team1_name),
            names.get("team2", self.settings.team2_name),
        )

    def submit_match_hole(
        self,
        tournament_id: str,
        match_id: str,
        hole_number: int,
        gross: Mapping[str, int | None],
    ) -> Match:
        """マッチプレーの1ホールのグロスを記録する

        Args:
            tournament_id: トーナメントID
            match_id: マッチID
            hole_number: ホール番号(1-18)
            gross: グロス入力(team1Player1等)

        Returns:
            Match: 記録後のマッチ

        Raises:
            NotFoundError: トーナメント、マッチ、ホール情報が見つからない場合
            MatchStateError: 決着済みのマッチに記録しようとした場合
        """
        tournament = self._load(tournament_id)
        rnd, match = _find_match(tournament, match_id)
        hole = _find_hole(rnd, hole_number)

        hole_score = score_match_hole(
            match.format,
            gross,
            [self._handicap(pid) for pid in match.team1_players],
            [self._handicap(pid) for pid in match.team2_players],
            hole,
        )
        team1_name, team2_name = self._team_names(tournament)
        updated = record_hole(match, hole_number, hole_score, team1_name, team2_name)
        self.repository.update_match(match_id, updated)

        logger.info(
            "ホール %d を記録しました: %s (勝者: %s, 状態: %s)",
            hole_number,
            match_id,
            hole_score.winner,
            updated.status,
        )
        return updated

    def submit_scorecard_hole(
        self,
        tournament_id: str,
        scorecard_id: str,
        hole_number: int,
        gross: int | None,
    ) -> Scorecard:
        """個人スコアカードの1ホールのグロスを記録し、合計を再計算する

        スコアカードの状態は前方向にのみ進む。

        Args:
            tournament_id: トーナメントID
            scorecard_id: スコアカードID
            hole_number: ホール番号(1-18)
            gross: グロス(Noneまたは0で未入力に戻す)

        Returns:
            Scorecard: 記録後のスコアカード
        """
        tournament = self._load(tournament_id)
        rnd, scorecard = _find_scorecard(tournament, scorecard_id)
        _find_hole(rnd, hole_number)

        holes = [
            scorecard.holes[i] if i < len(scorecard.holes) else ScorecardHole()
            for i in range(HOLES_PER_ROUND)
        ]
        holes[hole_number - 1] = ScorecardHole(gross_score=gross or None)

        round_score = calculate_round_score(
            holes, rnd.course_data.holes, self._handicap(scorecard.player_id)
        )
        computed = [
            ScorecardHole(
                gross_score=r.gross_score,
                net_score=r.net_score,
                points=r.points if r.completed else None,
            )
            for r in round_score.holes
        ]
        status = max(
            scorecard.status, scorecard_status(computed), key=_STATE_ORDER.__getitem__
        )
        updated = scorecard.model_copy(
            update={
                "holes": computed,
                "total_gross": round_score.total_gross,
                "total_net": round_score.total_net,
                "total_points": round_score.total_points,
                "status": status,
            }
        )
        self.repository.update_scorecard(scorecard_id, updated)
        logger.info(
            "スコアカード %s のホール %d を記録しました(%d ポイント)",
            scorecard_id,
            hole_number,
            round_score.total_points,
        )
        return updated

    def submit_scramble_hole(
        self,
        tournament_id: str,
        scorecard_id: str,
        hole_number: int,
        gross: int | None,
    ) -> TeamScorecard:
        """スクランブルのチームスコアカードの1ホールのグロスを記録する

        チームハンディキャップは設定の算出方式で計算し、算出できない場合は
        グロスのみ(ハンディキャップ0)で集計する。

        Args:
            tournament_id: トーナメントID
            scorecard_id: チームスコアカードID
            hole_number: ホール番号(1-18)
            gross: チームのグロス(Noneまたは0で未入力に戻す)

        Returns:
            TeamScorecard: 記録後のチームスコアカード
        """
        tournament = self._load(tournament_id)
        rnd, scorecard = _find_team_scorecard(tournament, scorecard_id)
        _find_hole(rnd, hole_number)

        grosses = [
            scorecard.holes[i].gross_score if i < len(scorecard.holes) else None
            for i in range(HOLES_PER_ROUND)
        ]
        grosses[hole_number - 1] = gross or None

        handicap = self.scramble_team_handicap(scorecard.players) or 0.0
        computed = []
        for hole_gross, hole in zip(grosses, rnd.course_data.holes):
            net = net_team_score(hole_gross, handicap, hole.stroke_index)
            computed.append(
                ScorecardHole(
                    gross_score=hole_gross,
                    net_score=net,
                    points=points_for_net(net, hole.par) if net is not None else None,
                )
            )
        totals = scramble_totals(grosses, handicap, rnd.course_data.holes)
        status = max(
            scorecard.status, scorecard_status(computed), key=_STATE_ORDER.__getitem__
        )
        updated = scorecard.model_copy(
            update={
                "holes": computed,
                "total_gross": totals.total_gross,
                "total_net": totals.total_net,
                "total_points": totals.total_points,
                "status": status,
            }
        )
        self.repository.update_team_scorecard(scorecard_id, updated)
        logger.info(
            "チームスコアカード %s のホール %d を記録しました(ハンディキャップ %s)",
            scorecard_id,
            hole_number,
            handicap,
        )
        return updated

    def new_drive_tracker(self, player_ids: Sequence[str]) -> DriveTracker:
        """設定の最低ドライブ数でスクランブルのドライブトラッカーを作成する"""
        players = [
            self.players.get(pid) or Player(id=pid, name=pid) for pid in player_ids
        ]
        return DriveTracker.create(players, self.settings.min_drives_required)

    def scramble_team_handicap(self, player_ids: Sequence[str]) -> float | None:
        """設定の算出方式でスクランブルのチームハンディキャップを計算する"""
        handicap = team_handicap(
            [self._handicap(pid) for pid in player_ids],
            self.settings.team_handicap_method,
        )
        if handicap is None:
            logger.warning(
                "チームハンディキャップを算出できません(方式: %s, 人数: %d)",
                self.settings.team_handicap_method,
                len(player_ids),
            )
        return handicap

    def best_ball_allowance(self, team_size: int) -> float:
        return best_ball_allowance(
            team_size,
            self.settings.best_ball_allowance_pair,
            self.settings.best_ball_allowance_group,
        )


def _find_match(tournament: Tournament, match_id: str) -> tuple[Round, Match]:
    for rnd in tournament.rounds:
        for match in rnd.matches:
            if match.id == match_id:
                return rnd, match
    raise NotFoundError(f"マッチが見つかりません: {match_id}")


def _find_scorecard(tournament: Tournament, scorecard_id: str) -> tuple[Round, Scorecard]:
    for rnd in tournament.rounds:
        for scorecard in rnd.scorecards:
            if scorecard.id == scorecard_id:
                return rnd, scorecard
    raise NotFoundError(f"スコアカードが見つかりません: {scorecard_id}")


def _find_team_scorecard(
    tournament: Tournament, scorecard_id: str
) -> tuple[Round, TeamScorecard]:
    for rnd in tournament.rounds:
        for scorecard in rnd.team_scorecards:
            if scorecard.id == scorecard_id:
                return rnd, scorecard
    raise NotFoundError(f"チームスコアカードが見つかりません: {scorecard_id}")


def _find_hole(rnd: Round, hole_number: int) -> Hole:
    for hole in rnd.course_data.holes:
        if hole.number == hole_number:
            return hole
    raise NotFoundError(f"ホール情報が見つかりません: {hole_number}")
