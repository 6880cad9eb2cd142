"""集計レポートモジュール

スナップショットからチームポイント、マッチ状況、順位表をまとめたレポートを作成する。
"""

import logging

from .config import Settings
from .honours import build_honours_board
from .match_play import calculate_match_status
from .output import TournamentSnapshot
from .points import (
    calculate_projected_points,
    calculate_scorecard_team_points,
    detect_playoff,
    stableford_leaderboard,
)

logger = logging.getLogger(__name__)


def build_report(snapshot: TournamentSnapshot, settings: Settings) -> dict:
    """集計レポートを作成する

    Args:
        snapshot: トーナメントのスナップショット
        settings: アプリケーション設定

    Returns:
        dict: JSON出力可能なレポート
    """
    tournament = snapshot.tournament
    team_names = {team.id: team.name for team in tournament.teams}
    team1_name = team_names.get("team1", settings.team1_name)
    team2_name = team_names.get("team2", settings.team2_name)

    matches = [match for rnd in tournament.rounds for match in rnd.matches]
    match_rows = []
    for rnd in tournament.rounds:
        for match in rnd.matches:
            status = calculate_match_status(
                match.hole_scores, team1_name=team1_name, team2_name=team2_name
            )
            match_rows.append(
                {
                    "roundId": rnd.id,
                    "matchId": match.id,
                    "format": match.format.value,
                    "state": match.status.value,
                    "result": match.result.value if match.result else None,
                    "status": status.status,
                    "holesPlayed": status.holes_played,
                }
            )
    logger.debug("マッチ %d件の状況を集計しました", len(match_rows))

    team_scorecards = [sc for rnd in tournament.rounds for sc in rnd.team_scorecards]
    team_points = calculate_scorecard_team_points(
        team_scorecards, [team.id for team in tournament.teams]
    )

    leaderboard = stableford_leaderboard(tournament.rounds, snapshot.players)
    playoff = detect_playoff(tournament.rounds)
    honours = build_honours_board([tournament], snapshot.honours)

    return {
        "tournament": {"id": tournament.id, "name": tournament.name},
        "teams": {"team1": team1_name, "team2": team2_name},
        "matchPoints": calculate_projected_points(matches).to_dict(),
        "matches": match_rows,
        "teamScorecardPoints": {
            team_id: points.model_dump(mode="json")
            for team_id, points in team_points.items()
        },
        "stablefordLeaderboard": [s.model_dump(mode="json") for s in leaderboard],
        "playoff": playoff.model_dump(mode="json") if playoff else None,
        "honours": honours.model_dump(mode="json"),
    }
