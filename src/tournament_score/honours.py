"""栄誉ボードモジュール

過去のトーナメントの最終ラウンドから優勝・準優勝・3位を求め、
手入力の過去記録と合わせて選手ごとの戦績を集計する。
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from pydantic import BaseModel, Field

from .formats import is_stableford_round
from .models import HistoricHonour, Tournament
from .points import rank_scorecards

logger = logging.getLogger(__name__)


class Placing(BaseModel):
    """ある大会の入賞者"""

    player_id: str
    name: str
    score: str = ""
    score_numeric: int | None = None


class WinnerEntry(BaseModel):
    year: int
    player_id: str
    player_name: str
    score: str
    score_numeric: int | None = None
    tournament_name: str
    date: str = ""
    is_historic: bool = False


class PlayerRecord(BaseModel):
    """選手ごとの戦績"""

    player_id: str
    player_name: str
    wins: int = 0
    runners_up: int = 0
    third_place: int = 0
    best_score: int | None = None
    years: list[int] = Field(default_factory=list)


class HonoursBoard(BaseModel):
    winners: list[WinnerEntry]
    player_stats: list[PlayerRecord]
    most_wins_player: PlayerRecord | None = None
    most_wins_count: int = 0
    record_score: WinnerEntry | None = None
    total_editions: int = 0
    first_year: int | None = None


def tournament_placings(tournament: Tournament) -> list[Placing]:
    """最終ラウンドの上位3名を返す"""
    if not tournament.rounds:
        return []

    final_round = tournament.rounds[-1]
    stableford = is_stableford_round(final_round.format, final_round.scoring_format)
    ranked = rank_scorecards(
        final_round.scorecards, "stableford" if stableford else "stroke"
    )
    placings = []
    for scorecard in ranked[:3]:
        if stableford:
            numeric = scorecard.total_points
            score = f"{numeric} points"
        else:
            numeric = scorecard.total_net or scorecard.total_gross
            score = str(numeric)
        placings.append(
            Placing(
                player_id=scorecard.player_id,
                name=scorecard.player_name,
                score=score,
                score_numeric=numeric,
            )
        )
    return placings


def _year_of(iso_date: str) -> int | None:
    try:
        return date.fromisoformat(iso_date[:10]).year
    except ValueError:
        return None


def build_honours_board(
    tournaments: Sequence[Tournament],
    historic_entries: Iterable[HistoricHonour] = (),
) -> HonoursBoard:
    """栄誉ボードを作成する

    手入力の過去記録は選手IDを持たないため、優勝者名をIDとして扱う。

    Args:
        tournaments: シリーズのトーナメント
        historic_entries: 手入力の過去の優勝記録

    Returns:
        HonoursBoard: 歴代優勝者(新しい順)と選手ごとの戦績(優勝回数順)
    """
    winners: list[WinnerEntry] = []
    records: dict[str, PlayerRecord] = {}

    def _record(player_id: str, name: str) -> PlayerRecord:
        if player_id not in records:
            records[player_id] = PlayerRecord(player_id=player_id, player_name=name)
        return records[player_id]

    for tournament in tournaments:
        placings = tournament_placings(tournament)
        if not placings:
            continue

        # 準優勝と3位は開始日がなくても数える
        if len(placings) > 1:
            _record(placings[1].player_id, placings[1].name).runners_up += 1
        if len(placings) > 2:
            _record(placings[2].player_id, placings[2].name).third_place += 1

        year = _year_of(tournament.start_date)
        if year is None:
            logger.debug("開始日のないトーナメントを除外します: %s", tournament.id)
            continue
        winner = placings[0]
        winners.append(
            WinnerEntry(
                year=year,
                player_id=winner.player_id,
                player_name=winner.name,
                score=winner.score,
                score_numeric=winner.score_numeric,
                tournament_name=tournament.name,
                date=tournament.start_date,
            )
        )
        stats = _record(winner.player_id, winner.name)
        stats.wins += 1
        stats.years.append(year)
        if winner.score_numeric is not None and (
            stats.best_score is None or winner.score_numeric > stats.best_score
        ):
            stats.best_score = winner.score_numeric

    for entry in historic_entries:
        name = (
            f"{entry.year} ({entry.edition})" if entry.edition else str(entry.year)
        )
        winners.append(
            WinnerEntry(
                year=entry.year,
                player_id=entry.winner,
                player_name=entry.winner,
                score=entry.score or "N/A",
                tournament_name=name,
                date=entry.date,
                is_historic=True,
            )
        )
        stats = _record(entry.winner, entry.winner)
        stats.wins += 1
        stats.years.append(entry.year)

    most_wins_player = None
    for stats in records.values():
        if stats.wins > (most_wins_player.wins if most_wins_player else 0):
            most_wins_player = stats

    scored = [w for w in winners if w.score_numeric is not None]
    record_score = max(scored, key=lambda w: w.score_numeric, default=None)

    return HonoursBoard(
        winners=sorted(winners, key=lambda w: w.year, reverse=True),
        player_stats=sorted(records.values(), key=lambda r: r.wins, reverse=True),
        most_wins_player=most_wins_player,
        most_wins_count=most_wins_player.wins if most_wins_player else 0,
        record_score=record_score,
        total_editions=len(tournaments),
        first_year=min((w.year for w in winners), default=None),
    )
