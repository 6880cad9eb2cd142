"""リポジトリモジュール

永続化層へのアクセスを抽象化するインターフェースと、
テストやオフライン集計で使うメモリ上の実装を提供する。
計算エンジンはこのモジュールを参照しない。
"""

import logging
from collections.abc import Callable
from typing import Protocol

from .exceptions import NotFoundError
from .models import Match, Scorecard, TeamScorecard, Tournament

logger = logging.getLogger(__name__)

Listener = Callable[[Tournament], None]
Unsubscribe = Callable[[], None]


class TournamentRepository(Protocol):
    """トーナメントのドキュメントへのアクセス"""

    def get_tournament(self, tournament_id: str) -> Tournament | None: ...

    def get_match(self, match_id: str) -> Match | None: ...

    def update_match(self, match_id: str, match: Match) -> None: ...

    def update_scorecard(self, scorecard_id: str, scorecard: Scorecard) -> None: ...

    def update_team_scorecard(
        self, scorecard_id: str, scorecard: TeamScorecard
    ) -> None: ...

    def subscribe(self, listener: Listener) -> Unsubscribe: ...


class InMemoryTournamentRepository:
    """1つのトーナメントをメモリ上に保持するリポジトリ

    更新のたびに購読者へ最新のトーナメントを通知する。
    同じドキュメントへの更新は後勝ち。
    """

    def __init__(self, tournament: Tournament):
        """初期化

        Args:
            tournament: 保持するトーナメント(コピーして保持する)
        """
        self._tournament = tournament.model_copy(deep=True)
        self._listeners: list[Listener] = []

    def get_tournament(self, tournament_id: str) -> Tournament | None:
        if tournament_id != self._tournament.id:
            return None
        return self._tournament.model_copy(deep=True)

    def get_match(self, match_id: str) -> Match | None:
        for rnd in self._tournament.rounds:
            for match in rnd.matches:
                if match.id == match_id:
                    return match.model_copy(deep=True)
        return None

    def update_match(self, match_id: str, match: Match) -> None:
        for rnd in self._tournament.rounds:
            for index, existing in enumerate(rnd.matches):
                if existing.id == match_id:
                    rnd.matches[index] = match.model_copy(deep=True)
                    logger.debug("マッチを更新しました: %s", match_id)
                    self._notify()
                    return
        raise NotFoundError(f"マッチが見つかりません: {match_id}")

    def update_scorecard(self, scorecard_id: str, scorecard: Scorecard) -> None:
        for rnd in self._tournament.rounds:
            for index, existing in enumerate(rnd.scorecards):
                if existing.id == scorecard_id:
                    rnd.scorecards[index] = scorecard.model_copy(deep=True)
                    logger.debug("スコアカードを更新しました: %s", scorecard_id)
                    self._notify()
                    return
        raise NotFoundError(f"スコアカードが見つかりません: {scorecard_id}")

    def update_team_scorecard(
        self, scorecard_id: str, scorecard: TeamScorecard
    ) -> None:
        for rnd in self._tournament.rounds:
            for index, existing in enumerate(rnd.team_scorecards):
                if existing.id == scorecard_id:
                    rnd.team_scorecards[index] = scorecard.model_copy(deep=True)
                    logger.debug("チームスコアカードを更新しました: %s", scorecard_id)
                    self._notify()
                    return
        raise NotFoundError(f"チームスコアカードが見つかりません: {scorecard_id}")

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """更新通知を購読する

        Args:
            listener: 最新のトーナメントを受け取るコールバック

        Returns:
            Unsubscribe: 購読を解除する関数
        """
        self._listeners.append(listener)
        listener(self._tournament.model_copy(deep=True))

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._tournament.model_copy(deep=True))
