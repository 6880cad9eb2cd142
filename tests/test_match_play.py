"""match_play.pyのテスト"""

import pytest
from pydantic import ValidationError

from tournament_score.exceptions import MatchStateError
from tournament_score.match_play import (
    SinglesNets,
    calculate_match_status,
    determine_hole_winner,
    get_match_result,
    get_provisional_result,
    new_match,
    record_hole,
    score_match_hole,
)
from tournament_score.models import (
    Hole,
    HoleScore,
    HoleWinner,
    Match,
    MatchResult,
    MatchState,
)

HOLE = Hole(number=1, par=4, stroke_index=10)

SWAPPED = {
    HoleWinner.TEAM1: HoleWinner.TEAM2,
    HoleWinner.TEAM2: HoleWinner.TEAM1,
    HoleWinner.HALVED: HoleWinner.HALVED,
}


def _holes(winners: dict[int, str], played: int) -> list[HoleScore | None]:
    """指定したホール番号の勝者を持ち、残りは引き分けのホールスコアを作る"""
    scores: list[HoleScore | None] = []
    for number in range(1, 19):
        if number <= played:
            scores.append(HoleScore(winner=winners.get(number, HoleWinner.HALVED)))
        else:
            scores.append(None)
    return scores


class TestDetermineHoleWinner:
    """determine_hole_winner関数のテスト"""

    def test_singles(self):
        """低いネットの選手が勝つこと"""
        assert (
            determine_hole_winner("singles", {"team1Player1": 4, "team2Player1": 5}, HOLE)
            == HoleWinner.TEAM1
        )
        assert (
            determine_hole_winner("singles", {"team1Player1": 5, "team2Player1": 4}, HOLE)
            == HoleWinner.TEAM2
        )

    def test_singles_model_input(self):
        """モデルでも入力できること"""
        nets = SinglesNets(team1_player1=4, team2_player1=4)

        assert determine_hole_winner("singles", nets, HOLE) == HoleWinner.HALVED

    @pytest.mark.parametrize(
        "match_format,hole_score,expected",
        [
            ("singles", HoleScore(team1_player1=4, team2_player1=5), HoleWinner.TEAM1),
            ("foursomes", HoleScore(team1_score=6, team2_score=5), HoleWinner.TEAM2),
            (
                "fourball",
                HoleScore(team1_player1=5, team1_player2=4, team2_player1=4),
                HoleWinner.HALVED,
            ),
        ],
    )
    def test_hole_score_input(self, match_format, hole_score, expected):
        """記録済みのHoleScoreのネットで判定できること"""
        assert determine_hole_winner(match_format, hole_score, HOLE) == expected

    def test_symmetry(self):
        """チームを入れ替えると勝者も入れ替わること"""
        for a in range(3, 8):
            for b in range(3, 8):
                forward = determine_hole_winner(
                    "singles", {"team1Player1": a, "team2Player1": b}, HOLE
                )
                backward = determine_hole_winner(
                    "singles", {"team1Player1": b, "team2Player1": a}, HOLE
                )
                assert backward == SWAPPED[forward]
                if a == b:
                    assert forward == HoleWinner.HALVED

    def test_symmetry_foursomes(self):
        """フォアサムでもチームを入れ替えると勝者が入れ替わること"""
        for a in range(3, 8):
            for b in range(3, 8):
                forward = determine_hole_winner(
                    "foursomes", {"team1Score": a, "team2Score": b}, HOLE
                )
                backward = determine_hole_winner(
                    "foursomes", {"team1Score": b, "team2Score": a}, HOLE
                )
                assert backward == SWAPPED[forward]

    @pytest.mark.parametrize(
        "team1,team2",
        [((4, 6), (5, 5)), ((5, None), (4, 7)), ((4, 4), (4, 6)), ((3, 9), (None, 3))],
    )
    def test_symmetry_fourball(self, team1, team2):
        """フォアボールでもチームを入れ替えると勝者が入れ替わること"""

        def _scores(first, second):
            return {
                "team1Player1": first[0],
                "team1Player2": first[1],
                "team2Player1": second[0],
                "team2Player2": second[1],
            }

        forward = determine_hole_winner("fourball", _scores(team1, team2), HOLE)
        backward = determine_hole_winner("fourball", _scores(team2, team1), HOLE)

        assert forward is not None
        assert backward == SWAPPED[forward]

    def test_foursomes(self):
        """フォアサムはチームのネットで比較すること"""
        assert (
            determine_hole_winner("foursomes", {"team1Score": 6, "team2Score": 5}, HOLE)
            == HoleWinner.TEAM2
        )

    def test_fourball_best_net(self):
        """フォアボールは各チームの最少ネットで比較すること"""
        scores = {
            "team1Player1": 5,
            "team1Player2": 3,
            "team2Player1": 4,
            "team2Player2": 4,
        }

        assert determine_hole_winner("fourball", scores, HOLE) == HoleWinner.TEAM1

    def test_fourball_missing_player(self):
        """未入力の選手を除外して判定すること"""
        scores = {"team1Player1": 5, "team2Player1": 4, "team2Player2": None}

        assert determine_hole_winner("fourball", scores, HOLE) == HoleWinner.TEAM2

    def test_fourball_team_without_scores(self):
        """一方のチームに入力がない場合はNoneになること"""
        scores = {"team1Player1": 5, "team2Player1": None, "team2Player2": 0}

        assert determine_hole_winner("fourball", scores, HOLE) is None

    @pytest.mark.parametrize(
        "scores,hole",
        [
            (None, HOLE),
            ({}, HOLE),
            ({"team1Player1": 4, "team2Player1": 5}, None),
            ({"team1Player1": 4}, HOLE),
            ({"team1Player1": 0, "team2Player1": 5}, HOLE),
        ],
    )
    def test_insufficient_input(self, scores, hole):
        """入力が足りない場合はNoneになること"""
        assert determine_hole_winner("singles", scores, hole) is None

    def test_unknown_format(self):
        """未知の形式はNoneになること"""
        scores = {"team1Player1": 4, "team2Player1": 5}

        assert determine_hole_winner("skins", scores, HOLE) is None


class TestScoreMatchHole:
    """score_match_hole関数のテスト"""

    def test_singles(self):
        """ハンディキャップを適用して勝者を判定すること"""
        score = score_match_hole(
            "singles", {"team1Player1": 5, "team2Player1": 4}, [18], [0], HOLE
        )

        assert score.team1_gross == 5
        assert score.team1_player1 == 4
        assert score.team2_player1 == 4
        assert score.winner == HoleWinner.HALVED

    def test_foursomes_average_handicap(self):
        """フォアサムはペアのハンディキャップの平均を使うこと"""
        score = score_match_hole(
            "foursomes", {"team1Score": 5, "team2Score": 5}, [10, 15], [2, 4], HOLE
        )

        # 平均12.5 -> ストロークインデックス10で1打
        assert score.team1_score == 4
        assert score.team2_score == 5
        assert score.winner == HoleWinner.TEAM1

    def test_fourball(self):
        """フォアボールは選手ごとにネットを計算すること"""
        gross = {"team1Player1": 5, "team1Player2": 5, "team2Player1": 4}

        score = score_match_hole("fourball", gross, [0, 20], [5, 5], HOLE)

        assert score.team1_player1 == 5
        assert score.team1_player2 == 4
        assert score.team2_player1 == 4
        assert score.team2_player2 is None
        assert score.team1_player2_gross == 5
        assert score.winner == HoleWinner.HALVED

    def test_missing_gross(self):
        """グロス未入力の場合は勝者なしになること"""
        score = score_match_hole("singles", {"team1Player1": 5}, [0], [0], HOLE)

        assert score.winner is None


class TestCalculateMatchStatus:
    """calculate_match_status関数のテスト"""

    def test_empty(self):
        """未開始のマッチはAS"""
        status = calculate_match_status([None] * 18)

        assert status.team1_up == 0
        assert status.holes_played == 0
        assert status.is_complete is False
        assert status.status == "AS"

    def test_dormie_finish(self):
        """リードが残りホール数を上回った時点で決着すること"""
        hole_scores = _holes({n: HoleWinner.TEAM1 for n in (1, 2, 4, 6, 8)}, 14)

        status = calculate_match_status(hole_scores)

        assert status.team1_up == 5
        assert status.holes_played == 14
        assert status.holes_remaining == 4
        assert status.is_complete is True
        assert status.status == "Team 1 5&4"

    def test_all_square_after_18(self):
        """18ホール全て引き分けならAS"""
        status = calculate_match_status(_holes({}, 18))

        assert status.is_complete is True
        assert status.status == "AS"

    def test_one_up_after_18(self):
        """18番で決着した場合は何アップと表示すること"""
        status = calculate_match_status(_holes({18: HoleWinner.TEAM1}, 18))

        assert status.is_complete is True
        assert status.holes_remaining == 0
        assert status.status == "Team 1 1 UP"

    def test_in_progress_with_team_names(self):
        """進行中はリードしているチーム名と何アップを表示すること"""
        hole_scores = _holes({1: HoleWinner.TEAM2, 2: HoleWinner.TEAM2}, 3)

        status = calculate_match_status(
            hole_scores, team1_name="Eagles", team2_name="Hawks"
        )

        assert status.team1_up == -2
        assert status.is_complete is False
        assert status.status == "Hawks 2 UP"

    def test_current_hole_limits_counting(self):
        """current_holeより後のホールは集計しないこと"""
        hole_scores = _holes({n: HoleWinner.TEAM1 for n in range(1, 6)}, 5)

        status = calculate_match_status(hole_scores, current_hole=3)

        assert status.team1_up == 3
        assert status.holes_played == 3

    def test_holes_without_winner_are_skipped(self):
        """勝者のないホールは消化ホールに数えないこと"""
        hole_scores = [HoleScore(winner=HoleWinner.TEAM1), HoleScore(), None]

        status = calculate_match_status(hole_scores)

        assert status.holes_played == 1
        assert status.holes_remaining == 17


class TestMatchResult:
    """get_match_result/get_provisional_result関数のテスト"""

    def test_incomplete_match_has_no_result(self):
        """決着していないマッチはNone"""
        assert get_match_result(_holes({1: HoleWinner.TEAM1}, 5)) is None

    def test_completed_results(self):
        """決着したマッチの結果を返すこと"""
        dormie = _holes({n: HoleWinner.TEAM1 for n in (1, 2, 4, 6, 8)}, 14)

        assert get_match_result(dormie) == MatchResult.TEAM1_WIN
        assert get_match_result(_holes({}, 18)) == MatchResult.HALVED
        assert get_match_result(_holes({3: HoleWinner.TEAM2}, 18)) == MatchResult.TEAM2_WIN

    def test_provisional_result(self):
        """進行中のマッチはリードしているチームの暫定勝ち"""
        assert (
            get_provisional_result(_holes({2: HoleWinner.TEAM2}, 3))
            == MatchResult.TEAM2_WIN
        )
        assert get_provisional_result([None] * 18) == MatchResult.HALVED


class TestRecordHole:
    """record_hole関数のテスト"""

    def test_new_match(self):
        """新しいマッチは18ホール分の空スコアを持つこと"""
        match = new_match("singles", ["p1"], ["p3"], match_id="m1")

        assert match.id == "m1"
        assert len(match.hole_scores) == 18
        assert match.current_hole == 1
        assert match.status == MatchState.NOT_STARTED
        assert match.result is None

    def test_first_hole_starts_match(self):
        """最初のホールを記録すると進行中になり次のホールへ進むこと"""
        match = new_match("singles", ["p1"], ["p3"])

        updated = record_hole(match, 1, HoleScore(winner=HoleWinner.TEAM1))

        assert updated.status == MatchState.IN_PROGRESS
        assert updated.current_hole == 2
        assert updated.result is None
        assert updated.hole_scores[0].winner == HoleWinner.TEAM1
        # 元のマッチは変更しない
        assert match.hole_scores[0] is None
        assert match.status == MatchState.NOT_STARTED

    def test_correcting_past_hole_keeps_current_hole(self):
        """過去のホールを修正しても現在のホールは変わらないこと"""
        match = new_match("singles", ["p1"], ["p3"])
        match = record_hole(match, 1, HoleScore(winner=HoleWinner.TEAM1))

        updated = record_hole(match, 1, HoleScore(winner=HoleWinner.TEAM2))

        assert updated.current_hole == 2
        assert updated.hole_scores[0].winner == HoleWinner.TEAM2

    def test_match_completes(self):
        """決着したホールで終了し、結果が設定されること"""
        match = new_match("singles", ["p1"], ["p3"])
        for number in range(1, 11):
            match = record_hole(match, number, HoleScore(winner=HoleWinner.TEAM1))

        assert match.status == MatchState.COMPLETED
        assert match.result == MatchResult.TEAM1_WIN
        assert match.current_hole == 10
        assert calculate_match_status(match.hole_scores).status == "Team 1 10&8"

    def test_completed_match_rejects_updates(self):
        """終了したマッチへの記録はエラーになること"""
        match = new_match("singles", ["p1"], ["p3"])
        for number in range(1, 11):
            match = record_hole(match, number, HoleScore(winner=HoleWinner.TEAM1))

        with pytest.raises(MatchStateError):
            record_hole(match, 11, HoleScore(winner=HoleWinner.TEAM2))

    @pytest.mark.parametrize("hole_number", [0, 19])
    def test_invalid_hole_number(self, hole_number):
        """範囲外のホール番号はエラーになること"""
        match = new_match("singles", ["p1"], ["p3"])

        with pytest.raises(MatchStateError):
            record_hole(match, hole_number, HoleScore(winner=HoleWinner.TEAM1))

    def test_short_hole_scores_are_padded(self):
        """18ホールに満たないスコアは補って記録すること"""
        match = Match(
            format="singles",
            hole_scores=[HoleScore(winner=HoleWinner.TEAM2)],
            current_hole=2,
            status="in_progress",
        )

        updated = record_hole(match, 2, HoleScore(winner=HoleWinner.TEAM1))

        assert len(updated.hole_scores) == 18
        assert calculate_match_status(updated.hole_scores).status == "AS"
        assert updated.current_hole == 3


class TestMatchModel:
    """Matchモデルのバリデーションのテスト"""

    def test_completed_requires_result(self):
        """終了したマッチには結果が必要なこと"""
        with pytest.raises(ValidationError):
            Match(format="singles", status="completed")

    def test_result_requires_completed(self):
        """結果があるマッチは終了している必要があること"""
        with pytest.raises(ValidationError):
            Match(format="singles", status="in_progress", result="team1_win")
