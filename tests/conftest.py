"""テスト共通のフィクスチャ"""

import pytest

from tournament_score.models import Hole, Player
from tournament_score.output import TournamentSnapshot

PARS = [4, 4, 3, 5, 4, 4, 3, 4, 5, 4, 3, 5, 4, 4, 3, 4, 5, 4]
STROKE_INDEXES = [7, 15, 11, 1, 3, 13, 17, 9, 5, 8, 16, 2, 12, 4, 18, 10, 6, 14]


@pytest.fixture
def course_holes() -> list[Hole]:
    """パー72、ストロークインデックスが1-18の順列になっているコース"""
    return [
        Hole(number=i + 1, par=par, stroke_index=si)
        for i, (par, si) in enumerate(zip(PARS, STROKE_INDEXES))
    ]


@pytest.fixture
def players() -> list[Player]:
    return [
        Player(id="p1", name="Alice", handicap=12.0),
        Player(id="p2", name="Bob", handicap=18.0),
        Player(id="p3", name="Carol", handicap=5.4),
        Player(id="p4", name="Dave", handicap=24.0),
    ]


@pytest.fixture
def snapshot_data() -> dict:
    """永続化層から書き出した形式(camelCase)のスナップショット"""
    holes = [
        {"number": i + 1, "par": par, "strokeIndex": si}
        for i, (par, si) in enumerate(zip(PARS, STROKE_INDEXES))
    ]
    return {
        "tournament": {
            "id": "t1",
            "name": "チャップスカップ",
            "edition": "2024",
            "startDate": "2024-05-01",
            "hasTeams": True,
            "teams": [
                {"id": "team1", "name": "Eagles", "players": ["p1", "p2"]},
                {"id": "team2", "name": "Hawks", "players": ["p3", "p4"]},
            ],
            "rounds": [
                {
                    "id": "r1",
                    "format": "match_play_singles",
                    "courseData": {"name": "箱根コース", "holes": holes},
                    "matches": [
                        {
                            "id": "m1",
                            "format": "singles",
                            "team1Players": ["p1"],
                            "team2Players": ["p3"],
                            "currentHole": 18,
                            "status": "completed",
                            "result": "team1_win",
                        },
                        {
                            "id": "m2",
                            "format": "singles",
                            "team1Players": ["p2"],
                            "team2Players": ["p4"],
                            "holeScores": [
                                {"team1Gross": 5, "team2Gross": 4, "winner": "team2"}
                            ],
                            "currentHole": 2,
                            "status": "in_progress",
                        },
                        {
                            "id": "m3",
                            "format": "fourball",
                            "team1Players": ["p1", "p2"],
                            "team2Players": ["p3", "p4"],
                        },
                    ],
                },
                {
                    "id": "r2",
                    "format": "individual_stableford",
                    "courseData": {"name": "箱根コース", "holes": holes},
                    "scorecards": [
                        {
                            "id": "sc1",
                            "playerId": "p1",
                            "playerName": "Alice",
                            "totalPoints": 36,
                            "status": "completed",
                        },
                        {
                            "id": "sc2",
                            "playerId": "p3",
                            "playerName": "Carol",
                            "totalPoints": 36,
                            "status": "completed",
                        },
                        {
                            "id": "sc3",
                            "playerId": "p2",
                            "playerName": "Bob",
                            "holes": [{"grossScore": 5}, {"grossScore": 6}],
                            "totalPoints": 3,
                            "status": "in_progress",
                        },
                    ],
                    "teamScorecards": [
                        {
                            "id": "ts1",
                            "teamId": "team1",
                            "players": ["p1", "p2"],
                            "status": "completed",
                        },
                        {
                            "id": "ts2",
                            "teamId": "team2",
                            "players": ["p3", "p4"],
                            "status": "in_progress",
                        },
                    ],
                },
            ],
        },
        "players": [
            {"id": "p1", "name": "Alice", "handicap": 12.0},
            {"id": "p2", "name": "Bob", "handicap": 18.0},
            {"id": "p3", "name": "Carol", "handicap": 5.4},
            {"id": "p4", "name": "Dave", "handicap": 24.0},
        ],
        "honours": [{"year": 2019, "winner": "Old Tom", "edition": "第1回"}],
    }


@pytest.fixture
def snapshot(snapshot_data: dict) -> TournamentSnapshot:
    return TournamentSnapshot.model_validate(snapshot_data)
