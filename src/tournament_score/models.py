"""データモデルモジュール

コース、プレーヤー、マッチ、スコアカードの型定義とバリデーションを提供する。
永続化層のドキュメント(camelCaseキー)との互換性を維持する。
"""

import math
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

HOLES_PER_ROUND = 18


class ScoringModel(BaseModel):
    """全モデル共通の基底クラス

    camelCaseのエイリアスとsnake_caseのフィールド名の両方で生成できる。
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict:
        """辞書形式に変換(JSON出力用)

        Returns:
            dict: camelCaseキーの辞書表現
        """
        return self.model_dump(mode="json", by_alias=True)


class MatchFormat(StrEnum):
    """マッチプレーの形式"""

    SINGLES = "singles"
    FOURSOMES = "foursomes"
    FOURBALL = "fourball"


class HoleWinner(StrEnum):
    """ホールの勝者"""

    TEAM1 = "team1"
    TEAM2 = "team2"
    HALVED = "halved"


class MatchState(StrEnum):
    """マッチの進行状態(前方向にのみ遷移する)"""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class MatchResult(StrEnum):
    """マッチの結果"""

    TEAM1_WIN = "team1_win"
    TEAM2_WIN = "team2_win"
    HALVED = "halved"


class ScorecardState(StrEnum):
    """スコアカードの進行状態"""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Hole(ScoringModel):
    """コースの1ホール"""

    number: int = Field(..., ge=1, le=18, description="ホール番号")
    par: int = Field(..., ge=3, le=5, description="パー")
    stroke_index: int = Field(..., ge=1, le=18, description="ストロークインデックス")
    yardage: int | None = Field(default=None, description="ヤード数")


class Course(ScoringModel):
    """コース情報"""

    name: str = Field(default="", description="コース名")
    holes: list[Hole] = Field(default_factory=list, description="ホール情報(18ホール分)")


class Player(ScoringModel):
    """スコア計算に使うプレーヤー情報"""

    id: str = Field(..., description="プレーヤーID")
    name: str = Field(..., description="プレーヤー名")
    handicap: float = Field(default=0.0, ge=0.0, le=54.0, description="ハンディキャップ")

    @field_validator("handicap")
    @classmethod
    def _round_handicap(cls, value: float) -> float:
        # 小数1桁に四捨五入(偶数丸めではない)
        return math.floor(value * 10 + 0.5) / 10


class HoleScore(ScoringModel):
    """マッチプレーの1ホール分のスコア

    グロスは入力値、ネットはハンディキャップ適用後の値。
    シングルス/フォアボールは選手ごと、フォアサムはチームごとに保持する。
    """

    # グロス
    team1_gross: int | None = Field(default=None, description="チーム1グロス")
    team2_gross: int | None = Field(default=None, description="チーム2グロス")
    team1_player1_gross: int | None = None
    team1_player2_gross: int | None = None
    team2_player1_gross: int | None = None
    team2_player2_gross: int | None = None

    # ネット
    team1_player1: int | None = Field(default=None, description="チーム1選手1ネット")
    team1_player2: int | None = Field(default=None, description="チーム1選手2ネット")
    team2_player1: int | None = Field(default=None, description="チーム2選手1ネット")
    team2_player2: int | None = Field(default=None, description="チーム2選手2ネット")
    team1_score: int | None = Field(default=None, description="チーム1ネット(フォアサム)")
    team2_score: int | None = Field(default=None, description="チーム2ネット(フォアサム)")

    winner: HoleWinner | None = Field(default=None, description="ホールの勝者")


class Match(ScoringModel):
    """マッチプレーの1試合"""

    id: str = Field(default="", description="マッチID")
    format: MatchFormat = Field(..., description="マッチ形式")
    team1_players: list[str] = Field(default_factory=list, description="チーム1選手ID")
    team2_players: list[str] = Field(default_factory=list, description="チーム2選手ID")
    hole_scores: list[HoleScore | None] = Field(
        default_factory=lambda: [None] * HOLES_PER_ROUND,
        description="各ホールのスコア(18ホール分)",
    )
    current_hole: int = Field(default=1, ge=1, le=18, description="現在のホール")
    status: MatchState = Field(default=MatchState.NOT_STARTED, description="進行状態")
    result: MatchResult | None = Field(default=None, description="結果")

    @model_validator(mode="after")
    def _check_result_matches_status(self) -> "Match":
        completed = self.status == MatchState.COMPLETED
        if completed != (self.result is not None):
            raise ValueError("result must be set if and only if status is completed")
        return self


class ScorecardHole(ScoringModel):
    """スコアカードの1ホール"""

    gross_score: int | None = Field(default=None, description="グロス")
    net_score: int | None = Field(default=None, description="ネット")
    points: int | None = Field(default=None, description="ステーブルフォードポイント")


class Scorecard(ScoringModel):
    """個人戦(ストローク/ステーブルフォード)のスコアカード"""

    id: str = Field(default="", description="スコアカードID")
    player_id: str = Field(..., description="プレーヤーID")
    player_name: str = Field(default="", description="プレーヤー名")
    holes: list[ScorecardHole] = Field(default_factory=list)
    total_gross: int = 0
    total_net: int = 0
    total_points: int = 0
    status: ScorecardState = ScorecardState.NOT_STARTED


class TeamScorecard(ScoringModel):
    """チーム戦(スクランブル/ベストボール/シャンブル/チームステーブルフォード)のスコアカード"""

    id: str = Field(default="", description="スコアカードID")
    team_id: str = Field(..., description="チームID")
    players: list[str] = Field(default_factory=list, description="選手ID")
    holes: list[ScorecardHole] = Field(default_factory=list)
    total_gross: int = 0
    total_net: int = 0
    total_points: int = 0
    status: ScorecardState = ScorecardState.NOT_STARTED


class Team(ScoringModel):
    """トーナメントのチーム"""

    id: str
    name: str
    color: str = ""
    players: list[str] = Field(default_factory=list)


class Round(ScoringModel):
    """トーナメントの1ラウンド"""

    id: str = ""
    format: str = Field(default="", description="ラウンド形式(永続化形式の識別子)")
    scoring_format: str = Field(default="", description="集計方式(stableford/stroke)")
    course_data: Course = Field(default_factory=Course)
    matches: list[Match] = Field(default_factory=list)
    scorecards: list[Scorecard] = Field(default_factory=list)
    team_scorecards: list[TeamScorecard] = Field(default_factory=list)


class Tournament(ScoringModel):
    """トーナメント"""

    id: str = ""
    name: str = ""
    edition: str = ""
    start_date: str = Field(default="", description="開始日(ISO形式)")
    end_date: str = ""
    has_teams: bool = False
    teams: list[Team] = Field(default_factory=list)
    rounds: list[Round] = Field(default_factory=list)


class HistoricHonour(ScoringModel):
    """過去大会の優勝記録(手入力分)"""

    year: int
    winner: str
    edition: str = ""
    score: str = ""
    date: str = ""


class MatchStatus(ScoringModel):
    """マッチの途中経過"""

    team1_up: int = Field(..., description="チーム1のリード(負の値はチーム2リード)")
    holes_played: int
    holes_remaining: int
    is_complete: bool
    status: str = Field(..., description="表示用テキスト(例: 2 UP, 3&2, AS)")


class PointTally(ScoringModel):
    """チームポイント集計"""

    team1_points: float = 0.0
    team2_points: float = 0.0


class ProjectedTally(PointTally):
    """進行中のマッチを含めた予想ポイント"""

    team1_projected: float = 0.0
    team2_projected: float = 0.0
