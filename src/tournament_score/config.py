"""設定管理モジュール

環境変数から設定を読み込み、アプリケーション全体で使用する設定を提供する。
計算エンジン自体は設定を参照せず、サービス層とCLIが引数として渡す。
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .team_handicap import HandicapMethod


class Settings(BaseSettings):
    """アプリケーション設定

    環境変数または.envファイルから設定を読み込む。
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # チーム戦のハンディキャップ
    team_handicap_method: HandicapMethod = Field(
        default=HandicapMethod.USGA,
        description="スクランブルのチームハンディキャップ算出方式",
    )
    best_ball_allowance_pair: float = Field(
        default=0.90,
        ge=0.0,
        le=1.0,
        description="ベストボールのハンディキャップ許容率(2人以下)",
    )
    best_ball_allowance_group: float = Field(
        default=0.85,
        ge=0.0,
        le=1.0,
        description="ベストボールのハンディキャップ許容率(3人以上)",
    )
    min_drives_required: int = Field(
        default=3,
        ge=0,
        description="スクランブルで各選手に必要な最低ドライブ数",
    )

    # 表示名
    team1_name: str = Field(default="Team 1", description="チーム1の既定表示名")
    team2_name: str = Field(default="Team 2", description="チーム2の既定表示名")

    # オプション設定
    debug: bool = Field(
        default=False,
        description="デバッグモード(true: デバッグ情報出力)",
    )
    output_dir: Path = Field(
        default=Path("output"),
        description="レポート出力ディレクトリ",
    )


def get_settings() -> Settings:
    """設定インスタンスを取得する

    Returns:
        Settings: アプリケーション設定
    """
    return Settings()
