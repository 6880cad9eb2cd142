"""CLIエントリーポイントモジュール

トーナメントのスナップショットから集計レポートを作成するためのインターフェース。
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .config import Settings, get_settings
from .exceptions import ScoringError
from .output import load_snapshot, save_report_to_json
from .report import build_report


def setup_logging(debug: bool = False) -> None:
    """ロギングを設定する

    Args:
        debug: デバッグモードの場合True
    """
    level = logging.DEBUG if debug else logging.INFO
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """コマンドライン引数をパースする

    Args:
        argv: 引数リスト(省略時はsys.argv)

    Returns:
        argparse.Namespace: パース済み引数
    """
    parser = argparse.ArgumentParser(
        prog="tournament-score",
        description="トーナメントのスナップショットからポイントと順位表を集計するツール",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "snapshot",
        type=Path,
        help="トーナメントのスナップショット(JSON)",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="出力ディレクトリ(デフォルト: 環境変数OUTPUT_DIRまたはoutput)",
    )

    parser.add_argument(
        "--debug",
        "-d",
        action="store_true",
        help="デバッグモードを有効にする",
    )

    parser.add_argument(
        "--filename",
        "-f",
        type=str,
        default=None,
        help="出力ファイル名(省略時は自動生成)",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """メインエントリーポイント

    Args:
        argv: 引数リスト(省略時はsys.argv)

    Returns:
        int: 終了コード(0: 成功, 1: 失敗)
    """
    args = parse_args(argv)

    # 設定を読み込み
    try:
        settings = get_settings()
    except Exception as e:
        print(f"設定の読み込みに失敗しました: {e}", file=sys.stderr)
        print("環境変数または.envファイルを確認してください。", file=sys.stderr)
        return 1

    # コマンドライン引数で設定を上書き
    overrides = {}
    if args.output is not None:
        overrides["output_dir"] = args.output
    if args.debug:
        overrides["debug"] = True
    if overrides:
        settings = Settings(**{**settings.model_dump(), **overrides})

    # ロギング設定
    setup_logging(settings.debug)
    logger = logging.getLogger(__name__)

    logger.info("トーナメント集計ツール v%s を開始します", __version__)

    try:
        snapshot = load_snapshot(args.snapshot)
        report = build_report(snapshot, settings)

        points = report["matchPoints"]
        logger.info(
            "%s %s - %s %s (予想 %s - %s)",
            report["teams"]["team1"],
            points["team1Points"],
            points["team2Points"],
            report["teams"]["team2"],
            points["team1Projected"],
            points["team2Projected"],
        )
        if report["playoff"]:
            logger.warning(
                "首位タイです(%s ポイント): プレーオフが必要です",
                report["playoff"]["top_score"],
            )

        output_path = save_report_to_json(report, settings.output_dir, args.filename)
        logger.info("完了: %s", output_path)

    except FileNotFoundError as e:
        logger.error("スナップショットが見つかりません: %s", e)
        return 1
    except ScoringError as e:
        logger.exception("集計に失敗しました: %s", e)
        return 1
    except Exception as e:
        logger.exception("予期しないエラーが発生しました: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
