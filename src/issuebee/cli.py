"""IssueBee CLI

コマンドラインインターフェース。CI ワークフローの各ステップから呼び出される。
"""

import argparse
import os
import sys


def main(argv=None):
    """メインエントリーポイント"""
    parser = argparse.ArgumentParser(
        description="IssueBee - Issue/PR トリガーのアシスタント連携ブリッジ",
        prog="issuebee",
    )

    subparsers = parser.add_subparsers(dest="command", help="利用可能なコマンド")

    # prepare コマンド
    prepare_parser = subparsers.add_parser(
        "prepare", help="イベントデータを取得してプロンプトファイルを作成"
    )
    prepare_parser.add_argument(
        "--comment-id", required=True, help="トラッキングコメントのID"
    )
    prepare_parser.add_argument("--base-branch", help="作業ブランチの起点ブランチ")
    prepare_parser.add_argument("--claude-branch", help="既に割り当てられた作業ブランチ")

    # update-comment コマンド
    update_parser = subparsers.add_parser(
        "update-comment", help="トラッキングコメントにブランチリンクを追記"
    )
    update_parser.add_argument(
        "--comment-id", type=int, required=True, help="トラッキングコメントのID"
    )
    update_parser.add_argument("--branch", help="作成されたブランチ名")

    # mcp コマンド
    subparsers.add_parser("mcp", help="Gitea MCPサーバーを起動")

    # setup-settings コマンド
    settings_parser = subparsers.add_parser(
        "setup-settings", help="アシスタント設定ファイルを作成・マージ"
    )
    settings_parser.add_argument(
        "--settings", default=None, help="JSON 文字列または JSON ファイルへのパス"
    )
    settings_parser.add_argument(
        "--home", default=None, help="ホームディレクトリ（省略時はユーザーのホーム）"
    )

    args = parser.parse_args(argv)

    if args.command == "prepare":
        _configure_logging()
        run_prepare(args)
    elif args.command == "update-comment":
        _configure_logging()
        run_update_comment(args)
    elif args.command == "mcp":
        run_mcp()
    elif args.command == "setup-settings":
        _configure_logging()
        run_setup_settings(args)
    else:
        parser.print_help()
        sys.exit(1)


def _configure_logging():
    from .core.config import get_settings
    from .core.logging_config import configure_logging

    configure_logging(get_settings().logging.level)


def _create_client(context):
    """イベントのリポジトリを対象とする REST クライアントを作成"""
    from .core.config import get_settings
    from .core.gitea import GiteaClient

    settings = get_settings()
    return GiteaClient(
        api_url=os.environ.get("GITEA_API_URL") or settings.gitea.api_url,
        owner=context.repository.owner,
        repo=context.repository.repo,
        token=settings.gitea.get_token() or "",
    )


def run_prepare(args):
    """データ取得 → プロンプト作成"""
    import asyncio

    from .core.actions import set_failed
    from .core.context import load_event_context_from_env
    from .core.gitea import GiteaClientError, fetch_gitea_data
    from .prompts import create_prompt

    try:
        context = load_event_context_from_env()
        client = _create_client(context)
        data = asyncio.run(fetch_gitea_data(client, context))
    except (KeyError, OSError, ValueError, GiteaClientError) as exc:
        set_failed(f"Prepare step failed with error: {exc}")
        sys.exit(1)

    prompt_path = create_prompt(
        claude_comment_id=args.comment_id,
        base_branch=args.base_branch,
        claude_branch=args.claude_branch,
        data=data,
        context=context,
    )
    print(f"Prompt written to {prompt_path}")


def run_update_comment(args):
    """トラッキングコメントを更新"""
    import asyncio

    from .core.actions import set_failed
    from .core.comments import update_tracking_comment
    from .core.context import load_event_context_from_env
    from .core.gitea import GiteaClientError

    try:
        context = load_event_context_from_env()
        client = _create_client(context)
        asyncio.run(update_tracking_comment(client, context, args.comment_id, args.branch))
    except (KeyError, OSError, ValueError, GiteaClientError) as exc:
        set_failed(f"Update comment failed with error: {exc}")
        sys.exit(1)


def run_mcp():
    """MCPサーバーを起動"""
    from .mcp_server import main as mcp_main

    mcp_main()


def run_setup_settings(args):
    """アシスタント設定ファイルを作成・マージ"""
    from .core.actions import set_failed
    from .core.agent_settings import AgentSettingsError, setup_agent_settings

    try:
        settings_path = setup_agent_settings(args.settings, home_dir=args.home)
    except AgentSettingsError as exc:
        set_failed(f"Settings setup failed with error: {exc}")
        sys.exit(1)

    print(f"Settings written to {settings_path}")


if __name__ == "__main__":
    main()
