#!/usr/bin/env python3
"""
structagent CLI
Structured LLM agents, a confirmation-gated shell agent and a diff reviewer
on top of the Together API.
"""

import argparse
import asyncio
import logging
import sys

from structagent import system
from structagent.chat import chat_loop
from structagent.config import DEFAULTS, Settings
from structagent.console import CLIColors
from structagent.env import ensure_api_key
from structagent.errors import StructAgentError
from structagent.git import get_diff_summary
from structagent.llm import LLM, create_client
from structagent.pipeline import PlannerExecutorPipeline
from structagent.review import review_changes


def credit_warning(settings: Settings) -> str:
    return "\n".join([
        "==============",
        "⚠️  WARNING ⚠️",
        "==============",
        "This command will consume credits!\n",
        f"It costs ${settings.cost_per_1m_tokens} per 1M tokens with {settings.model}.\n",
        "If you want to completely ignore credit warnings, you can add the following line to your .env file:\n",
        "\tMONEY_IS_NO_OBJECT=true\n",
        "==============\n",
    ])


async def run_agent(settings: Settings) -> str:
    if not settings.money_is_no_object:
        print(CLIColors.warning(credit_warning(settings)))
        await system.input("Press ENTER to continue or CTRL+C to exit...")
        print(CLIColors.warning("==============\n"))

    pipeline = PlannerExecutorPipeline.from_settings(create_client(settings), settings)
    return await pipeline.run()


async def run_review(settings: Settings, include_untracked: bool) -> str:
    summary = await get_diff_summary(include_untracked=include_untracked)
    if summary.files:
        print(CLIColors.info("Reviewing files:\n\t" + "\n\t".join(summary.files) + "\n"))
    review = await review_changes(LLM(create_client(settings)), summary, settings.review_model)
    print(review)
    return review


async def run_chat(settings: Settings, system_prompt: str) -> None:
    print(CLIColors.highlight("🤖 Chat started. Type 'exit' to quit."))
    conversation = await chat_loop(
        LLM(create_client(settings)),
        settings.review_model,
        system.input,
        system_prompt=system_prompt,
        show=lambda reply: print(CLIColors.success(f"\n{reply}\n")),
    )
    logging.debug(f"chat ended after {len(conversation)} messages")


async def run_setup(env_file: str) -> None:
    if await ensure_api_key(system.input, env_file):
        print(CLIColors.success(f"\nThe API key has been saved to '{env_file}'."))
    else:
        print(CLIColors.info(f"TOGETHER_API_KEY is already set in '{env_file}'."))


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser"""
    parser = argparse.ArgumentParser(
        description="structagent - structured LLM agents for the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s setup
  %(prog)s agent
  %(prog)s review --no-untracked
  %(prog)s chat --system "You are a terse assistant."
""",
    )
    parser.add_argument("--env-file", default=DEFAULTS["env_file"], help="Path to the .env file (default: .env)")
    parser.add_argument("--model", help="Override the model used by the agents")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("setup", help="Store your Together API key in the .env file")
    subparsers.add_parser("agent", help="Plan and run shell commands for a task, confirming each one")

    review_parser = subparsers.add_parser("review", help="Review the uncommitted changes of this git repository")
    review_parser.add_argument(
        "--no-untracked", dest="include_untracked", action="store_false",
        help="Do not include untracked files in the review",
    )

    chat_parser = subparsers.add_parser("chat", help="Start a multi-turn chat")
    chat_parser.add_argument("--system", default="You are a helpful AI assistant.", help="System prompt")

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    try:
        if args.command == "setup":
            asyncio.run(run_setup(args.env_file))
            return 0

        settings = Settings.from_env(args.env_file)
        if args.model:
            settings = settings.model_copy(update={"model": args.model, "review_model": args.model})

        if args.command == "agent":
            asyncio.run(run_agent(settings))
        elif args.command == "review":
            asyncio.run(run_review(settings, args.include_untracked))
        elif args.command == "chat":
            asyncio.run(run_chat(settings, args.system))
        else:
            print(CLIColors.error(f"❌ Unknown command: {args.command}"))
            parser.print_help()
            return 1
    except StructAgentError as e:
        print(CLIColors.error(f"❌ {e}"))
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\n" + CLIColors.success("👋 Goodbye!"))
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
