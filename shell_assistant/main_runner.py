# main_runner.py
import argparse
import logging
import sys
from datetime import datetime

from .assistant import OfflineModeError, ShellAssistant
from .core import configure, get_logger
from .core.config import SUPPORTED_BACKENDS, AppConfig
from .core.errors import ConfigError, ShellAssistantError
from .modules.command_generation import GeneratedCommand, ParseError
from .modules.confirmation import GateState, UserAction
from .modules.execution import ClipboardError, ExecError, ShellExecutor
from .modules.history import AuditLogger, CommandHistory, FeedbackType
from .modules.providers import CredentialError, LLMError, build_provider_chain
from .modules.safety import SafetyLevel, SafetyVerdict

logger = get_logger(__name__)

LEVEL_BADGES = {
    SafetyLevel.SAFE: "✅ SAFE",
    SafetyLevel.WARNING: "⚠️ WARNING",
    SafetyLevel.DANGEROUS: "🔥 DANGEROUS",
    SafetyLevel.BLOCKED: "⛔ BLOCKED",
}

FEEDBACK_BADGES = {
    FeedbackType.HELPFUL: "👍",
    FeedbackType.NOT_HELPFUL: "👎",
    FeedbackType.EDITED: "✏️",
    FeedbackType.NONE: "  ",
}


def parse_args(argv=None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="shell-assistant",
        description="A natural language shell command assistant.",
    )
    parser.add_argument("input", nargs="?", help="Natural language input for the shell command")
    parser.add_argument("-d", "--dry-run", action="store_true", help="Don't execute commands, only show them")
    parser.add_argument("-H", "--history", action="store_true", help="Show command history")
    parser.add_argument("-c", "--config", help="Path to config file")
    parser.add_argument("-b", "--backend", choices=SUPPORTED_BACKENDS,
                        help="LLM backend to use (default from config: ollama)")
    network = parser.add_mutually_exclusive_group()
    network.add_argument("--online", action="store_true",
                         help="Allow online backends; selects wizardcoder for Ollama")
    network.add_argument("--offline", action="store_true", help="Never use online APIs")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--force", action="store_true",
                        help="Run safe commands without prompting; risky commands still need confirmation")
    parser.add_argument("--model-path", help="Path to local GGUF model (default: models/tinyllama.gguf)")
    parser.add_argument("--openai-model", help="OpenAI model to use (default: gpt-3.5-turbo)")
    parser.add_argument("--history-file", help="Path to history file")
    parser.add_argument("--no-feedback", action="store_true", help="Disable feedback prompts")
    return parser.parse_args(argv)


def prompt_for_action(generated: GeneratedCommand, verdict: SafetyVerdict) -> UserAction:
    print(f"\nCommand: {generated.command}")
    print(f"Explanation: {generated.explanation}")
    print(f"Safety: {LEVEL_BADGES[verdict.level]}")
    if verdict.reason and not verdict.is_safe:
        print(f"Reason: {verdict.reason}")

    print("\n[r] Run [c] Copy [a] Abort")
    response = input("Choose an action: ").strip().lower()
    if response in {"r", "run"}:
        return UserAction.RUN
    if response in {"c", "copy"}:
        return UserAction.COPY
    return UserAction.ABORT


def prompt_for_confirmation(generated: GeneratedCommand, verdict: SafetyVerdict) -> bool:
    print(f"\n⚠️ This command was classified {verdict.level.value.upper()}.")
    confirm = input("Are you sure you want to run it? (yes/no): ").strip().lower()
    return confirm in {"y", "yes"}


def prompt_for_feedback(history: CommandHistory, command: str) -> None:
    print("\nWas this command helpful? [y] Yes [n] No [e] Edit [s] Skip")
    response = input("Feedback: ").strip().lower()

    if response in {"y", "yes"}:
        history.update_last_entry_feedback(FeedbackType.HELPFUL)
        print("👍 Thanks for your feedback!")
    elif response in {"n", "no"}:
        history.update_last_entry_feedback(FeedbackType.NOT_HELPFUL)
        print("👎 Sorry to hear that. We'll try to do better next time!")
    elif response in {"e", "edit"}:
        edited = input(f"Corrected command [{command}]: ").strip()
        if edited and edited != command:
            history.update_last_entry_feedback(FeedbackType.EDITED, edited)
            print("✏️ Thanks for your correction!")
    else:
        print("⏭️ Feedback skipped.")


def display_history(history: CommandHistory) -> None:
    entries = history.entries()
    if not entries:
        print("No command history found.")
        return

    print("\n📜 Command History:")
    print("---------------")
    for i, entry in enumerate(entries, start=1):
        formatted_time = datetime.fromtimestamp(entry.timestamp).strftime("%Y-%m-%d %H:%M:%S")
        print(f"{i}. [{formatted_time}] {FEEDBACK_BADGES[entry.feedback]} \"{entry.input}\" => \"{entry.command}\"")
        if entry.explanation:
            print(f"   Explanation: {entry.explanation}")
        if entry.original_command:
            print(f"   Original command: {entry.original_command}")
        print()


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        config = AppConfig.load(args.config)
    except ConfigError as e:
        configure()
        logger.error("%s", e)
        print(f"❌ Error: {e}")
        return 1

    debug = args.debug or config.debug
    configure(logging.DEBUG if debug else logging.WARNING, force=True)
    logger.debug("Command line arguments: %s", args)

    history_path = args.history_file or str(config.get_history_path())
    history = CommandHistory(history_path if config.privacy.save_history or args.history_file else None)

    if args.history:
        display_history(history)
        return 0

    offline = args.offline or (config.privacy.offline_only and not args.online)
    try:
        chain = build_provider_chain(
            config,
            backend=args.backend,
            online=args.online,
            offline=offline,
            model_path=args.model_path,
            openai_model=args.openai_model,
        )
    except CredentialError as e:
        print(f"❌ OpenAI Configuration Error: {e}")
        print("💡 To use OpenAI backend:")
        print("   1. Set your API key: export OPENAI_API_KEY=sk-your-key-here")
        print("   2. Or create a .env file with: OPENAI_API_KEY=sk-your-key-here")
        return 1

    sinks = []
    if config.privacy.save_history or args.history_file:
        sinks.append(history)
    if config.security.audit_log:
        sinks.append(AuditLogger(
            str(config.get_audit_log_path()),
            organization=config.enterprise.organization,
            department=config.enterprise.department,
        ))

    assistant = ShellAssistant(
        chain,
        config.policy(),
        executor=ShellExecutor(),
        sinks=sinks,
        offline=offline,
    )

    user_input = args.input
    if user_input is None:
        try:
            user_input = input("Enter your request: ")
        except EOFError:
            user_input = ""
    user_input = user_input.strip()
    if not user_input:
        print("No input provided. Exiting.")
        return 0

    print(f"\n💬 Processing: {user_input}")
    print(f"🧠 Using LLM backend: {chain.name()}")

    try:
        generated = assistant.generate(user_input)
    except OfflineModeError as e:
        print(f"❌ {e}. Exiting.")
        return 1
    except (LLMError, ParseError) as e:
        logger.debug("Generation failed", exc_info=True)
        print(f"❌ Error generating command: {e}")
        return 1

    print("\n🤖 I'll help you with that!")
    try:
        outcome = assistant.handle_generated(
            user_input,
            generated,
            prompt_for_action,
            prompt_for_confirmation,
            force=args.force,
            dry_run=args.dry_run,
        )
    except ExecError as e:
        print(f"\n❌ Error executing command: {e}")
        return 1
    except ClipboardError as e:
        print(f"❌ Error copying to clipboard: {e}")
        return 1
    except ShellAssistantError as e:
        print(f"❌ Error: {e}")
        return 1

    if outcome.state is GateState.EXECUTING:
        print("\n✅ Command executed successfully:")
        print(outcome.output)
    elif outcome.state is GateState.COPYING:
        print("\n📋 Command copied to clipboard!")
    else:
        if outcome.verdict.is_blocked:
            print(f"\n⛔ {outcome.verdict.reason}.")
        print("\n🛑 Command execution aborted.")
        return 0

    if not args.no_feedback and history in sinks:
        prompt_for_feedback(history, generated.command)
    return 0


def run() -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(130)


if __name__ == "__main__":
    run()
