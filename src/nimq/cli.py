import argparse
import sys
from typing import Callable, Optional, Tuple

import numpy as np

from nimq.core.config import NimqConfig
from nimq.core.entities.settings import NimqSettings
from nimq.core.evaluation import evaluate_against_random, policy_accuracy
from nimq.core.exceptions import SessionAbortedError
from nimq.core.notifications import LoggingNotifier
from nimq.core.pipelines import QLearningTrainer, ensure_model_ready
from nimq.core.q_table import QTableRepository
from nimq.core.storage import JsonFileKeyValueStore
from nimq.logger import get_logger, setup_logging
from nimq.session import NimGameSession, SessionPhase

logger = get_logger("CLI")


def _load_settings(args) -> NimqSettings:
    config_path = getattr(args, "config_path", None)
    config = NimqConfig(config_path=config_path, preload=bool(config_path))

    if getattr(args, "episodes", None) is not None:
        config.set_value("q_learning.episodes", args.episodes)
    if getattr(args, "seed", None) is not None:
        config.set_value("seed", args.seed)
    if getattr(args, "difficulty", None):
        config.set_value("ai.difficulty", args.difficulty)

    return config.settings


def _build_components(settings: NimqSettings) -> Tuple[np.random.Generator, QTableRepository, QLearningTrainer]:
    rng = np.random.default_rng(settings.seed)
    repository = QTableRepository(
        JsonFileKeyValueStore(settings.storage.path),
        key=settings.storage.key,
        alpha=settings.q_learning.alpha,
        gamma=settings.q_learning.gamma,
    )
    trainer = QLearningTrainer(
        settings.q_learning, rng, notifier=LoggingNotifier(), rules=settings.rules
    )
    return rng, repository, trainer


def handle_init_command(args) -> bool:
    """Handles the 'init' command - writes a default configuration file."""
    logger.info(f"Writing default configuration to {args.path}")
    try:
        NimqConfig.create_default(args.path)
        return True
    except ValueError as e:
        logger.error(f"Error writing configuration: {e}")
        return False


def handle_train_command(args) -> bool:
    """Handles the 'train' command - trains and saves a Q-table."""
    try:
        settings = _load_settings(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return False

    _, repository, trainer = _build_components(settings)

    warm_start = repository.load() if args.warm_start else None
    if args.warm_start and warm_start is None:
        logger.warning("No stored Q-table to warm-start from, starting from scratch")

    q_table = trainer.train(q_table=warm_start)
    metadata = repository.new_metadata(
        q_table,
        episodes=trainer.last_stats.episodes,
        epsilon=settings.q_learning.epsilon,
        prefix_version=args.version,
    )
    return repository.save(q_table, metadata)


def handle_evaluate_command(args) -> bool:
    """Handles the 'evaluate' command - greedy policy against a random opponent."""
    try:
        settings = _load_settings(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return False

    rng, repository, trainer = _build_components(settings)
    q_table = ensure_model_ready(repository, trainer)

    report = evaluate_against_random(q_table, args.games, rng, agent_first=not args.agent_second)
    print(f"games={report.games} wins={report.wins} losses={report.losses} win_rate={report.win_rate:.3f}")
    print(f"policy_accuracy={policy_accuracy(q_table, q_table.states()):.3f}")
    return True


def handle_export_command(args) -> bool:
    """Handles the 'export' command - writes the stored Q-table as portable JSON."""
    try:
        settings = _load_settings(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return False

    _, repository, _ = _build_components(settings)
    q_table = repository.load()
    if q_table is None:
        logger.error("No Q-table stored, run 'nimq train' first")
        return False

    try:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(repository.export_json(q_table))
    except OSError as e:
        logger.error(f"Error exporting Q-table: {e}")
        return False

    logger.info(f"Exported {len(q_table)} entries to {args.output}")
    return True


def handle_import_command(args) -> bool:
    """Handles the 'import' command - replaces the stored Q-table with a JSON file."""
    try:
        settings = _load_settings(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return False

    _, repository, _ = _build_components(settings)
    try:
        with open(args.input, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        logger.error(f"Error reading {args.input}: {e}")
        return False

    q_table = repository.import_json(text)
    if q_table is None:
        return False
    return repository.save(q_table)


def _parse_move(text: str) -> Optional[Tuple[int, int]]:
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        return None
    try:
        pile, count = (int(p) for p in parts)
    except ValueError:
        return None
    # Piles are numbered from 1 on screen
    return pile - 1, count


def handle_play_command(
    args,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> bool:
    """Handles the 'play' command - an interactive game against the computer."""
    try:
        settings = _load_settings(args)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return False

    rng, repository, trainer = _build_components(settings)
    q_table = ensure_model_ready(repository, trainer, notifier=LoggingNotifier())

    session = NimGameSession(
        q_table,
        difficulty=settings.ai.difficulty,
        rng=rng,
        ai_moves_first=args.ai_first,
        policy_rate=settings.ai.policy_rate,
    )
    output_fn("Take objects from one pile per turn. Whoever takes the last object loses.")

    while not session.is_over:
        output_fn("Piles: " + "  ".join(f"[{i + 1}] {p}" for i, p in enumerate(session.piles)))

        if session.phase is SessionPhase.AWAITING_AI_MOVE:
            try:
                action = session.play_ai_turn()
            except SessionAbortedError as e:
                logger.error(f"Game aborted: {e}")
                return False
            output_fn(f"Computer takes {action.count} from pile {action.pile_index + 1}")
            continue

        try:
            text = input_fn("Your move (pile count), or q to quit: ").strip()
        except EOFError:
            text = "q"
        if text.lower() in ("q", "quit"):
            output_fn("Game abandoned.")
            return True

        move = _parse_move(text)
        if move is None or not session.submit_player_move(*move):
            output_fn("Invalid move, try again.")

    output_fn("You win!" if session.phase is SessionPhase.TERMINAL_WIN else "Computer wins!")
    return True


def main(argv=None):
    """Main entry point for the nimq CLI."""
    parser = argparse.ArgumentParser(
        prog="nimq",
        description="nimq CLI: train and play a Q-learning misère Nim opponent.",
    )
    parser.add_argument(
        "--log_level",
        type=str,
        default="INFO",
        help="Logging level (default: INFO).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
        required=True,
    )

    # --- Define the 'init' command ---
    parser_init = subparsers.add_parser("init", help="Write a default configuration file.")
    parser_init.add_argument(
        "--path",
        type=str,
        metavar="CONFIG_PATH",
        default="nimq.yml",
        help="Where to write the configuration (default: nimq.yml).",
    )
    parser_init.set_defaults(func=handle_init_command)

    def add_common(sub):
        sub.add_argument(
            "--config_path",
            type=str,
            metavar="CONFIG_PATH",
            default=None,
            help="YAML configuration file (defaults are used when omitted).",
        )
        sub.add_argument("--seed", type=int, default=None, help="Random seed.")

    # --- Define the 'train' command ---
    parser_train = subparsers.add_parser("train", help="Train a Q-table by self-play and save it.")
    add_common(parser_train)
    parser_train.add_argument("--episodes", type=int, default=None, help="Training episodes.")
    parser_train.add_argument(
        "--warm_start", action="store_true", help="Continue from the stored Q-table."
    )
    parser_train.add_argument(
        "--version", type=str, default=None, help="Version prefix recorded with the table."
    )
    parser_train.set_defaults(func=handle_train_command)

    # --- Define the 'play' command ---
    parser_play = subparsers.add_parser("play", help="Play against the computer.")
    add_common(parser_play)
    parser_play.add_argument(
        "--difficulty", choices=["easy", "medium", "hard"], default=None, help="Computer strength."
    )
    parser_play.add_argument("--ai_first", action="store_true", help="Let the computer move first.")
    parser_play.set_defaults(func=handle_play_command)

    # --- Define the 'evaluate' command ---
    parser_eval = subparsers.add_parser("evaluate", help="Play the policy against random moves.")
    add_common(parser_eval)
    parser_eval.add_argument("--games", type=int, default=1000, help="Number of games.")
    parser_eval.add_argument(
        "--agent_second", action="store_true", help="Let the random opponent move first."
    )
    parser_eval.set_defaults(func=handle_evaluate_command)

    # --- Define the 'export' / 'import' commands ---
    parser_export = subparsers.add_parser("export", help="Write the stored Q-table as JSON.")
    add_common(parser_export)
    parser_export.add_argument("--output", type=str, required=True, help="Output file.")
    parser_export.set_defaults(func=handle_export_command)

    parser_import = subparsers.add_parser("import", help="Replace the stored Q-table from JSON.")
    add_common(parser_import)
    parser_import.add_argument("--input", type=str, required=True, help="Input file.")
    parser_import.set_defaults(func=handle_import_command)

    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help(sys.stderr)
        sys.exit(1)

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    # Execute the function associated with the chosen subcommand
    if not args.func(args):
        sys.exit(1)


if __name__ == "__main__":
    main()
