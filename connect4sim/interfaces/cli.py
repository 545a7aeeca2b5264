"""
cli.py - Command-line interface for the Connect Four match simulator

This module provides a CLI for generating match corpora, printing a recorded
match move by move, summarizing a corpus, and an interactive prompt that keeps
a corpus in memory between commands.
"""

import argparse
import shlex
from typing import Callable, List, Optional

from connect4sim.debug import debug, DebugLevel
from connect4sim.data.corpus import find_match, generate_corpus
from connect4sim.data.data_manager import (DEFAULT_OUTPUT, CorpusFormatError, OutputFormat,
                                           load_corpus, save_corpus)
from connect4sim.data.statistics import format_summary, summarize_corpus
from connect4sim.game.board import Board
from connect4sim.game.simulator import Match

PROMPT_HELP = """Commands:
  generate N [SEED]   simulate N matches (replaces the loaded corpus)
  load PATH           load a corpus file
  save PATH [FORMAT]  save the corpus (full, condensed or compact)
  show ID             print the board after every move of match ID
  stats               summarize the loaded corpus
  help                show this message
  quit                leave the prompt"""


def format_match(match: Match, emoji: bool = False) -> str:
    """
    Render every board state of a recorded match.

    Args:
        match: The match to replay
        emoji: Use coloured circles instead of ASCII

    Returns:
        The printable replay
    """
    blocks = [f"--- Match #{match.match_id} ({len(match.moves)} moves) ---"]
    for index, move, board in Board.replay_states(match.moves):
        positions = [tuple(p) for p in move.immediate_win_positions]
        blocks.append(
            f"=== Move #{index} by {move.player.tag} in column {move.column} "
            f"(has_immediate_win={move.has_immediate_win}, positions={positions}) ===")
        blocks.append(board.render_emoji() if emoji else board.render())
        blocks.append("")
    return "\n".join(blocks)


class SimulatorCLI:
    """Command-line interface for the match simulator."""

    def __init__(self, output: Callable[[str], None] = print):
        """Initialize the CLI."""
        self.args = None
        self.matches: List[Match] = []
        self.output = output

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='Connect Four random match simulator')
        parser.add_argument('--debug', action='store_true', help='Enable debug mode')
        parser.add_argument('--debug-level', default='warning',
                            choices=[level.name.lower() for level in DebugLevel],
                            help='Logging verbosity')
        parser.add_argument('--log-file', default=None, help='Also write log records to this file')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        # Generate command
        gen_parser = subparsers.add_parser('generate', help='Simulate a corpus of random matches')
        gen_parser.add_argument('--count', '-n', type=int, default=1000,
                                help='Number of matches to simulate')
        gen_parser.add_argument('--seed', type=int, default=None, help='Root random seed')
        gen_parser.add_argument('--workers', type=int, default=None,
                                help='Worker processes (default: CPU count)')
        gen_parser.add_argument('--format', dest='fmt', default=OutputFormat.FULL.value,
                                choices=[f.value for f in OutputFormat], help='Output format')
        gen_parser.add_argument('--output', '-o', default=DEFAULT_OUTPUT, help='Output file')
        gen_parser.add_argument('--strip-positions', action='store_true',
                                help='Omit immediate-win position lists (flags are kept)')
        gen_parser.add_argument('--show', type=int, default=None, metavar='ID',
                                help='Print one generated match after saving')
        gen_parser.add_argument('--emoji', action='store_true', help='Print boards with emoji')

        # Show command
        show_parser = subparsers.add_parser('show', help='Print a recorded match move by move')
        show_parser.add_argument('--input', '-i', default=DEFAULT_OUTPUT, help='Corpus file')
        show_parser.add_argument('--id', dest='match_id', type=int, required=True, help='Match identifier')
        show_parser.add_argument('--emoji', action='store_true', help='Print boards with emoji')

        # Stats command
        stats_parser = subparsers.add_parser('stats', help='Summarize a corpus')
        stats_parser.add_argument('--input', '-i', default=DEFAULT_OUTPUT, help='Corpus file')

        # Interactive command
        subparsers.add_parser('interactive', help='Start an interactive prompt')

        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments and configure logging."""
        self.args = self.build_parser().parse_args(argv)

        if self.args.debug:
            debug.configure(level=DebugLevel.DEBUG)
        else:
            debug.set_from_string(self.args.debug_level)
        if self.args.log_file:
            debug.configure(log_file=self.args.log_file)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI; returns a process exit code."""
        if self.args is None:
            self.parse_args(argv)

        handlers = {
            'generate': self.generate,
            'show': self.show,
            'stats': self.stats,
            'interactive': self.interactive,
        }
        handler = handlers.get(self.args.command)
        if handler is None:
            self.output("Please specify a command. Use --help for options.")
            return 1

        try:
            return handler()
        except (OSError, CorpusFormatError) as e:
            debug.error(str(e), "cli")
            self.output(f"Error: {e}")
            return 1

    def generate(self) -> int:
        """Simulate a corpus and store it."""
        args = self.args
        try:
            self.matches = generate_corpus(args.count, seed=args.seed, workers=args.workers)
        except ValueError as e:
            self.output(f"Error: {e}")
            return 1

        fmt = OutputFormat(args.fmt)
        if args.strip_positions or fmt == OutputFormat.COMPACT:
            # Keep the in-memory corpus identical to what the file holds
            self.matches = [m.without_positions() for m in self.matches]
        if not save_corpus(args.output, self.matches, fmt, strip_positions=args.strip_positions):
            self.output(f"Failed to write {args.output}")
            return 1
        self.output(f"Wrote {len(self.matches)} matches to {args.output} ({fmt.value})")

        if args.show is not None:
            return self._show_match(args.show, args.emoji)
        return 0

    def show(self) -> int:
        """Load a corpus and print one match."""
        self.matches = load_corpus(self.args.input)
        return self._show_match(self.args.match_id, self.args.emoji)

    def stats(self) -> int:
        self.matches = load_corpus(self.args.input)
        self.output(format_summary(summarize_corpus(self.matches)))
        return 0

    def _show_match(self, match_id: int, emoji: bool = False) -> int:
        match = find_match(self.matches, match_id)
        if match is None:
            self.output(f"No match with id {match_id}")
            return 1
        self.output(format_match(match, emoji))
        return 0

    def interactive(self, read_line: Callable[[str], str] = input) -> int:
        """Run the interactive prompt until 'quit' or end of input."""
        self.output("Connect Four match simulator. Type 'help' for commands.")

        while True:
            try:
                line = read_line("c4> ")
            except EOFError:
                self.output("")
                return 0

            try:
                words = shlex.split(line)
            except ValueError as e:
                self.output(f"Could not parse input: {e}")
                continue
            if not words:
                continue

            command, params = words[0].lower(), words[1:]
            if command in ('quit', 'exit', 'q'):
                return 0
            self.handle_prompt_command(command, params)

    def handle_prompt_command(self, command: str, params: List[str]) -> None:
        """Execute a single interactive command."""
        try:
            if command == 'help':
                self.output(PROMPT_HELP)
            elif command == 'generate':
                count = int(params[0]) if params else 10
                seed = int(params[1]) if len(params) > 1 else None
                self.matches = generate_corpus(count, seed=seed)
                self.output(f"Generated {len(self.matches)} matches")
            elif command == 'load':
                self.matches = load_corpus(params[0])
                self.output(f"Loaded {len(self.matches)} matches")
            elif command == 'save':
                fmt = OutputFormat(params[1]) if len(params) > 1 else OutputFormat.FULL
                if save_corpus(params[0], self.matches, fmt):
                    self.output(f"Saved {len(self.matches)} matches to {params[0]}")
                else:
                    self.output(f"Failed to write {params[0]}")
            elif command == 'show':
                self._show_match(int(params[0]))
            elif command == 'stats':
                self.output(format_summary(summarize_corpus(self.matches)))
            else:
                self.output(f"Unknown command '{command}'. Type 'help' for commands.")
        except IndexError:
            self.output(f"Missing argument for '{command}'. Type 'help' for usage.")
        except (ValueError, OSError) as e:
            # CorpusFormatError is a ValueError
            self.output(f"Error: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = SimulatorCLI()
    return cli.run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
