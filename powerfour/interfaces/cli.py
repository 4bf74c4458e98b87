"""
cli.py - Command-line interface for PowerFour

This module provides a terminal version of the game plus two helper
commands: rendering an arbitrary position and benchmarking random games.
Columns are chosen with the digit keys 1-9 and 0, as on a keyboard's
number row.
"""

import argparse
import sys
import time
from typing import List, Optional

import numpy as np

from powerfour.debug import debug, DebugLevel
from powerfour.game.board import Board
from powerfour.game.errors import MoveError
from powerfour.game.rules import ConnectFourGame, TurnRecord
from powerfour.utils import (COLS, DEFAULT_SPAWN_CHANCE, ROWS, Cell, GameResult, Player, PowerUp,
                             column_to_key, key_to_column)

# Special commands returned by get_human_move
QUIT = -1
UNDO = -2
RESTART = -3

COMMANDS = {'q': QUIT, 'u': UNDO, 'r': RESTART}


class SimpleCLI:
    """Simple command-line interface for PowerFour."""

    def __init__(self):
        self.game: Optional[ConnectFourGame] = None
        self.args = None

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(description='PowerFour: Connect Four with power-ups')
        parser.add_argument('--log-level', default=None,
                            choices=[level.name.lower() for level in DebugLevel],
                            help='Logging level (defaults to $POWERFOUR_DEBUG or warning)')
        parser.add_argument('--log-file', default=None, help='Also write logs to this file')

        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        play_parser = subparsers.add_parser('play', help='Play a game interactively')
        play_parser.add_argument('--power-ups', action='store_true', help='Enable power-ups')
        play_parser.add_argument('--opponent', choices=['human', 'random'], default='human',
                                 help='Who plays O')
        play_parser.add_argument('--spawn-chance', type=float, default=0.0,
                                 help=f'Chance of a new power-up each turn '
                                      f'(the classic mode uses {DEFAULT_SPAWN_CHANCE})')
        play_parser.add_argument('--seed', type=int, default=None, help='Random seed')
        play_parser.add_argument('--ai-delay', type=float, default=0.5,
                                 help='Seconds to pause before the AI moves')
        play_parser.add_argument('--debug', action='store_true', help='Enable debug logging')

        show_parser = subparsers.add_parser('show', help='Render and analyse a position')
        show_parser.add_argument('--position', required=True,
                                 help='Comma-separated cell codes, bottom row first')
        show_parser.add_argument('--rows', type=int, default=ROWS)
        show_parser.add_argument('--cols', type=int, default=COLS)

        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark random games')
        benchmark_parser.add_argument('--iterations', type=int, default=100,
                                      help='Number of games to play')
        benchmark_parser.add_argument('--power-ups', action='store_true', help='Enable power-ups')
        benchmark_parser.add_argument('--seed', type=int, default=None, help='Random seed')

        self.args = parser.parse_args(argv)

        if getattr(self.args, 'debug', False):
            debug.configure(level=DebugLevel.DEBUG)
        elif self.args.log_level:
            debug.set_from_string(self.args.log_level)
        else:
            debug.configure_from_env()

        if self.args.log_file:
            debug.configure(log_file=self.args.log_file)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI based on the parsed arguments."""
        if argv is not None or not self.args:
            self.parse_args(argv)

        if self.args.command == 'play':
            self.play_game()
        elif self.args.command == 'show':
            return self.show_position()
        elif self.args.command == 'benchmark':
            self.benchmark()
        else:
            print("Please specify a command. Use --help for options.")
            return 1
        return 0

    def play_game(self) -> None:
        """Play a PowerFour game interactively."""
        self.game = ConnectFourGame(power_ups_enabled=self.args.power_ups,
                                    spawn_chance=self.args.spawn_chance,
                                    seed=self.args.seed)
        print("Starting a new PowerFour game!")
        print("Press 1-9 or 0 to drop a piece into a column.")
        print("Other commands: 'q' to quit, 'u' to undo, 'r' to restart.")
        print(self.game.render())

        while not self.game.is_game_over():
            player = self.game.get_current_player()

            if self.args.opponent == 'random' and player == Player.O:
                print("AI is thinking...")
                time.sleep(self.args.ai_delay)
                move = self.get_ai_move()
                print(f"AI plays column {column_to_key(move)}")
            else:
                move = self.get_human_move(player)
                if move is None:
                    continue
                if move == QUIT:
                    print("Quitting game.")
                    return
                if move == UNDO:
                    self.undo()
                    continue
                if move == RESTART:
                    self.game.reset()
                    print("Game restarted.")
                    print(self.game.render())
                    continue

            try:
                record = self.game.play_turn(move)
            except MoveError as e:
                debug.debug(f"Rejected column {move}: {e}", "cli")
                print(e)
                continue

            self.report_turn(record)
            print(self.game.render())

        self.announce_result()

    def get_human_move(self, player: Player) -> Optional[int]:
        """
        Get a move from human player input.

        Returns:
            Column index, a special command code, or None on invalid input
        """
        cols = self.game.state.cols
        keys = f"1-{column_to_key(cols - 1)}" if cols < 10 else "1-9, 0"
        user_input = input(f"Player {player.number} ({player}) move ({keys}, q/u/r): ").strip().lower()

        if user_input in COMMANDS:
            return COMMANDS[user_input]

        column = key_to_column(user_input)
        if column is None:
            print("Invalid input. Please press a column key or a command.")
            return None
        if column >= cols:
            print(f"Column must be one of {keys}.")
            return None
        return column

    def get_ai_move(self) -> int:
        """Pick a random legal column."""
        valid_moves = self.game.get_valid_moves()
        return int(self.game.rng.choice(valid_moves))

    def undo(self) -> None:
        if not self.game.undo_move():
            print("No moves to undo.")
            return
        # Against the AI, rewind to the human's turn
        while (self.args.opponent == 'random' and self.game.get_current_player() == Player.O
               and self.game.undo_move()):
            pass
        print("Move undone.")
        print(self.game.render())

    def report_turn(self, record: TurnRecord) -> None:
        if record.power_up is not None:
            print(f"Power-Up activated: {record.power_up.label}!")
            if record.power_up in (PowerUp.BOMB, PowerUp.SKIP) and not record.result.is_game_over():
                print(f"Player {record.next_player.number} goes again.")
        if record.expanded:
            print("Expanding the board to 10x10!")

    def announce_result(self) -> None:
        print("Game over!")
        winner = self.game.get_winner()
        if winner is not None:
            print(f"Player {winner.number} ({winner}) wins!")
        else:
            print("It's a tie!")

    def show_position(self) -> int:
        """Render a position given on the command line and analyse it."""
        try:
            values = [int(Cell(int(v))) for v in self.args.position.split(",")]
            if len(values) != self.args.rows * self.args.cols:
                raise ValueError(f"Position must have {self.args.rows * self.args.cols} values")
            board = Board.from_rows(np.array(values).reshape(self.args.rows, self.args.cols))
        except ValueError as e:
            print(f"Error parsing position: {e}")
            return 1

        print(board.render())

        winner = board.winner()
        if winner is not None:
            print(f"Winner: Player {winner.number} ({winner}) along {board.get_winning_line()}")
        else:
            print("No winner")

        if board.is_full():
            print("Board is full")
        else:
            print(f"Empty spaces: {board.count(0)}")

        valid_columns = []
        for col in range(board.cols):
            try:
                board.find_landing(col)
            except MoveError:
                continue
            valid_columns.append(column_to_key(col))
        print(f"Playable columns: {', '.join(valid_columns) or 'none'}")
        return 0

    def benchmark(self) -> None:
        """Play random games and report timings."""
        iterations = self.args.iterations
        print(f"Running benchmark with {iterations} games...")

        rng = np.random.default_rng(self.args.seed)
        results = {result: 0 for result in GameResult if result.is_game_over()}
        total_moves = 0
        expansions = 0

        debug.start_timer("games")
        for _ in range(iterations):
            game = ConnectFourGame(power_ups_enabled=self.args.power_ups, rng=rng)
            while not game.is_game_over():
                valid_moves = game.get_valid_moves()
                if not valid_moves:
                    break
                record = game.play_turn(int(rng.choice(valid_moves)))
                total_moves += 1
                expansions += record.expanded
            results[game.get_result()] = results.get(game.get_result(), 0) + 1
        elapsed = debug.end_timer("games", "cli")

        print(f"Played {iterations} games with {total_moves} moves in {elapsed:.3f} seconds")
        if iterations and total_moves:
            print(f"{elapsed / iterations * 1000:.3f} ms per game, "
                  f"{elapsed / total_moves * 1000:.4f} ms per move")
        print(f"Boards expanded: {expansions}")
        for result, count in results.items():
            print(f"  {result.name}: {count}")


def main():
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
