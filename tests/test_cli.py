import unittest
import tempfile
import sys
import os

# Allow direct imports from the project root
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(current_dir)
sys.path.insert(0, project_root)

from connect4sim.data.data_manager import load_corpus
from connect4sim.game.simulator import Match, MoveRecord
from connect4sim.interfaces.cli import SimulatorCLI, format_match
from connect4sim.utils import Player


class TestSimulatorCLI(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.lines = []

    def run_cli(self, *argv):
        cli = SimulatorCLI(output=self.lines.append)
        return cli.run(list(argv))

    def path(self, name):
        return os.path.join(self.tmp.name, name)

    def test_generate_writes_corpus(self):
        out = self.path('corpus.json')
        code = self.run_cli('generate', '--count', '6', '--seed', '1', '--workers', '1', '-o', out)
        self.assertEqual(code, 0)
        self.assertEqual([m.match_id for m in load_corpus(out)], list(range(1, 7)))

    def test_generate_and_show(self):
        out = self.path('corpus.bin')
        code = self.run_cli('generate', '-n', '3', '--seed', '2', '--workers', '1',
                            '--format', 'compact', '-o', out, '--show', '2')
        self.assertEqual(code, 0)
        self.assertTrue(any('--- Match #2' in line for line in self.lines))

    def test_generate_rejects_bad_count(self):
        code = self.run_cli('generate', '-n', '0', '--workers', '1', '-o', self.path('x.json'))
        self.assertEqual(code, 1)

    def test_show_and_missing_id(self):
        out = self.path('corpus.json')
        self.run_cli('generate', '-n', '4', '--seed', '3', '--workers', '1', '-o', out)

        self.assertEqual(self.run_cli('show', '-i', out, '--id', '4'), 0)
        self.assertIn('=== Move #0 by Yellow', self.lines[-1])

        self.assertEqual(self.run_cli('show', '-i', out, '--id', '9'), 1)
        self.assertEqual(self.lines[-1], 'No match with id 9')

    def test_show_unreadable_file(self):
        self.assertEqual(self.run_cli('show', '-i', self.path('absent.json'), '--id', '1'), 1)

    def test_stats(self):
        out = self.path('corpus.json')
        self.run_cli('generate', '-n', '5', '--seed', '4', '--workers', '1', '-o', out)
        self.assertEqual(self.run_cli('stats', '-i', out), 0)
        self.assertIn('Matches:               5', self.lines[-1])

    def test_no_command(self):
        self.assertEqual(self.run_cli(), 1)

    def test_interactive_session(self):
        saved = self.path('session.json')
        script = iter(['help', 'generate 3 5', 'show 1', 'show 8', 'stats',
                       f'save {saved} condensed', 'bogus', 'show', 'quit'])
        cli = SimulatorCLI(output=self.lines.append)
        code = cli.interactive(read_line=lambda prompt: next(script))

        self.assertEqual(code, 0)
        self.assertIn('Generated 3 matches', self.lines)
        self.assertIn('No match with id 8', self.lines)
        self.assertTrue(any(line.startswith("Unknown command 'bogus'") for line in self.lines))
        self.assertTrue(any(line.startswith("Missing argument for 'show'") for line in self.lines))
        self.assertEqual(len(load_corpus(saved)), 3)

    def test_interactive_rejects_invalid_corpus(self):
        bad = self.path('bad.json')
        with open(bad, 'w') as f:
            f.write('[{"id": -4, "moves": [{"usr_move": 0, "has_immediate_win": "false", '
                    '"player": "Yellow"}]}]')
        out = self.path('out.bin')
        script = iter([f'load {bad}', f'save {out} compact',
                       f"load {self.path('missing.json')}", 'quit'])
        cli = SimulatorCLI(output=self.lines.append)

        self.assertEqual(cli.interactive(read_line=lambda prompt: next(script)), 0)
        self.assertEqual(cli.matches, [])
        self.assertTrue(self.lines[1].startswith('Error: Match id -4'))
        self.assertTrue(self.lines[-1].startswith('Error: Corpus file'))
        self.assertEqual(load_corpus(out), [])

    def test_generate_strip_positions_matches_file(self):
        out = self.path('stripped.json')
        cli = SimulatorCLI(output=self.lines.append)
        code = cli.run(['generate', '-n', '20', '--seed', '6', '--workers', '1',
                        '-o', out, '--strip-positions', '--show', '1'])
        self.assertEqual(code, 0)
        self.assertNotIn('positions=[(', self.lines[-1])
        self.assertEqual(cli.matches, load_corpus(out))

    def test_interactive_ends_on_eof(self):
        def read_line(prompt):
            raise EOFError

        cli = SimulatorCLI(output=self.lines.append)
        self.assertEqual(cli.interactive(read_line=read_line), 0)


class TestFormatMatch(unittest.TestCase):

    def test_one_block_per_move(self):
        match = Match(5, (MoveRecord(3, Player.YELLOW, False),
                          MoveRecord(3, Player.RED, False)))
        text = format_match(match)
        self.assertIn('--- Match #5 (2 moves) ---', text)
        self.assertIn('=== Move #1 by Red in column 3', text)
        self.assertIn('|Y', format_match(Match(1, (MoveRecord(0, Player.YELLOW, False),))))

    def test_emoji_rendering(self):
        match = Match(1, (MoveRecord(0, Player.RED, False),))
        self.assertIn('\U0001f534', format_match(match, emoji=True))


if __name__ == '__main__':
    unittest.main()
