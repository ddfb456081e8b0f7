"""
Tests for the grid engine: shifting and merging, tile spawning, and legal move detection.
"""

from itertools import product
from unittest import TestCase, main

import numpy as np
from invariants import board_violations, random_matrix

from grid2048.core import (
    TILE_SPAWN_PROBS,
    Board,
    Direction,
    has_valid_move,
    illegal_directions,
    is_done,
    legal_directions,
    legal_moves,
    shift,
    spawn_tile,
)

# ##>: Full board without any equal neighbors.
LOCKED = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]]


def matrix_after(matrix, direction):
    outcome = shift(Board.from_matrix(matrix), direction)
    return None if outcome is None else outcome.board.to_lists()


class TestShift(TestCase):
    """Test sliding and merging."""

    def test_merge_pair_left(self):
        """Two equal tiles with a gap merge at the far edge."""
        board = Board.from_matrix([[0, 0, 0, 0], [0, 0, 0, 0], [2, 0, 0, 2], [0, 0, 0, 0]])
        outcome = shift(board, Direction.LEFT)

        self.assertEqual(outcome.board.to_lists(), [[0, 0, 0, 0], [0, 0, 0, 0], [4, 0, 0, 0], [0, 0, 0, 0]])
        self.assertEqual(outcome.score, 4)

    def test_merge_keeps_earlier_tile(self):
        """The tile nearest the edge survives; the other one lands on it and is removed."""
        board = Board.from_matrix([[2, 0, 0, 2], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        outcome = shift(board, "RIGHT")

        removed, survivor = outcome.board.tiles
        self.assertEqual((survivor.id, survivor.value, survivor.position, survivor.removed), (1, 4, (0, 3), False))
        self.assertEqual((removed.id, removed.value, removed.position, removed.removed), (0, 4, (0, 3), True))
        self.assertEqual(len(outcome.merges), 1)
        self.assertEqual(outcome.merges[0].survivor_id, 1)
        self.assertEqual(outcome.merges[0].removed_id, 0)

    def test_no_triple_merge(self):
        """2, 2, 2 becomes 4, 2 and never 8."""
        self.assertEqual(matrix_after([[2, 2, 2, 0]] + [[0] * 4] * 3, "LEFT")[0], [4, 2, 0, 0])
        self.assertEqual(matrix_after([[2, 2, 2, 0]] + [[0] * 4] * 3, "RIGHT")[0], [0, 0, 2, 4])
        self.assertEqual(matrix_after([[2, 2, 2, 2]] + [[0] * 4] * 3, "LEFT")[0], [4, 4, 0, 0])
        self.assertEqual(matrix_after([[4, 4, 8, 0]] + [[0] * 4] * 3, "LEFT")[0], [8, 8, 0, 0])

    def test_columns(self):
        """UP and DOWN work on columns, scanning from the edge moved toward."""
        matrix = [[2, 0, 0, 4], [2, 0, 0, 0], [2, 8, 0, 4], [0, 0, 0, 8]]

        self.assertEqual(matrix_after(matrix, "UP"), [[4, 8, 0, 8], [2, 0, 0, 8], [0, 0, 0, 0], [0, 0, 0, 0]])
        self.assertEqual(matrix_after(matrix, "DOWN"), [[0, 0, 0, 0], [0, 0, 0, 0], [2, 0, 0, 8], [4, 8, 0, 8]])

    def test_reference_examples(self):
        """Examples given to language-model advisors hold."""
        self.assertIsNone(matrix_after([[0, 0, 2, 4], [0, 0, 0, 8], [0, 8, 2, 4], [0, 0, 0, 4]], "RIGHT"))

        board = [[0, 0, 0, 0], [0, 0, 0, 8], [2, 0, 2, 16], [4, 0, 4, 8]]
        self.assertIsNone(matrix_after(board, "DOWN"))
        self.assertEqual(matrix_after(board, "LEFT"), [[0, 0, 0, 0], [8, 0, 0, 0], [4, 16, 0, 0], [8, 8, 0, 0]])

        board = [[2, 2, 2, 0], [0, 4, 4, 4], [8, 16, 0, 16], [2, 2, 2, 2]]
        self.assertEqual(matrix_after(board, "RIGHT"), [[0, 0, 2, 4], [0, 0, 4, 8], [0, 0, 8, 32], [0, 0, 4, 4]])

    def test_no_move_on_compacted_board(self):
        """A compacted board returns None, not an equal board."""
        board = Board.from_matrix([[2, 4, 0, 0], [8, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        self.assertIsNone(shift(board, Direction.LEFT))
        self.assertIsNone(shift(board, Direction.UP))

    def test_empty_board(self):
        """Nothing moves on an empty board."""
        for direction in Direction:
            self.assertIsNone(shift(Board(), direction))

    def test_locked_board(self):
        """A full board without equal neighbors can't move in any direction."""
        board = Board.from_matrix(LOCKED)
        for direction in Direction:
            self.assertIsNone(shift(board, direction))
        self.assertFalse(has_valid_move(board))

    def test_input_untouched(self):
        """Shifting returns a new board and leaves the input as is."""
        board = Board.from_matrix([[2, 2, 0, 0], [0, 0, 0, 0], [0, 0, 0, 4], [0, 0, 0, 0]])
        before = board.tiles
        shift(board, Direction.LEFT)
        self.assertEqual(board.tiles, before)

    def test_previously_removed_tiles_dropped(self):
        """Tiles removed by an earlier move don't reach the next board."""
        board = shift(Board.from_matrix([[2, 2, 0, 4]] + [[0] * 4] * 3), Direction.LEFT).board
        self.assertEqual(len(board.removed), 1)

        board = shift(board, Direction.DOWN).board
        self.assertEqual(len(board.removed), 0)
        self.assertEqual(board.to_lists()[3], [4, 4, 0, 0])

    def test_second_shift_is_no_move(self):
        """Shifting twice in the same direction does nothing the second time."""
        board = shift(Board.from_matrix([[0] * 4, [0] * 4, [2, 0, 0, 2], [0] * 4]), Direction.LEFT).board
        self.assertIsNone(shift(board, Direction.LEFT))

        board = shift(Board.from_matrix([[0, 2, 4, 8], [0, 0, 0, 2], [4, 0, 4, 0], [0] * 4]), Direction.UP).board
        self.assertIsNone(shift(board, Direction.UP))

    def test_second_shift_only_merges(self):
        """A second shift in the same direction changes the board only through merges the first one created."""
        board = shift(Board.from_matrix([[2, 2, 4, 0]] + [[0] * 4] * 3), Direction.LEFT).board
        self.assertEqual(board.to_lists()[0], [4, 4, 0, 0])
        self.assertEqual(shift(board, Direction.LEFT).board.to_lists()[0], [8, 0, 0, 0])

        rng = np.random.default_rng(7)
        for _ in range(200):
            board = Board.from_matrix(random_matrix(rng))
            for direction in Direction:
                outcome = shift(board, direction)
                if outcome is None:
                    continue
                again = shift(outcome.board, direction)
                if again is not None:
                    self.assertGreater(len(again.merges), 0)

    def test_shift_properties(self):
        """Shifts conserve value, lose one tile per merge, and merge each tile at most once."""
        rng = np.random.default_rng(42)
        for _ in range(300):
            board = Board.from_matrix(random_matrix(rng))
            for direction in Direction:
                outcome = shift(board, direction)
                if outcome is None:
                    continue
                after = outcome.board

                # ##>: Board is sound.
                self.assertEqual(board_violations(after), [])

                # ##>: Value conservation.
                self.assertEqual(after.total, board.total)

                # ##>: Each merge removes exactly one tile.
                self.assertEqual(board.count - after.count, len(outcome.merges))
                self.assertEqual(len(after.removed), len(outcome.merges))

                # ##>: No tile takes part in two merges.
                ids = [merge.survivor_id for merge in outcome.merges] + [merge.removed_id for merge in outcome.merges]
                self.assertEqual(len(ids), len(set(ids)))

                # ##>: Score is the sum of created values.
                self.assertEqual(outcome.score, sum(merge.value for merge in outcome.merges))

    def test_directional_symmetry(self):
        """RIGHT on a board mirrors LEFT on the mirrored board."""
        rng = np.random.default_rng(3)
        for _ in range(300):
            board = Board.from_matrix(random_matrix(rng))
            right = shift(board, Direction.RIGHT)
            left = shift(board.mirrored(), Direction.LEFT)

            if right is None:
                self.assertIsNone(left)
                continue
            self.assertEqual(set(right.board.mirrored().tiles), set(left.board.tiles))
            self.assertEqual(right.merges, left.merges)


class TestSpawnTile(TestCase):
    """Test tile spawning."""

    def test_spawn_on_empty_cell(self):
        """Spawning adds one 2 or 4 tile on an empty cell."""
        board = Board.from_matrix([[2, 0, 0, 0]] + [[0] * 4] * 3)
        after = spawn_tile(board, tile_id=10, rng=np.random.default_rng(0))

        self.assertEqual(after.count, 2)
        tile = after.tiles[-1]
        self.assertEqual(tile.id, 10)
        self.assertIn(tile.value, (2, 4))
        self.assertNotEqual(tile.position, (0, 0))
        self.assertTrue(tile.just_spawned)
        self.assertEqual(board_violations(after), [])

    def test_spawn_adds_only_new_value(self):
        """A spawn adds exactly the new tile's value and leaves the other tiles in place."""
        rng = np.random.default_rng(3)
        for tile_id in range(100, 140):
            board = Board.from_matrix(random_matrix(rng))
            after = spawn_tile(board, tile_id=tile_id, rng=rng)
            if board.is_full:
                continue
            tile = after.tiles[-1]

            self.assertEqual(after.total, board.total + tile.value)
            self.assertEqual(after.count, board.count + 1)
            self.assertEqual(after.cells(), {**board.cells(), tile.position: tile})

    def test_spawn_clears_previous_flag(self):
        """Only the newest tile is flagged as just spawned."""
        rng = np.random.default_rng(1)
        board = spawn_tile(Board(), tile_id=0, rng=rng)
        board = spawn_tile(board, tile_id=1, rng=rng)

        self.assertEqual([tile.just_spawned for tile in board.tiles], [False, True])

    def test_spawn_on_full_board(self):
        """A full board is returned unchanged."""
        board = Board.from_matrix(LOCKED)
        self.assertIs(spawn_tile(board, tile_id=99), board)

    def test_spawn_single_open_cell(self):
        """The only open cell is the one filled."""
        matrix = [row[:] for row in LOCKED]
        matrix[2][1] = 0
        after = spawn_tile(Board.from_matrix(matrix), tile_id=99, rng=np.random.default_rng(5))
        self.assertEqual(after.tiles[-1].position, (2, 1))
        self.assertTrue(after.is_full)

    def test_spawn_seed_reproducibility(self):
        """Same seed gives the same tile."""
        first = spawn_tile(Board(), tile_id=0, rng=np.random.default_rng(42))
        second = spawn_tile(Board(), tile_id=0, rng=np.random.default_rng(42))
        self.assertEqual(first, second)

    def test_spawn_distribution(self):
        """Values follow the 90/10 distribution and cells are uniform."""
        rng = np.random.default_rng(2024)
        values = {2: 0, 4: 0}
        cells = {}
        samples = 4000

        for _ in range(samples):
            tile = spawn_tile(Board(), tile_id=0, rng=rng).tiles[-1]
            values[tile.value] += 1
            cells[tile.position] = cells.get(tile.position, 0) + 1

        # ##>: Allow ±3% tolerance.
        self.assertAlmostEqual(values[2] / samples, TILE_SPAWN_PROBS[2], delta=0.03)
        self.assertAlmostEqual(values[4] / samples, TILE_SPAWN_PROBS[4], delta=0.03)

        # ##>: Every cell is reachable, none is favored.
        self.assertEqual(len(cells), 16)
        self.assertLess(max(cells.values()), 2 * samples / 16)


class TestValidMoves(TestCase):
    """Test legal move detection."""

    def test_empty_cell_always_movable(self):
        """A board with an empty cell has a valid move."""
        rng = np.random.default_rng(11)
        for _ in range(300):
            matrix = random_matrix(rng, values=(2, 4, 8, 16))
            matrix[tuple(rng.integers(4, size=2))] = 0
            self.assertTrue(has_valid_move(Board.from_matrix(matrix)))

    def test_hole_in_locked_board(self):
        """Emptying any single cell of a locked board gives it a move."""
        for row, column in product(range(4), repeat=2):
            matrix = [line[:] for line in LOCKED]
            matrix[row][column] = 0
            self.assertTrue(has_valid_move(Board.from_matrix(matrix)), (row, column))

    def test_lone_tile(self):
        """A single tile can always move, even from a corner where UP and LEFT do nothing."""
        corner = Board.from_matrix([[2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        self.assertEqual(legal_moves(corner), [Direction.DOWN, Direction.RIGHT])
        self.assertTrue(has_valid_move(corner))

        for row, column in product(range(4), repeat=2):
            matrix = [[0] * 4 for _ in range(4)]
            matrix[row][column] = 8
            self.assertTrue(has_valid_move(Board.from_matrix(matrix)), (row, column))

    def test_empty_board(self):
        """Nothing moves on an empty board."""
        self.assertFalse(has_valid_move(Board()))

    def test_full_board_with_pair(self):
        """A full board with one equal neighbor pair has a valid move."""
        matrix = [row[:] for row in LOCKED]
        matrix[3][3] = 4
        self.assertTrue(has_valid_move(Board.from_matrix(matrix)))

    def test_full_lines_are_symmetric(self):
        """A full line changes toward one end iff it changes toward the other."""
        for line in product((2, 4, 8), repeat=4):
            row = [list(line)] + [[16, 32, 16, 32], [32, 16, 32, 16], [16, 32, 16, 32]]
            column = [[value] + filler for value, filler in zip(line, ([16, 32, 16], [32, 16, 32]) * 2)]

            self.assertEqual(matrix_after(row, "LEFT") is None, matrix_after(row, "RIGHT") is None, line)
            self.assertEqual(matrix_after(column, "UP") is None, matrix_after(column, "DOWN") is None, line)

    def test_partial_lines_are_not_symmetric(self):
        """With empty cells, a line can move toward one end only."""
        row = [[0, 0, 0, 2]] + [[0] * 4] * 3
        self.assertIsNone(matrix_after(row, "RIGHT"))
        self.assertEqual(matrix_after(row, "LEFT")[0], [2, 0, 0, 0])

    def test_valid_move_on_random_boards(self):
        """A move is reported exactly when some direction changes the board, full or not."""
        rng = np.random.default_rng(99)
        for values in ((2, 4), (2, 4, 8), (0, 2, 4, 8)):
            for _ in range(300):
                board = Board.from_matrix(random_matrix(rng, values=values))
                self.assertEqual(has_valid_move(board), bool(legal_moves(board)))

    def test_matrix_mask_agrees_with_shift(self):
        """Vectorized move detection matches the tile engine."""
        rng = np.random.default_rng(5)
        for _ in range(300):
            matrix = random_matrix(rng)
            board = Board.from_matrix(matrix)

            self.assertEqual(legal_directions(matrix), legal_moves(board))
            self.assertEqual(set(illegal_directions(matrix)), set(Direction) - set(legal_moves(board)))
            self.assertEqual(is_done(matrix), not has_valid_move(board))

    def test_mask_on_known_boards(self):
        """Vectorized detection on a lone corner tile, a locked board and an empty one."""
        corner = np.zeros((4, 4), dtype=int)
        corner[0, 0] = 2
        self.assertEqual(legal_directions(corner), [Direction.DOWN, Direction.RIGHT])
        self.assertFalse(is_done(corner))

        self.assertEqual(legal_directions(np.array(LOCKED)), [])
        self.assertTrue(is_done(np.array(LOCKED)))
        self.assertTrue(is_done(np.zeros((4, 4), dtype=int)))

    def test_legal_directions_single_column(self):
        """A compacted left column can't move left or up."""
        board = np.array([[2, 0, 0, 0], [4, 0, 0, 0], [8, 0, 0, 0], [16, 0, 0, 0]])
        self.assertEqual(legal_directions(board), [Direction.RIGHT])
        self.assertEqual(illegal_directions(board), [Direction.UP, Direction.DOWN, Direction.LEFT])


if __name__ == '__main__':
    main()
