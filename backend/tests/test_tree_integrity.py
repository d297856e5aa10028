import unittest
from types import SimpleNamespace

from boardtree.errors import NotFoundError, ValidationError
from boardtree.services.tree_integrity import BoardTree, build_hierarchy, flatten_hierarchy


def _board(board_id, parent_id=None):
    return SimpleNamespace(id=board_id, name=f"Board {board_id}", parent_id=parent_id)


def _sample_forest():
    # 1 -> (2 -> (4, 5), 3), 6 -> 7
    return [
        _board(1),
        _board(2, 1),
        _board(3, 1),
        _board(4, 2),
        _board(5, 2),
        _board(6),
        _board(7, 6),
    ]


def _chain(length, start=1):
    boards = [_board(start)]
    for board_id in range(start + 1, start + length):
        boards.append(_board(board_id, board_id - 1))
    return boards


class TestDepthOf(unittest.TestCase):
    def test_no_board_is_depth_zero(self) -> None:
        self.assertEqual(BoardTree([]).depth_of(None), 0)

    def test_levels_are_counted_from_root(self) -> None:
        tree = BoardTree(_sample_forest())
        self.assertEqual(tree.depth_of(1), 1)
        self.assertEqual(tree.depth_of(2), 2)
        self.assertEqual(tree.depth_of(5), 3)
        self.assertEqual(tree.depth_of(7), 2)

    def test_unknown_board_raises_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            BoardTree(_sample_forest()).depth_of(99)

    def test_dangling_parent_link_is_rejected(self) -> None:
        tree = BoardTree([_board(1), _board(2, 1), _board(3, 42)])
        with self.assertRaises(ValidationError) as err:
            tree.depth_of(3)
        self.assertIn("nonexistent", err.exception.message)

    def test_parent_cycle_is_rejected_instead_of_looping(self) -> None:
        tree = BoardTree([_board(1, 3), _board(2, 1), _board(3, 2)])
        with self.assertRaises(ValidationError):
            tree.depth_of(2)

    def test_long_chain_does_not_recurse(self) -> None:
        tree = BoardTree(_chain(5000))
        self.assertEqual(tree.depth_of(5000), 5000)


class TestDescendants(unittest.TestCase):
    def setUp(self) -> None:
        self.tree = BoardTree(_sample_forest())

    def test_board_is_its_own_descendant(self) -> None:
        self.assertTrue(self.tree.is_descendant(2, 2))

    def test_grandchild_is_descendant(self) -> None:
        self.assertTrue(self.tree.is_descendant(1, 5))

    def test_ancestor_is_not_descendant(self) -> None:
        self.assertFalse(self.tree.is_descendant(5, 1))

    def test_other_branch_is_not_descendant(self) -> None:
        self.assertFalse(self.tree.is_descendant(2, 3))
        self.assertFalse(self.tree.is_descendant(1, 7))

    def test_subtree_ids_are_pre_order(self) -> None:
        self.assertEqual(self.tree.subtree_ids(1), [1, 2, 4, 5, 3])
        self.assertEqual(self.tree.subtree_ids(7), [7])

    def test_children_of_keeps_creation_order(self) -> None:
        self.assertEqual([b.id for b in self.tree.children_of(None)], [1, 6])
        self.assertEqual([b.id for b in self.tree.children_of(2)], [4, 5])
        self.assertEqual(self.tree.children_of(4), [])


class TestSubtreeHeight(unittest.TestCase):
    def test_leaf_has_height_zero(self) -> None:
        self.assertEqual(BoardTree(_sample_forest()).max_subtree_height(4), 0)

    def test_height_follows_deepest_branch(self) -> None:
        tree = BoardTree(_sample_forest())
        self.assertEqual(tree.max_subtree_height(1), 2)
        self.assertEqual(tree.max_subtree_height(6), 1)

    def test_chain_height(self) -> None:
        self.assertEqual(BoardTree(_chain(5)).max_subtree_height(1), 4)


class TestBuildHierarchy(unittest.TestCase):
    def test_forest_shape(self) -> None:
        roots = build_hierarchy(_sample_forest())
        self.assertEqual([node.board.id for node in roots], [1, 6])
        self.assertEqual([node.board.id for node in roots[0].children], [2, 3])
        self.assertEqual([node.board.id for node in roots[0].children[0].children], [4, 5])
        self.assertEqual(roots[0].children[1].children, [])
        self.assertEqual([node.board.id for node in roots[1].children], [7])

    def test_scoped_to_parent(self) -> None:
        children = build_hierarchy(_sample_forest(), 2)
        self.assertEqual([node.board.id for node in children], [4, 5])

    def test_unreachable_boards_are_left_out(self) -> None:
        boards = _sample_forest() + [_board(8, 42), _board(9, 8)]
        ids = {board.id for board in flatten_hierarchy(build_hierarchy(boards))}
        self.assertEqual(ids, {1, 2, 3, 4, 5, 6, 7})

    def test_empty_input(self) -> None:
        self.assertEqual(build_hierarchy([]), [])

    def test_round_trip_preserves_ids_and_parents(self) -> None:
        boards = _sample_forest()
        flat = flatten_hierarchy(build_hierarchy(boards))
        self.assertEqual([board.id for board in flat], [1, 2, 4, 5, 3, 6, 7])
        self.assertEqual(
            {board.id: board.parent_id for board in flat},
            {board.id: board.parent_id for board in boards},
        )

    def test_round_trip_is_idempotent(self) -> None:
        boards = _sample_forest()
        once = flatten_hierarchy(build_hierarchy(boards))
        twice = flatten_hierarchy(build_hierarchy(once))
        self.assertEqual([board.id for board in once], [board.id for board in twice])

    def test_deep_chain(self) -> None:
        roots = build_hierarchy(_chain(3000))
        self.assertEqual(len(flatten_hierarchy(roots)), 3000)


if __name__ == "__main__":
    unittest.main()
