import pytest

from errors import EmptyInputError
from huffman import (
    CodeTable,
    Internal,
    Leaf,
    build_tree,
    count_frequencies,
    format_tree,
    iter_leaves,
    leaf_count,
)


def _is_prefix_free(codes):
    words = list(codes.values())
    for i, a in enumerate(words):
        for j, b in enumerate(words):
            if i != j and b[:len(a)] == a:
                return False
    return True


def test_count_frequencies_counts_each_byte():
    freqs = count_frequencies(b"abracadabra")
    assert dict(freqs) == {
        ord("a"): 5, ord("b"): 2, ord("r"): 2, ord("c"): 1, ord("d"): 1
    }


def test_count_frequencies_empty_raises():
    with pytest.raises(EmptyInputError):
        _ = count_frequencies(b"")
    with pytest.raises(ValueError):
        _ = count_frequencies(b"")


def test_build_tree_without_symbols_raises():
    with pytest.raises(EmptyInputError):
        _ = build_tree({})
    with pytest.raises(EmptyInputError):
        _ = build_tree({65: 0})


def test_single_symbol_tree_is_a_leaf_with_one_bit_code():
    root = build_tree(count_frequencies(b"aaaa"))
    assert isinstance(root, Leaf)
    assert root.symbol == ord("a") and root.weight == 4
    table = CodeTable(root)
    assert table.codes == {ord("a"): (0,)}


def test_equal_weights_tie_break_by_symbol():
    for _ in range(5):
        root = build_tree(count_frequencies(b"abab"))
        assert isinstance(root, Internal)
        table = CodeTable(root)
        assert table.encode_symbol(ord("a")) == (0,)
        assert table.encode_symbol(ord("b")) == (1,)


def test_leaves_come_before_internal_nodes_of_equal_weight():
    # a and b merge into weight 2, which then ties with c
    root = build_tree({ord("a"): 1, ord("b"): 1, ord("c"): 2})
    table = CodeTable(root)
    assert table.codes == {
        ord("c"): (0,),
        ord("a"): (1, 0),
        ord("b"): (1, 1),
    }


def test_build_tree_ignores_table_iteration_order():
    freqs = count_frequencies(b"hello my name is gunther welcome to the valley!")
    forward = dict(sorted(freqs.items()))
    backward = dict(sorted(freqs.items(), reverse=True))
    assert CodeTable(build_tree(forward)) == CodeTable(build_tree(backward))


def test_internal_weight_is_sum_of_children():
    node = Internal(Leaf(1, 3), Internal(Leaf(2, 4), Leaf(3, 5)))
    assert node.weight == 12
    assert node.right.weight == 9


def test_leaf_rejects_non_byte_symbol():
    with pytest.raises(ValueError):
        _ = Leaf(256, 1)


def test_tree_invariants_on_random_inputs(random_samples):
    for data in random_samples:
        root = build_tree(count_frequencies(data))
        assert root.weight == len(data)
        assert leaf_count(root) == len(set(data))
        assert sorted(leaf.symbol for leaf in iter_leaves(root)) == sorted(set(data))

        table = CodeTable(root)
        assert table.symbols == sorted(set(data))
        assert all(len(code) >= 1 for code in table.codes.values())
        assert _is_prefix_free(table.codes)
        if len(table) > 1:
            # a full binary tree satisfies Kraft's equality
            assert sum(2.0 ** -len(c) for c in table.codes.values()) == 1.0


def test_all_byte_values_give_256_leaves_of_depth_8():
    data = bytes(range(256))
    root = build_tree(count_frequencies(data))
    assert leaf_count(root) == 256
    table = CodeTable(root)
    assert len(table) == 256
    assert {len(code) for code in table.codes.values()} == {8}


def test_frequent_symbols_get_shorter_codes():
    table = CodeTable(build_tree(count_frequencies(b"a" * 50 + b"b" * 5 + b"c")))
    assert len(table.encode_symbol(ord("a"))) < len(table.encode_symbol(ord("c")))


def test_code_table_lookup_both_ways():
    table = CodeTable(build_tree({ord("a"): 1, ord("b"): 1, ord("c"): 2}))
    assert ord("b") in table
    assert ord("z") not in table
    assert table.decode_symbol([1, 1]) == ord("b")
    assert table.decode_symbol((1,)) is None
    with pytest.raises(KeyError):
        _ = table.encode_symbol(ord("z"))


def test_format_tree_lists_nodes_by_depth():
    root = build_tree(count_frequencies(b"aab\n"))
    # \n and b merge first, then that node (weight 2) ties with a (weight 2)
    assert format_tree(root) == "\n".join([
        "4",
        " 'a': 2",
        " 2",
        "  0x0a: 1",
        "  'b': 1",
    ])


def test_format_tree_single_leaf():
    assert format_tree(Leaf(ord("x"), 7)) == "'x': 7"
