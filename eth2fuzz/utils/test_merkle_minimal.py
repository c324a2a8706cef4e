import pytest

from .hash_function import hash
from .merkle_minimal import (
    zerohashes, calc_merkle_tree_from_leaves, get_merkle_proof, mix_in_length,
)


def h(a: bytes, b: bytes) -> bytes:
    return hash(a + b)


def e(v: int) -> bytes:
    # prefix with 0xfff... to make it non-zero
    return b'\xff' * 28 + v.to_bytes(length=4, byteorder='little')


def z(i: int) -> bytes:
    return zerohashes[i]


cases = [
    (1, 0, e(0)),
    (1, 1, h(e(0), z(0))),
    (2, 1, h(e(0), e(1))),
    (1, 2, h(h(e(0), z(0)), z(1))),
    (3, 2, h(h(e(0), e(1)), h(e(2), z(0)))),
    (4, 2, h(h(e(0), e(1)), h(e(2), e(3)))),
    (5, 3, h(h(h(e(0), e(1)), h(e(2), e(3))), h(h(e(4), z(0)), z(1)))),
    (9, 4, h(h(h(h(e(0), e(1)), h(e(2), e(3))), h(h(e(4), e(5)), h(e(6), e(7)))),
              h(h(h(e(8), z(0)), z(1)), z(2)))),
]


@pytest.mark.parametrize(
    'count,layer_count,value',
    cases,
)
def test_merkle_tree_root(count, layer_count, value):
    chunks = [e(i) for i in range(count)]
    assert calc_merkle_tree_from_leaves(chunks, layer_count)[-1][0] == value


@pytest.mark.parametrize('index', [0, 1, 4, 8])
def test_get_merkle_proof_folds_to_root(index):
    leaves = [e(i) for i in range(index + 1)]
    tree = calc_merkle_tree_from_leaves(leaves, layer_count=5)
    proof = get_merkle_proof(tree, item_index=index, tree_len=5)
    assert len(proof) == 5

    value = leaves[index]
    for i, sibling in enumerate(proof):
        if index // (2**i) % 2:
            value = hash(sibling + value)
        else:
            value = hash(value + sibling)
    assert value == tree[-1][0]


def test_mix_in_length():
    root = calc_merkle_tree_from_leaves([e(0)], layer_count=2)[-1][0]
    assert mix_in_length(root, 1) == hash(root + b'\x01' + b'\x00' * 31)
