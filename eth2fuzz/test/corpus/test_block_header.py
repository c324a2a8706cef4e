import io

import pytest

from eth2fuzz.corpus.builders import BeaconBlockBuilder
from eth2fuzz.corpus.emitter import emit, parse_corpus_line
from eth2fuzz.corpus.exceptions import OperationRejected
from eth2fuzz.corpus.gate import gate
from eth2fuzz.corpus.generate import generate_block_header
from eth2fuzz.corpus.operations import Operation, OperationKind
from eth2fuzz.test.context import always_bls, spec_corpus_test


@always_bls
@spec_corpus_test
def test_block_header_emitted_at_fixture_slot(spec, ctx):
    assert ctx.settings.NUM_VALIDATORS == 8

    operation = generate_block_header(ctx)
    out = io.StringIO()
    emit(operation, out)

    label, encoded = out.getvalue().strip().split(' ')
    assert label == 'Block'
    # An empty body keeps every list at length zero, so the size is the minimum size of the type
    assert len(bytes.fromhex(encoded)) == len(spec.SignedBeaconBlock().encode_bytes())

    signed_block = parse_corpus_line(spec, out.getvalue(), OperationKind.BLOCK_HEADER)
    state = ctx.load_state()
    assert signed_block.message.slot == state.slot
    assert signed_block.message.parent_root == spec.hash_tree_root(state.latest_block_header)
    assert signed_block.message.proposer_index == spec.get_beacon_proposer_index(state)


@spec_corpus_test
def test_block_header_updates_latest_header(spec, ctx):
    operation = generate_block_header(ctx)

    state = ctx.load_state()
    gate(spec, state, operation)
    assert state.latest_block_header.slot == operation.value.message.slot
    assert state.latest_block_header.body_root == spec.hash_tree_root(operation.value.message.body)


@spec_corpus_test
def test_block_header_wrong_parent_rejected(spec, ctx):
    state = ctx.load_state()
    proposer_index = spec.get_beacon_proposer_index(state)
    signed_block = (
        BeaconBlockBuilder(spec)
        .set_slot(state.slot)
        .set_proposer_index(proposer_index)
        .set_parent_root(b'\x55' * 32)
        .sign(state, ctx.keypair(proposer_index).privkey)
        .build()
    )

    with pytest.raises(OperationRejected):
        gate(spec, state, Operation(OperationKind.BLOCK_HEADER, signed_block))


@spec_corpus_test
def test_block_header_wrong_proposer_rejected(spec, ctx):
    state = ctx.load_state()
    other_index = (spec.get_beacon_proposer_index(state) + 1) % ctx.settings.NUM_VALIDATORS
    signed_block = (
        BeaconBlockBuilder(spec)
        .set_slot(state.slot)
        .set_proposer_index(other_index)
        .set_parent_root(spec.hash_tree_root(state.latest_block_header))
        .sign(state, ctx.keypair(other_index).privkey)
        .build()
    )

    with pytest.raises(OperationRejected):
        gate(spec, state, Operation(OperationKind.BLOCK_HEADER, signed_block))


@spec_corpus_test
def test_signed_builder_refuses_changes(spec, ctx):
    state = ctx.load_state()
    builder = BeaconBlockBuilder(spec).set_slot(state.slot).sign(state, ctx.keypair(0).privkey)

    with pytest.raises(AssertionError):
        builder.set_slot(state.slot + 1)
