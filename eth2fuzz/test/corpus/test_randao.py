import pytest

from eth2fuzz.corpus.builders import BeaconBlockBuilder
from eth2fuzz.corpus.exceptions import OperationRejected
from eth2fuzz.corpus.gate import gate
from eth2fuzz.corpus.generate import generate_randao
from eth2fuzz.corpus.operations import Operation, OperationKind
from eth2fuzz.test.context import always_bls, spec_corpus_test


@always_bls
@spec_corpus_test
def test_randao_reveal_accepted(spec, ctx):
    operation = generate_randao(ctx)

    assert operation.kind == OperationKind.RANDAO
    assert operation.kind.label == 'Block'

    state = ctx.load_state()
    epoch = spec.get_current_epoch(state)
    pre_mix = spec.get_randao_mix(state, epoch)
    gate(spec, state, operation)
    assert spec.get_randao_mix(state, epoch) == spec.xor(pre_mix, spec.hash(operation.value.message.body.randao_reveal))


@always_bls
@spec_corpus_test
def test_randao_reveal_by_other_key_rejected(spec, ctx):
    state = ctx.load_state()
    proposer_index = spec.get_beacon_proposer_index(state)
    other_index = (proposer_index + 1) % ctx.settings.NUM_VALIDATORS
    signed_block = (
        BeaconBlockBuilder(spec)
        .set_slot(state.slot)
        .set_proposer_index(proposer_index)
        .set_randao_reveal(state, ctx.keypair(other_index).privkey)
        .build()
    )

    with pytest.raises(OperationRejected):
        gate(spec, state, Operation(OperationKind.RANDAO, signed_block))
