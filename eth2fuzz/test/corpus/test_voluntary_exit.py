import pytest

from eth2fuzz.corpus.builders import VoluntaryExitBuilder
from eth2fuzz.corpus.exceptions import OperationRejected
from eth2fuzz.corpus.gate import gate
from eth2fuzz.corpus.generate import generate_voluntary_exit
from eth2fuzz.corpus.operations import Operation, OperationKind
from eth2fuzz.corpus.preconditions import increase_state_epoch
from eth2fuzz.test.context import always_bls, never_bls, spec_corpus_test
from eth2fuzz.utils import bls


def prepare_exit_state(spec, ctx):
    state = ctx.load_state()
    increase_state_epoch(spec, state, ctx.settings.STATE_EPOCH + spec.config.PERSISTENT_COMMITTEE_PERIOD)
    return state


@spec_corpus_test
def test_exit_epoch_is_past_committee_period(spec, ctx):
    operation = generate_voluntary_exit(ctx)

    assert operation.kind == OperationKind.VOLUNTARY_EXIT
    expected_epoch = ctx.settings.STATE_EPOCH + spec.config.PERSISTENT_COMMITTEE_PERIOD
    assert operation.value.message.epoch == expected_epoch

    state = prepare_exit_state(spec, ctx)
    assert spec.get_current_epoch(state) == expected_epoch


@spec_corpus_test
def test_exiting_validator_is_proposer(spec, ctx):
    operation = generate_voluntary_exit(ctx)

    state = prepare_exit_state(spec, ctx)
    assert operation.value.message.validator_index == spec.get_beacon_proposer_index(state)


@spec_corpus_test
def test_exit_initiated_after_gate(spec, ctx):
    operation = generate_voluntary_exit(ctx)

    state = prepare_exit_state(spec, ctx)
    gate(spec, state, operation)
    validator = state.validators[operation.value.message.validator_index]
    assert validator.exit_epoch < spec.FAR_FUTURE_EPOCH


@spec_corpus_test
def test_exit_rejected_before_committee_period(spec, ctx):
    state = ctx.load_state()
    validator_index = spec.get_beacon_proposer_index(state)
    signed_voluntary_exit = (
        VoluntaryExitBuilder(spec, spec.get_current_epoch(state), validator_index)
        .sign(state, ctx.keypair(validator_index).privkey)
        .build()
    )

    with pytest.raises(OperationRejected):
        gate(spec, state, Operation(OperationKind.VOLUNTARY_EXIT, signed_voluntary_exit))


@always_bls
@spec_corpus_test
def test_exit_signature_accepted(spec, ctx):
    operation = generate_voluntary_exit(ctx)

    state = prepare_exit_state(spec, ctx)
    validator = state.validators[operation.value.message.validator_index]
    domain = spec.get_domain(state, spec.DOMAIN_VOLUNTARY_EXIT, operation.value.message.epoch)
    signing_root = spec.compute_signing_root(operation.value.message, domain)
    assert spec.bls.Verify(validator.pubkey, signing_root, operation.value.signature)


@always_bls
@spec_corpus_test
def test_exit_signed_by_other_key_rejected(spec, ctx):
    state = prepare_exit_state(spec, ctx)
    validator_index = spec.get_beacon_proposer_index(state)
    other_index = (validator_index + 1) % ctx.settings.NUM_VALIDATORS
    signed_voluntary_exit = (
        VoluntaryExitBuilder(spec, spec.get_current_epoch(state), validator_index)
        .sign(state, ctx.keypair(other_index).privkey)
        .build()
    )

    with pytest.raises(OperationRejected):
        gate(spec, state, Operation(OperationKind.VOLUNTARY_EXIT, signed_voluntary_exit))


@never_bls
@spec_corpus_test
def test_stub_signature_without_bls(spec, ctx):
    operation = generate_voluntary_exit(ctx)
    assert operation.value.signature == spec.BLSSignature(bls.STUB_SIGNATURE)
