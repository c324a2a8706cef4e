import pytest

from eth2fuzz.corpus.exceptions import SetupError
from eth2fuzz.corpus.preconditions import credit_balance, get_proposer_index, increase_state_epoch
from eth2fuzz.test.context import spec_state_test


@spec_state_test
def test_increase_state_epoch(spec, state):
    target_epoch = spec.get_current_epoch(state) + 3
    increase_state_epoch(spec, state, target_epoch)

    assert state.slot == spec.compute_start_slot_at_epoch(target_epoch)
    assert spec.get_current_epoch(state) == target_epoch


@spec_state_test
def test_increase_state_epoch_refuses_past_epoch(spec, state):
    increase_state_epoch(spec, state, spec.get_current_epoch(state) + 2)

    with pytest.raises(SetupError):
        increase_state_epoch(spec, state, spec.get_current_epoch(state) - 1)


@spec_state_test
def test_increase_state_epoch_keeps_registry(spec, state):
    pre_validators_root = spec.hash_tree_root(state.validators)
    pre_balances_root = spec.hash_tree_root(state.balances)
    increase_state_epoch(spec, state, spec.get_current_epoch(state) + 1)

    assert spec.hash_tree_root(state.validators) == pre_validators_root
    assert spec.hash_tree_root(state.balances) == pre_balances_root


@spec_state_test
def test_credit_balance(spec, state):
    pre_balance = state.balances[3]
    credit_balance(spec, state, 3, 12345)

    assert state.balances[3] == pre_balance + 12345
    assert state.balances[2] == spec.MAX_EFFECTIVE_BALANCE


@spec_state_test
def test_proposer_follows_slot(spec, state):
    proposers = set()
    for slot_offset in range(spec.SLOTS_PER_EPOCH):
        state.slot = spec.compute_start_slot_at_epoch(spec.get_current_epoch(state)) + slot_offset
        proposer_index = get_proposer_index(spec, state)
        assert proposer_index < len(state.validators)
        assert proposer_index == spec.get_beacon_proposer_index(state)
        proposers.add(proposer_index)
    assert len(proposers) > 0
