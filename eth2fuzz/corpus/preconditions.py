"""
State mutations that make a freshly loaded fixture state accept one specific operation.

None of these go through the state transition: they edit the state directly, the same way test helpers do.
"""
from eth2fuzz.utils.hash_function import ZERO_BYTES32
from eth2fuzz.utils.merkle_minimal import calc_merkle_tree_from_leaves, get_merkle_proof, mix_in_length

from .exceptions import SetupError


def increase_state_epoch(spec, state, epoch) -> None:
    """
    Move ``state`` to the first slot of ``epoch``.
    """
    current_epoch = spec.get_current_epoch(state)
    if epoch < current_epoch:
        raise SetupError(f"cannot move state back from epoch {current_epoch} to {epoch}")
    state.slot = spec.compute_start_slot_at_epoch(spec.Epoch(epoch))


def credit_balance(spec, state, index, amount) -> None:
    """
    Add ``amount`` to the balance of validator ``index``, without any matching deposit or reward.
    Only meant for building corpus seeds.
    """
    spec.increase_balance(state, spec.ValidatorIndex(index), spec.Gwei(amount))


def get_proposer_index(spec, state):
    """
    Proposer at ``state.slot``, using the shuffling of the current epoch.
    Recompute after every slot change.
    """
    return spec.get_beacon_proposer_index(state)


def insert_eth1_data(spec, state, deposit) -> None:
    """
    Make ``state.eth1_data`` commit to a deposit tree holding ``deposit`` at the next deposit index,
    and fill in the proof of ``deposit`` against that tree.
    """
    index = int(state.eth1_deposit_index)
    leaves = [ZERO_BYTES32] * index + [spec.hash_tree_root(deposit.data)]
    tree = calc_merkle_tree_from_leaves(leaves, spec.DEPOSIT_CONTRACT_TREE_DEPTH)
    deposit_count = len(leaves)
    deposit.proof = (
        get_merkle_proof(tree, item_index=index, tree_len=spec.DEPOSIT_CONTRACT_TREE_DEPTH)
        + [deposit_count.to_bytes(32, 'little')]
    )
    state.eth1_data.deposit_root = mix_in_length(tree[-1][0], deposit_count)
    state.eth1_data.deposit_count = deposit_count
