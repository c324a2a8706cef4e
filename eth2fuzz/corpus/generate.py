"""
One generation routine per operation kind: prepare a fresh copy of the fixture state, build and sign the operation,
then run it through the state transition. Every routine returns the accepted ``Operation``.
"""
from pathlib import Path
from typing import Sequence

from .builders import (
    AttesterSlashingBuilder, BeaconBlockBuilder, DepositBuilder, KeypairSigner, TransferBuilder, VoluntaryExitBuilder,
)
from .exceptions import SetupError
from .fixtures import Keypair, load_fixtures
from .gate import gate
from .operations import Operation, OperationKind
from .preconditions import credit_balance, get_proposer_index, increase_state_epoch, insert_eth1_data
from .settings import CorpusSettings


class CorpusContext(object):
    """
    State shared by the generation routines. The loaded fixture state is only ever handed out as a fresh view.
    """

    def __init__(self, spec, settings: CorpusSettings, state, keypairs: Sequence[Keypair]):
        self.spec = spec
        self.settings = settings
        self.keypairs = tuple(keypairs)
        self._state_backing = state.get_backing()

    @classmethod
    def from_fixtures(cls, spec, settings: CorpusSettings, fixtures_dir: Path) -> "CorpusContext":
        state, keypairs = load_fixtures(spec, settings, fixtures_dir)
        return cls(spec, settings, state, keypairs)

    def load_state(self):
        # No copy is necessary, as we wrap the immutable backing with a new view.
        return self.spec.BeaconState(backing=self._state_backing)

    def keypair(self, validator_index) -> Keypair:
        index = int(validator_index)
        if not 0 <= index < len(self.keypairs):
            raise SetupError(f"Unable to find keypair for validator {index}")
        return self.keypairs[index]

    def deposit_keypair(self) -> Keypair:
        # The first key without a validator in the fixture registry
        return self.keypair(self.settings.NUM_VALIDATORS)


def generate_voluntary_exit(ctx: CorpusContext) -> Operation:
    spec = ctx.spec
    state = ctx.load_state()

    # The validator has to be active for the persistent committee period first
    exit_epoch = spec.Epoch(ctx.settings.STATE_EPOCH + spec.config.PERSISTENT_COMMITTEE_PERIOD)
    increase_state_epoch(spec, state, exit_epoch)

    validator_index = get_proposer_index(spec, state)
    signed_voluntary_exit = (
        VoluntaryExitBuilder(spec, exit_epoch, validator_index)
        .sign(state, ctx.keypair(validator_index).privkey)
        .build()
    )

    operation = Operation(OperationKind.VOLUNTARY_EXIT, signed_voluntary_exit)
    gate(spec, state, operation)
    return operation


def _build_block(ctx: CorpusContext, state, with_randao_reveal: bool):
    spec = ctx.spec
    proposer_index = get_proposer_index(spec, state)
    privkey = ctx.keypair(proposer_index).privkey

    builder = (
        BeaconBlockBuilder(spec)
        .set_slot(state.slot)
        .set_proposer_index(proposer_index)
        .set_parent_root(spec.hash_tree_root(state.latest_block_header))
    )
    if with_randao_reveal:
        builder.set_randao_reveal(state, privkey)
    return builder.sign(state, privkey).build()


def generate_block_header(ctx: CorpusContext) -> Operation:
    state = ctx.load_state()
    operation = Operation(OperationKind.BLOCK_HEADER, _build_block(ctx, state, with_randao_reveal=False))
    gate(ctx.spec, state, operation)
    return operation


def generate_randao(ctx: CorpusContext) -> Operation:
    state = ctx.load_state()
    operation = Operation(OperationKind.RANDAO, _build_block(ctx, state, with_randao_reveal=True))
    gate(ctx.spec, state, operation)
    return operation


def generate_attester_slashing(ctx: CorpusContext, surround_vote: bool = False) -> Operation:
    spec = ctx.spec
    state = ctx.load_state()

    validator_indices = range(ctx.settings.NUM_VALIDATORS)
    signer = KeypairSigner(spec, state, ctx.keypairs)
    if surround_vote:
        attester_slashing = AttesterSlashingBuilder.surround_vote(spec, validator_indices, state.slot, signer)
    else:
        attester_slashing = AttesterSlashingBuilder.double_vote(spec, validator_indices, state.slot, signer)

    operation = Operation(OperationKind.ATTESTER_SLASHING, attester_slashing)
    gate(spec, state, operation)
    return operation


def generate_deposit(ctx: CorpusContext, deposit_index=None) -> Operation:
    spec = ctx.spec
    state = ctx.load_state()

    amount = ctx.settings.DEPOSIT_AMOUNT
    if amount < spec.MIN_DEPOSIT_AMOUNT:
        raise SetupError(f"DEPOSIT_AMOUNT {amount} is below the minimum deposit of {spec.MIN_DEPOSIT_AMOUNT}")
    if deposit_index is None:
        deposit_index = state.eth1_deposit_index

    keypair = ctx.deposit_keypair()
    deposit = (
        DepositBuilder(spec, keypair.pubkey, amount)
        .set_index(deposit_index)
        .sign(state, keypair.privkey, spec.get_current_epoch(state))
        .build()
    )
    insert_eth1_data(spec, state, deposit)

    operation = Operation(OperationKind.DEPOSIT, deposit)
    gate(spec, state, operation)
    return operation


def generate_transfer(ctx: CorpusContext, credit=None) -> Operation:
    spec = ctx.spec
    state = ctx.load_state()

    amount = ctx.settings.TRANSFER_AMOUNT
    fee = ctx.settings.TRANSFER_FEE
    sender = get_proposer_index(spec, state)
    recipient = (sender + 1) % ctx.settings.NUM_VALIDATORS
    keypair = ctx.keypair(sender)

    # The sender has to keep a full effective balance after paying out amount and fee
    credit_balance(spec, state, sender, amount + fee if credit is None else credit)

    signed_transfer = (
        TransferBuilder(spec, sender, recipient, amount, fee, state.slot, keypair.pubkey)
        .sign(state, keypair.privkey)
        .build()
    )

    operation = Operation(OperationKind.TRANSFER, signed_transfer)
    gate(spec, state, operation)
    return operation


generators = {
    OperationKind.VOLUNTARY_EXIT: generate_voluntary_exit,
    OperationKind.BLOCK_HEADER: generate_block_header,
    OperationKind.ATTESTER_SLASHING: generate_attester_slashing,
    OperationKind.DEPOSIT: generate_deposit,
    OperationKind.RANDAO: generate_randao,
    OperationKind.TRANSFER: generate_transfer,
}


def generate(ctx: CorpusContext, kind: OperationKind) -> Operation:
    return generators[kind](ctx)
