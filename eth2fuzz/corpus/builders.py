"""
Builders for the operations of the corpus.

Every builder follows the same steps: construct with the operation parameters,
set the values that depend on the prepared state, ``sign``, then ``build``.
A builder refuses changes once signed, so a built operation always carries the signature of its own fields.
"""
from typing import Protocol, Sequence

from eth2fuzz.utils import bls

from .exceptions import SetupError


def _assert_unsigned(builder) -> None:
    assert builder.signature is None, f"{type(builder).__name__} is already signed"


def _signature_or_empty(spec, builder):
    return spec.BLSSignature() if builder.signature is None else builder.signature


class Signer(Protocol):
    def sign(self, validator_index, message, epoch, domain_type):
        """
        Sign ``message`` for ``validator_index`` under the ``domain_type`` domain at ``epoch``.
        """
        ...


class KeypairSigner(object):
    """
    Signs with the keypair at the position of the validator in the registry of ``state``.
    """

    def __init__(self, spec, state, keypairs):
        self.spec = spec
        self.state = state
        self.keypairs = keypairs[:len(state.validators)]

    def sign(self, validator_index, message, epoch, domain_type):
        index = int(validator_index)
        if not 0 <= index < len(self.keypairs):
            raise SetupError(f"Unable to find signing key for validator {index}")
        domain = self.spec.get_domain(self.state, domain_type, epoch)
        signing_root = self.spec.compute_signing_root(message, domain)
        return bls.Sign(self.keypairs[index].privkey, signing_root)


class VoluntaryExitBuilder(object):

    def __init__(self, spec, epoch, validator_index):
        self.spec = spec
        self.voluntary_exit = spec.VoluntaryExit(epoch=epoch, validator_index=validator_index)
        self.signature = None

    def sign(self, state, privkey):
        _assert_unsigned(self)
        domain = self.spec.get_domain(state, self.spec.DOMAIN_VOLUNTARY_EXIT, self.voluntary_exit.epoch)
        signing_root = self.spec.compute_signing_root(self.voluntary_exit, domain)
        self.signature = bls.Sign(privkey, signing_root)
        return self

    def build(self):
        return self.spec.SignedVoluntaryExit(
            message=self.voluntary_exit,
            signature=_signature_or_empty(self.spec, self),
        )


class BeaconBlockBuilder(object):
    """
    Builds a block with an empty operations body.
    Only the header fields and, optionally, the randao reveal are filled in.
    """

    def __init__(self, spec):
        self.spec = spec
        self.block = spec.BeaconBlock()
        self.signature = None

    def set_slot(self, slot):
        _assert_unsigned(self)
        self.block.slot = slot
        return self

    def set_proposer_index(self, proposer_index):
        _assert_unsigned(self)
        self.block.proposer_index = proposer_index
        return self

    def set_parent_root(self, parent_root):
        _assert_unsigned(self)
        self.block.parent_root = parent_root
        return self

    def set_randao_reveal(self, state, privkey):
        _assert_unsigned(self)
        epoch = self.spec.compute_epoch_at_slot(self.block.slot)
        domain = self.spec.get_domain(state, self.spec.DOMAIN_RANDAO, epoch)
        signing_root = self.spec.compute_signing_root(epoch, domain)
        self.block.body.randao_reveal = bls.Sign(privkey, signing_root)
        return self

    def sign(self, state, privkey):
        _assert_unsigned(self)
        epoch = self.spec.compute_epoch_at_slot(self.block.slot)
        domain = self.spec.get_domain(state, self.spec.DOMAIN_BEACON_PROPOSER, epoch)
        signing_root = self.spec.compute_signing_root(self.block, domain)
        self.signature = bls.Sign(privkey, signing_root)
        return self

    def build(self):
        return self.spec.SignedBeaconBlock(
            message=self.block,
            signature=_signature_or_empty(self.spec, self),
        )


class AttesterSlashingBuilder(object):
    """
    Builds two conflicting attestations by the same ``validator_indices``.
    Signatures come from a ``Signer``, one per validator, aggregated per attestation.
    """

    def __init__(self, spec, validator_indices: Sequence[int]):
        self.spec = spec
        self.validator_indices = sorted(set(int(index) for index in validator_indices))
        self.data_1 = None
        self.data_2 = None
        self.signature = None

    def set_double_vote(self, slot):
        """
        Two different votes for the same target epoch.
        """
        _assert_unsigned(self)
        spec = self.spec
        self.data_1 = spec.AttestationData(
            slot=slot,
            index=0,
            beacon_block_root=b'\x01' * 32,
            source=spec.Checkpoint(epoch=spec.GENESIS_EPOCH),
            target=spec.Checkpoint(epoch=spec.compute_epoch_at_slot(slot), root=b'\x01' * 32),
        )
        self.data_2 = self.data_1.copy()
        self.data_2.beacon_block_root = b'\x02' * 32
        self.data_2.target.root = b'\x02' * 32
        return self

    def set_surround_vote(self, slot):
        """
        A vote whose source-to-target span lies strictly inside the span of the first one.
        """
        _assert_unsigned(self)
        spec = self.spec
        epoch = spec.compute_epoch_at_slot(slot)
        self.data_1 = spec.AttestationData(
            slot=slot,
            index=0,
            beacon_block_root=b'\x01' * 32,
            source=spec.Checkpoint(epoch=spec.GENESIS_EPOCH),
            target=spec.Checkpoint(epoch=epoch + 2, root=b'\x01' * 32),
        )
        self.data_2 = spec.AttestationData(
            slot=slot,
            index=0,
            beacon_block_root=b'\x02' * 32,
            source=spec.Checkpoint(epoch=spec.GENESIS_EPOCH + 1),
            target=spec.Checkpoint(epoch=epoch + 1, root=b'\x02' * 32),
        )
        return self

    def _aggregate_signature(self, data, signer: Signer):
        signatures = [
            signer.sign(index, data, data.target.epoch, self.spec.DOMAIN_BEACON_ATTESTER)
            for index in self.validator_indices
        ]
        return bls.Aggregate(signatures)

    def sign(self, signer: Signer):
        _assert_unsigned(self)
        assert self.data_1 is not None and self.data_2 is not None, "attestation data must be set before signing"
        self.signature = (
            self._aggregate_signature(self.data_1, signer),
            self._aggregate_signature(self.data_2, signer),
        )
        return self

    def build(self):
        spec = self.spec
        signature_1, signature_2 = self.signature or (spec.BLSSignature(), spec.BLSSignature())
        return spec.AttesterSlashing(
            attestation_1=spec.IndexedAttestation(
                attesting_indices=self.validator_indices,
                data=self.data_1 or spec.AttestationData(),
                signature=signature_1,
            ),
            attestation_2=spec.IndexedAttestation(
                attesting_indices=self.validator_indices,
                data=self.data_2 or spec.AttestationData(),
                signature=signature_2,
            ),
        )

    @classmethod
    def double_vote(cls, spec, validator_indices, slot, signer: Signer):
        return cls(spec, validator_indices).set_double_vote(slot).sign(signer).build()

    @classmethod
    def surround_vote(cls, spec, validator_indices, slot, signer: Signer):
        return cls(spec, validator_indices).set_surround_vote(slot).sign(signer).build()


class DepositBuilder(object):
    """
    Builds a deposit with an all-zero proof. The proof is filled in when the deposit is inserted into a state.
    """

    def __init__(self, spec, pubkey, amount, withdrawal_credentials=None):
        self.spec = spec
        if withdrawal_credentials is None:
            withdrawal_credentials = spec.BLS_WITHDRAWAL_PREFIX + spec.hash(pubkey)[1:]
        self.deposit_data = spec.DepositData(
            pubkey=pubkey,
            withdrawal_credentials=withdrawal_credentials,
            amount=amount,
        )
        self.index = 0
        self.signature = None

    def set_index(self, index):
        self.index = index
        return self

    def sign(self, state, privkey, epoch=None):
        _assert_unsigned(self)
        deposit_message = self.spec.DepositMessage(
            pubkey=self.deposit_data.pubkey,
            withdrawal_credentials=self.deposit_data.withdrawal_credentials,
            amount=self.deposit_data.amount,
        )
        domain = self.spec.get_domain(state, self.spec.DOMAIN_DEPOSIT, epoch)
        signing_root = self.spec.compute_signing_root(deposit_message, domain)
        self.signature = bls.Sign(privkey, signing_root)
        self.deposit_data.signature = self.signature
        return self

    def build(self):
        return self.spec.Deposit(index=self.index, data=self.deposit_data)


class TransferBuilder(object):

    def __init__(self, spec, sender, recipient, amount, fee, slot, pubkey):
        self.spec = spec
        self.transfer = spec.Transfer(
            sender=sender,
            recipient=recipient,
            amount=amount,
            fee=fee,
            slot=slot,
            pubkey=pubkey,
        )
        self.signature = None

    def sign(self, state, privkey):
        _assert_unsigned(self)
        epoch = self.spec.compute_epoch_at_slot(self.transfer.slot)
        domain = self.spec.get_domain(state, self.spec.DOMAIN_TRANSFER, epoch)
        signing_root = self.spec.compute_signing_root(self.transfer, domain)
        self.signature = bls.Sign(privkey, signing_root)
        return self

    def build(self):
        return self.spec.SignedTransfer(
            message=self.transfer,
            signature=_signature_or_empty(self.spec, self),
        )
