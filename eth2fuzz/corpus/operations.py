from enum import Enum
from typing import Any, NamedTuple


class OperationKind(Enum):
    """
    Operation kinds of the corpus, with the label a corpus line starts with
    and the name of the SSZ type the line carries.
    """
    VOLUNTARY_EXIT = ('voluntary_exit', 'VoluntaryExit', 'SignedVoluntaryExit')
    BLOCK_HEADER = ('block_header', 'Block', 'SignedBeaconBlock')
    ATTESTER_SLASHING = ('attester_slashing', 'AttesterSlashing', 'AttesterSlashing')
    DEPOSIT = ('deposit', 'Deposit', 'Deposit')
    RANDAO = ('randao', 'Block', 'SignedBeaconBlock')
    TRANSFER = ('transfer', 'Transfer', 'SignedTransfer')

    def __init__(self, key, label, type_name):
        self.key = key
        self.label = label
        self.type_name = type_name

    def ssz_type(self, spec):
        return getattr(spec, self.type_name)

    @classmethod
    def from_key(cls, key: str) -> "OperationKind":
        for kind in cls:
            if kind.key == key:
                return kind
        raise ValueError(f"unknown operation kind: {key}")


class Operation(NamedTuple):
    kind: OperationKind
    value: Any
