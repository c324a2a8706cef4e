from .exceptions import OperationRejected
from .operations import Operation, OperationKind


def _process_block_header(spec, state, signed_block):
    spec.process_block_header(state, signed_block.message)
    assert spec.verify_block_signature(state, signed_block)


def _process_randao(spec, state, signed_block):
    spec.process_randao(state, signed_block.message.body)


processors = {
    OperationKind.VOLUNTARY_EXIT: lambda spec, state, op: spec.process_voluntary_exits(state, [op]),
    OperationKind.BLOCK_HEADER: _process_block_header,
    OperationKind.ATTESTER_SLASHING: lambda spec, state, op: spec.process_attester_slashings(state, [op]),
    OperationKind.DEPOSIT: lambda spec, state, op: spec.process_deposits(state, [op]),
    OperationKind.RANDAO: _process_randao,
    OperationKind.TRANSFER: lambda spec, state, op: spec.process_transfers(state, [op]),
}


def gate(spec, state, operation: Operation) -> None:
    """
    Apply ``operation`` to ``state`` through the state transition, raising ``OperationRejected`` if it is refused.
    ``state`` is mutated.
    """
    process = processors[operation.kind]
    try:
        process(spec, state, operation.value)
    except (AssertionError, IndexError) as e:
        raise OperationRejected(operation.kind, e) from e
