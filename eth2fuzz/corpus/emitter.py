import sys
from typing import TextIO

from eth2fuzz.utils.ssz.ssz_impl import serialize, deserialize

from .operations import Operation, OperationKind


def encode_operation(operation: Operation) -> bytes:
    return serialize(operation.value)


def format_corpus_line(operation: Operation) -> str:
    return f"{operation.kind.label} {encode_operation(operation).hex()}"


def emit(operation: Operation, out: TextIO = None) -> None:
    print(format_corpus_line(operation), file=sys.stdout if out is None else out, flush=True)


def parse_corpus_line(spec, line: str, kind: OperationKind):
    """
    Decode a corpus line as ``kind``.
    Labels are shared between kinds (both block kinds emit ``Block``), so the kind has to be given.
    """
    label, encoded = line.strip().split(' ', 1)
    if label != kind.label:
        raise ValueError(f"corpus line is labeled {label}, expected {kind.label}")
    return deserialize(kind.ssz_type(spec), bytes.fromhex(encoded))
