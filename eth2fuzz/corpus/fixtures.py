"""
Fixture files for corpus generation: a deterministic keypair list and a minimal beacon state.

The state is written as snappy-compressed SSZ, the keypairs as YAML with hex-encoded fields.
"""
from pathlib import Path
from typing import NamedTuple, Sequence

from eth_utils import decode_hex, encode_hex
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from snappy import compress, decompress

from eth2fuzz.utils import bls
from eth2fuzz.utils.ssz.ssz_impl import serialize, deserialize

from .exceptions import SetupError
from .settings import CorpusSettings

STATE_FILE_NAME = 'state.ssz_snappy'
KEYPAIRS_FILE_NAME = 'keypairs.yaml'

DEPOSIT_ROOT = b'\x42' * 32
ETH1_BLOCK_HASH = b'\xda' * 32


class Keypair(NamedTuple):
    privkey: int
    pubkey: bytes


def generate_keypairs(count: int) -> Sequence[Keypair]:
    privkeys = [i + 1 for i in range(count)]
    return tuple(Keypair(privkey, bls.SkToPk(privkey)) for privkey in privkeys)


def build_mock_validator(spec, pubkey: bytes, balance: int):
    return spec.Validator(
        pubkey=pubkey,
        # insecurely use pubkey as withdrawal key as well
        withdrawal_credentials=spec.BLS_WITHDRAWAL_PREFIX + spec.hash(pubkey)[1:],
        activation_eligibility_epoch=spec.GENESIS_EPOCH,
        activation_epoch=spec.GENESIS_EPOCH,
        exit_epoch=spec.FAR_FUTURE_EPOCH,
        withdrawable_epoch=spec.FAR_FUTURE_EPOCH,
        effective_balance=min(balance - balance % spec.EFFECTIVE_BALANCE_INCREMENT, spec.MAX_EFFECTIVE_BALANCE),
    )


def build_minimal_state(spec, keypairs: Sequence[Keypair], settings: CorpusSettings):
    """
    Build a state with ``NUM_VALIDATORS`` active validators, positioned at the first slot of ``STATE_EPOCH``.
    """
    if len(keypairs) < settings.NUM_VALIDATORS:
        raise SetupError(f"need {settings.NUM_VALIDATORS} keypairs for the registry, got {len(keypairs)}")

    balances = [spec.MAX_EFFECTIVE_BALANCE] * settings.NUM_VALIDATORS
    state = spec.BeaconState(
        genesis_time=0,
        slot=spec.compute_start_slot_at_epoch(spec.Epoch(settings.STATE_EPOCH)),
        eth1_deposit_index=settings.NUM_VALIDATORS,
        eth1_data=spec.Eth1Data(
            deposit_root=DEPOSIT_ROOT,
            deposit_count=settings.NUM_VALIDATORS,
            block_hash=ETH1_BLOCK_HASH,
        ),
        fork=spec.Fork(
            previous_version=spec.config.GENESIS_FORK_VERSION,
            current_version=spec.config.GENESIS_FORK_VERSION,
            epoch=spec.GENESIS_EPOCH,
        ),
        latest_block_header=spec.BeaconBlockHeader(body_root=spec.hash_tree_root(spec.BeaconBlockBody())),
        randao_mixes=[ETH1_BLOCK_HASH] * spec.EPOCHS_PER_HISTORICAL_VECTOR,
    )

    # We "hack" in the initial validators,
    #  as it is much faster than creating and processing genesis deposits.
    state.balances = balances
    state.validators = [
        build_mock_validator(spec, keypairs[i].pubkey, balances[i]) for i in range(settings.NUM_VALIDATORS)
    ]

    # Set genesis validators root for domain separation and chain versioning
    state.genesis_validators_root = spec.hash_tree_root(state.validators)

    return state


def get_keypairs_yaml():
    yaml = YAML(pure=True)
    yaml.default_flow_style = False

    def _represent_str(self, data):
        if data.startswith('0x'):
            # Without this, a zero-byte hex string is represented without quotes.
            return self.represent_scalar('tag:yaml.org,2002:str', data, style="'")
        return self.represent_str(data)

    yaml.representer.add_representer(str, _represent_str)
    return yaml


def dump_keypairs(keypairs: Sequence[Keypair], path: Path) -> None:
    data = [
        {'privkey': encode_hex(keypair.privkey.to_bytes(32, 'big')), 'pubkey': encode_hex(keypair.pubkey)}
        for keypair in keypairs
    ]
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w') as f:
        get_keypairs_yaml().dump(data, f)


def dump_state(state, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('wb') as f:
        f.write(compress(serialize(state)))


def write_fixtures(spec, settings: CorpusSettings, fixtures_dir: Path) -> None:
    keypairs = generate_keypairs(settings.keypair_count)
    state = build_minimal_state(spec, keypairs, settings)
    dump_keypairs(keypairs, fixtures_dir / KEYPAIRS_FILE_NAME)
    dump_state(state, fixtures_dir / STATE_FILE_NAME)


def load_keypairs_file(path: Path) -> Sequence[Keypair]:
    try:
        entries = YAML(typ='base').load(path)
        keypairs = tuple(
            Keypair(int(entry['privkey'], 16), decode_hex(entry['pubkey']))
            for entry in entries
        )
    except (OSError, YAMLError) as e:
        raise SetupError(f"cannot read keypairs from {path}: {e}") from e
    except (KeyError, TypeError, ValueError) as e:
        raise SetupError(f"malformed keypair entry in {path}: {e!r}") from e
    return keypairs


def load_state_file(spec, path: Path):
    try:
        with path.open('rb') as f:
            compressed = f.read()
    except OSError as e:
        raise SetupError(f"cannot read state from {path}: {e}") from e
    try:
        return deserialize(spec.BeaconState, decompress(compressed))
    except Exception as e:
        raise SetupError(f"cannot decode state from {path}: {e!r}") from e


def load_fixtures(spec, settings: CorpusSettings, fixtures_dir: Path):
    """
    Load the state and keypairs, checking they line up with ``settings``.
    """
    state = load_state_file(spec, fixtures_dir / STATE_FILE_NAME)
    keypairs = load_keypairs_file(fixtures_dir / KEYPAIRS_FILE_NAME)
    if len(state.validators) != settings.NUM_VALIDATORS:
        raise SetupError(
            f"fixture state has {len(state.validators)} validators, expected {settings.NUM_VALIDATORS}")
    state_epoch = spec.get_current_epoch(state)
    if state_epoch != settings.STATE_EPOCH:
        raise SetupError(f"fixture state is at epoch {state_epoch}, expected STATE_EPOCH {settings.STATE_EPOCH}")
    if len(keypairs) <= settings.NUM_VALIDATORS:
        raise SetupError(f"fixture keypairs do not cover a deposit key past the {settings.NUM_VALIDATORS} validators")
    for index, validator in enumerate(state.validators):
        if validator.pubkey != keypairs[index].pubkey:
            raise SetupError(f"keypair {index} does not match the validator pubkey in the fixture state")
    return state, keypairs
