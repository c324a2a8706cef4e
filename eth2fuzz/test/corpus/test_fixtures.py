import pytest

from eth2fuzz.corpus.exceptions import SetupError
from eth2fuzz.corpus.fixtures import (
    KEYPAIRS_FILE_NAME, STATE_FILE_NAME, dump_keypairs, load_fixtures, load_keypairs_file, write_fixtures,
)
from eth2fuzz.corpus.settings import DEFAULT_SETTINGS
from eth2fuzz.phase0 import spec as spec_phase0
from eth2fuzz.test.helpers.keys import keypairs


def test_write_then_load_fixtures(tmp_path):
    write_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)
    assert (tmp_path / STATE_FILE_NAME).exists()
    assert (tmp_path / KEYPAIRS_FILE_NAME).exists()

    state, loaded_keypairs = load_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)
    assert len(state.validators) == DEFAULT_SETTINGS.NUM_VALIDATORS
    assert state.eth1_deposit_index == DEFAULT_SETTINGS.NUM_VALIDATORS
    assert tuple(loaded_keypairs) == tuple(keypairs)
    for validator in state.validators:
        assert spec_phase0.is_active_validator(validator, spec_phase0.get_current_epoch(state))


def test_keypairs_file_keeps_hex_fields(tmp_path):
    path = tmp_path / KEYPAIRS_FILE_NAME
    dump_keypairs(keypairs[:3], path)

    text = path.read_text()
    assert "privkey: '0x" in text
    assert load_keypairs_file(path) == tuple(keypairs[:3])


def test_missing_fixtures(tmp_path):
    with pytest.raises(SetupError):
        load_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)


def test_corrupt_state_file(tmp_path):
    write_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)
    (tmp_path / STATE_FILE_NAME).write_bytes(b'not a snappy frame')

    with pytest.raises(SetupError):
        load_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)


def test_malformed_keypairs_file(tmp_path):
    write_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)
    (tmp_path / KEYPAIRS_FILE_NAME).write_text("- privkey: '0x01'\n")

    with pytest.raises(SetupError):
        load_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)


def test_validator_count_mismatch(tmp_path):
    write_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)
    settings = DEFAULT_SETTINGS._replace(NUM_VALIDATORS=DEFAULT_SETTINGS.NUM_VALIDATORS + 1)

    with pytest.raises(SetupError):
        load_fixtures(spec_phase0, settings, tmp_path)


def test_state_epoch_mismatch(tmp_path):
    write_fixtures(spec_phase0, DEFAULT_SETTINGS._replace(STATE_EPOCH=3000), tmp_path)

    with pytest.raises(SetupError):
        load_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)


def test_keypairs_without_deposit_key(tmp_path):
    write_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)
    dump_keypairs(keypairs[:DEFAULT_SETTINGS.NUM_VALIDATORS], tmp_path / KEYPAIRS_FILE_NAME)

    with pytest.raises(SetupError):
        load_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)


def test_keypairs_out_of_order(tmp_path):
    write_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)
    swapped = (keypairs[1], keypairs[0]) + tuple(keypairs[2:])
    dump_keypairs(swapped, tmp_path / KEYPAIRS_FILE_NAME)

    with pytest.raises(SetupError):
        load_fixtures(spec_phase0, DEFAULT_SETTINGS, tmp_path)
