from pathlib import Path
from typing import NamedTuple, Optional

from ruamel.yaml.error import YAMLError

from eth2fuzz.config.config_util import load_config_file

from .exceptions import SetupError


class CorpusSettings(NamedTuple):
    CONFIG_NAME: str = 'minimal'
    NUM_VALIDATORS: int = 8
    STATE_EPOCH: int = 0
    DEPOSIT_AMOUNT: int = 32 * 10**9
    TRANSFER_AMOUNT: int = 1000 * 10**9
    TRANSFER_FEE: int = 10 * 10**9

    @property
    def keypair_count(self) -> int:
        # Keys past NUM_VALIDATORS are not in the registry, deposits sign with them
        return self.NUM_VALIDATORS * 2


DEFAULT_SETTINGS = CorpusSettings()


def load_settings(config_path: Optional[Path] = None) -> CorpusSettings:
    if config_path is None:
        return DEFAULT_SETTINGS
    try:
        config_data = load_config_file(Path(config_path))
    except (OSError, ValueError, YAMLError) as e:
        raise SetupError(f"cannot load settings from {config_path}: {e}") from e

    unknown = set(config_data.keys()) - set(CorpusSettings._fields)
    if unknown:
        raise SetupError(f"unknown setting(s) in {config_path}: {', '.join(sorted(unknown))}")
    settings = DEFAULT_SETTINGS._replace(**config_data)
    if settings.NUM_VALIDATORS < 2:
        raise SetupError(f"NUM_VALIDATORS must be at least 2, got {settings.NUM_VALIDATORS}")
    return settings
