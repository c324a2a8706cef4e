import pytest

from eth2fuzz.test import context


def pytest_addoption(parser):
    parser.addoption(
        "--enable-bls", action="store_true", default=False,
        help="bls-default: make tests that are not dependent on BLS run with BLS",
    )


@pytest.fixture(autouse=True)
def bls_default(request):
    if request.config.getoption("--enable-bls", default=False):
        context.DEFAULT_BLS_ACTIVE = True
