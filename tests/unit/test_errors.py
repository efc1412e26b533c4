"""Error taxonomy and its HTTP mapping."""

import pytest

from exchange.core.errors import INTERNAL_KINDS, ErrorKind, ExchangeError
from exchange.main import ERROR_STATUS
from exchange.modules.accounts import (
    InactiveUserError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from exchange.modules.rates import RateNotFoundError, RateUnavailableError
from exchange.modules.trading import (
    InsufficientFundsError,
    InvalidAmountError,
    TradeFailedError,
    TransactionNotFoundError,
)
from exchange.modules.wallets import UnsupportedCurrencyError, WalletAlreadyExistsError, WalletNotFoundError

ERROR_CLASSES = [
    InvalidAmountError,
    InsufficientFundsError,
    WalletNotFoundError,
    WalletAlreadyExistsError,
    UnsupportedCurrencyError,
    RateUnavailableError,
    RateNotFoundError,
    TradeFailedError,
    TransactionNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
    InvalidCredentialsError,
    InactiveUserError,
]


def test_status_table_covers_every_kind() -> None:
    assert set(ERROR_STATUS) == set(ErrorKind)


def test_every_kind_has_exactly_one_exception_class() -> None:
    kinds = [cls.kind for cls in ERROR_CLASSES]
    assert sorted(kinds) == sorted(ErrorKind)


@pytest.mark.parametrize(
    ("kind", "status"),
    [
        (ErrorKind.INVALID_AMOUNT, 400),
        (ErrorKind.INSUFFICIENT_FUNDS, 400),
        (ErrorKind.WALLET_NOT_FOUND, 404),
        (ErrorKind.WALLET_ALREADY_EXISTS, 409),
        (ErrorKind.UNSUPPORTED_CURRENCY, 400),
        (ErrorKind.RATE_UNAVAILABLE, 503),
        (ErrorKind.TRADE_FAILED, 500),
        (ErrorKind.INVALID_CREDENTIALS, 401),
    ],
)
def test_status_codes(kind: ErrorKind, status: int) -> None:
    assert ERROR_STATUS[kind] == status


def test_only_trade_failed_is_internal() -> None:
    assert INTERNAL_KINDS == {ErrorKind.TRADE_FAILED}
    assert TradeFailedError().is_internal
    assert not InsufficientFundsError().is_internal


def test_default_message_comes_from_kind() -> None:
    assert WalletNotFoundError().message == "wallet not found"
    assert WalletNotFoundError("no BTC wallet").message == "no BTC wallet"


def test_trade_failed_keeps_cause() -> None:
    cause = RateUnavailableError("down")
    try:
        try:
            raise cause
        except RateUnavailableError as exc:
            raise TradeFailedError("Trade failed") from exc
    except ExchangeError as err:
        assert err.kind is ErrorKind.TRADE_FAILED
        assert err.__cause__ is cause
