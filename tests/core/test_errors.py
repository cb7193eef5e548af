"""Error hierarchy - codes, statuses and the REST envelope."""

from shopledger.core.errors import (
    ErrorContext, NegativeProfitNotAcknowledgedError, ProtectedTransactionError,
    ResetNotConfirmedError, ResourceNotFoundError,
)


def test_negative_profit_is_a_warning_level_400():
    err = NegativeProfitNotAcknowledgedError(-2_500)
    assert err.http_status == 400
    assert err.code == "NEGATIVE_PROFIT"
    assert "-LKR 25.00" in err.message
    assert err.to_response()["error"]["severity"] == "warning"


def test_negative_profit_uses_configured_currency():
    assert "-USD 1,000.00" in NegativeProfitNotAcknowledgedError(-100_000, "USD").message


def test_protected_transaction_carries_its_id():
    body = ProtectedTransactionError("txn-1").to_response()["error"]
    assert body["code"] == "PROTECTED_TRANSACTION"
    assert body["context"] == {"transaction_id": "txn-1"}


def test_unset_context_ids_are_omitted():
    body = ResourceNotFoundError("Order", "abc").to_response()["error"]
    assert body["message"] == "Order 'abc' not found"
    assert body["context"] == {}


def test_context_ids_are_echoed():
    err = ResetNotConfirmedError("RESET", ErrorContext(account_id="acc-9"))
    assert err.to_response()["error"]["context"] == {"account_id": "acc-9"}
    assert err.message == 'Type "RESET" to confirm'
