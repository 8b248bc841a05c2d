"""Tests for SelectionState restore-once and mirror-on-change."""

from decimal import Decimal

import pytest

from ratefeed.exceptions import UnknownAssetError
from ratefeed.models import Asset, Selection
from ratefeed.selection.location import MemoryLocation
from ratefeed.selection.state import SelectionState


def _restored(params: dict[str, str]) -> tuple[SelectionState, MemoryLocation]:
    location = MemoryLocation(params)
    state = SelectionState(location)
    state.restore()
    return state, location


class TestRestore:
    """restore(): allowed codes override defaults, everything else is ignored."""

    def test_all_three_restored(self) -> None:
        state, _ = _restored({"from": "BTC", "to": "USDT", "receive": "ETH"})
        assert state.current.from_asset is Asset.BTC
        assert state.current.to_asset is Asset.USDT
        assert state.current.receive_asset is Asset.ETH

    def test_receive_usdt_ignored(self) -> None:
        state, _ = _restored({"receive": "USDT"})
        assert state.current.receive_asset is Asset.ETH

    def test_receive_btc_accepted(self) -> None:
        state, _ = _restored({"receive": "BTC"})
        assert state.current.receive_asset is Asset.BTC

    def test_unknown_codes_ignored(self) -> None:
        state, _ = _restored({"from": "DOGE", "to": "eth", "receive": ""})
        assert state.current == Selection()

    def test_partial_params(self) -> None:
        state, _ = _restored({"to": "ETH"})
        assert state.current.from_asset is Asset.ETH
        assert state.current.to_asset is Asset.ETH

    def test_missing_params_keep_defaults(self) -> None:
        state, _ = _restored({})
        assert state.current == Selection()

    def test_unrelated_params_ignored(self) -> None:
        state, _ = _restored({"utm_source": "newsletter", "from": "USDT"})
        assert state.current.from_asset is Asset.USDT

    def test_restore_does_not_write(self) -> None:
        _, location = _restored({"from": "BTC"})
        assert location.replace_count == 0

    def test_restore_runs_once(self) -> None:
        location = MemoryLocation({"from": "BTC"})
        state = SelectionState(location)
        state.restore()
        state.set_from_asset("USDT")
        # Second restore must not reapply from=... over the user's change
        location.write_all({"from": "ETH"})
        state.restore()
        assert state.current.from_asset is Asset.USDT

    def test_amount_not_restored(self) -> None:
        state, _ = _restored({"amount": "5"})
        assert state.current.send_amount_usd == Decimal("1000")


class TestMirrorOnChange:
    """Every asset change writes all three params in one replace."""

    def test_set_from_writes_all_three(self) -> None:
        state, location = _restored({})
        state.set_from_asset(Asset.USDT)
        assert location.read_all() == {"from": "USDT", "to": "BTC", "receive": "ETH"}
        assert location.replace_count == 1

    def test_set_to_accepts_code_string(self) -> None:
        state, location = _restored({})
        state.set_to_asset("USDT")
        assert state.current.to_asset is Asset.USDT
        assert location.read_all()["to"] == "USDT"

    def test_set_receive(self) -> None:
        state, location = _restored({})
        state.set_receive_asset("BTC")
        assert location.read_all()["receive"] == "BTC"

    def test_set_receive_rejects_usdt(self) -> None:
        state, location = _restored({})
        with pytest.raises(UnknownAssetError):
            state.set_receive_asset("USDT")
        assert state.current.receive_asset is Asset.ETH
        assert location.replace_count == 0

    def test_set_from_rejects_unknown(self) -> None:
        state, _ = _restored({})
        with pytest.raises(UnknownAssetError):
            state.set_from_asset("SOL")

    def test_unchanged_value_does_not_write(self) -> None:
        state, location = _restored({})
        state.set_from_asset(Asset.ETH)
        assert location.replace_count == 0

    def test_amount_change_does_not_write(self) -> None:
        state, location = _restored({})
        state.set_send_amount_usd("250")
        assert state.current.send_amount_usd == Decimal("250")
        assert location.replace_count == 0

    def test_invalid_amount_stored_as_zero(self) -> None:
        state, _ = _restored({})
        state.set_send_amount_usd("not a number")
        assert state.current.send_amount_usd == Decimal("0")

    def test_other_location_params_preserved(self) -> None:
        state, location = _restored({"ref": "abc"})
        state.set_to_asset("ETH")
        assert location.read_all()["ref"] == "abc"


class TestSwapAssets:
    def test_swap_single_transition(self) -> None:
        state, location = _restored({})
        result = state.swap_assets()
        assert result.from_asset is Asset.BTC
        assert result.to_asset is Asset.ETH
        assert location.replace_count == 1
        assert location.read_all() == {"from": "BTC", "to": "ETH", "receive": "ETH"}

    def test_swap_twice_returns_original(self) -> None:
        state, location = _restored({"from": "BTC", "to": "USDT"})
        state.swap_assets()
        state.swap_assets()
        assert state.current.from_asset is Asset.BTC
        assert state.current.to_asset is Asset.USDT
        assert location.replace_count == 2

    def test_swap_identical_pair_does_not_write(self) -> None:
        state, location = _restored({"from": "ETH", "to": "ETH"})
        state.swap_assets()
        assert location.replace_count == 0

    def test_swap_keeps_receive_and_amount(self) -> None:
        state, _ = _restored({"receive": "BTC"})
        state.set_send_amount_usd(42)
        state.swap_assets()
        assert state.current.receive_asset is Asset.BTC
        assert state.current.send_amount_usd == Decimal("42")
