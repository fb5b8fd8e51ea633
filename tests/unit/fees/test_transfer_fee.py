"""Tests for mint transfer-fee math."""

import pytest

from cpswap.errors import InvalidAmount
from cpswap.fees.transfer_fee import (
    TransferFeeConfig,
    TransferFeeParameters,
    pre_fee_amount,
    transfer_fee,
    transfer_inverse_fee,
)

ONE_PERCENT_CAPPED = TransferFeeParameters(transfer_fee_basis_points=100, maximum_fee=50_000_000)
ONE_PERCENT_UNCAPPED = TransferFeeParameters(transfer_fee_basis_points=100, maximum_fee=2**64 - 1)


class TestTransferFee:
    """Tests for the forward fee."""

    def test_no_fee_model(self):
        """Mints without the extension never charge."""
        assert transfer_fee(None, 1_000_000) == 0

    def test_zero_rate(self):
        assert transfer_fee(TransferFeeParameters(0, 1_000), 1_000_000) == 0

    def test_zero_amount(self):
        assert transfer_fee(ONE_PERCENT_CAPPED, 0) == 0

    def test_rounds_up(self):
        """1% of 150 is 1.5, charged as 2."""
        assert transfer_fee(ONE_PERCENT_UNCAPPED, 150) == 2
        assert transfer_fee(ONE_PERCENT_UNCAPPED, 1) == 1

    def test_exact(self):
        assert transfer_fee(ONE_PERCENT_UNCAPPED, 10_000) == 100

    def test_capped(self):
        """1% of 1e10 is 1e8, capped at 5e7."""
        assert transfer_fee(ONE_PERCENT_CAPPED, 10_000_000_000) == 50_000_000

    def test_full_rate(self):
        """At 100% the whole amount is withheld, up to the cap."""
        params = TransferFeeParameters(10_000, 500)
        assert transfer_fee(params, 100) == 100
        assert transfer_fee(params, 1_000) == 500


class TestPreFeeAmount:
    """Tests for grossing an amount up by the fee."""

    def test_no_fee_model(self):
        assert pre_fee_amount(None, 1_000) == 1_000

    def test_zero_cap(self):
        assert pre_fee_amount(TransferFeeParameters(100, 0), 1_000) == 1_000

    def test_uncapped(self):
        """ceil(9_900 * 10_000 / 9_900) = 10_000."""
        assert pre_fee_amount(ONE_PERCENT_UNCAPPED, 9_900) == 10_000

    def test_capped(self):
        assert pre_fee_amount(ONE_PERCENT_CAPPED, 10_000_000_000) == 10_050_000_000

    def test_full_rate(self):
        assert pre_fee_amount(TransferFeeParameters(10_000, 500), 1_000) == 1_500

    @pytest.mark.parametrize("net", [1, 99, 100, 101, 9_999, 123_456_789, 10_000_000_000])
    def test_gross_delivers_net(self, net):
        """Transferring the pre-fee amount delivers at least the net amount."""
        for params in (ONE_PERCENT_CAPPED, ONE_PERCENT_UNCAPPED, TransferFeeParameters(250, 7)):
            gross = pre_fee_amount(params, net)
            assert gross - transfer_fee(params, gross) >= net


class TestTransferInverseFee:
    """Tests for the fee added on top of a net amount."""

    def test_no_fee_model(self):
        assert transfer_inverse_fee(None, 1_000) == 0

    def test_zero_amount(self):
        assert transfer_inverse_fee(ONE_PERCENT_CAPPED, 0) == 0

    def test_full_rate_is_cap(self):
        assert transfer_inverse_fee(TransferFeeParameters(10_000, 500), 1_000) == 500

    def test_capped(self):
        assert transfer_inverse_fee(ONE_PERCENT_CAPPED, 10_000_000_000) == 50_000_000

    @pytest.mark.parametrize("net", [1, 50, 99, 100, 9_900, 777_777, 4_950_000_000])
    def test_net_plus_inverse_fee_delivers_net(self, net):
        """Sending net + inverse fee delivers at least net."""
        for params in (ONE_PERCENT_CAPPED, ONE_PERCENT_UNCAPPED, TransferFeeParameters(3, 1)):
            gross = net + transfer_inverse_fee(params, net)
            assert gross - transfer_fee(params, gross) >= net


class TestTransferFeeParameters:
    """Tests for parameter validation."""

    def test_rate_above_max_rejected(self):
        with pytest.raises(InvalidAmount):
            TransferFeeParameters(10_001, 0)

    def test_negative_rate_rejected(self):
        with pytest.raises(InvalidAmount):
            TransferFeeParameters(-1, 0)

    def test_negative_cap_rejected(self):
        with pytest.raises(InvalidAmount):
            TransferFeeParameters(100, -1)

    def test_negative_epoch_rejected(self):
        with pytest.raises(InvalidAmount):
            TransferFeeParameters(100, 0, epoch=-1)


class TestTransferFeeConfig:
    """Tests for epoch selection between the older and newer parameters."""

    def test_flat_config_same_everywhere(self):
        config = TransferFeeConfig.flat(100, 50)
        assert config.get_epoch_fee(0) == config.get_epoch_fee(1_000)

    def test_newer_applies_from_its_epoch(self):
        config = TransferFeeConfig.flat(100, 50).schedule(TransferFeeParameters(200, 70, epoch=10))
        assert config.get_epoch_fee(9).transfer_fee_basis_points == 100
        assert config.get_epoch_fee(10).transfer_fee_basis_points == 200
        assert config.get_epoch_fee(11).maximum_fee == 70

    def test_schedule_shifts_newer_to_older(self):
        first = TransferFeeParameters(200, 70, epoch=10)
        second = TransferFeeParameters(300, 90, epoch=20)
        config = TransferFeeConfig.flat(100, 50).schedule(first).schedule(second)
        assert config.older == first
        assert config.newer == second

    def test_schedule_into_the_past_rejected(self):
        config = TransferFeeConfig.flat(100, 50).schedule(TransferFeeParameters(200, 70, epoch=10))
        with pytest.raises(InvalidAmount):
            config.schedule(TransferFeeParameters(300, 90, epoch=5))
