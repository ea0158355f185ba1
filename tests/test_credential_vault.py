import pytest

from cashdrawer.crud import pins as pin_store
from cashdrawer.exceptions import (
    AuthorizationError, InvalidPin, PinNotConfigured, ValidationError
)
from cashdrawer.services import credential_vault

from tests.conftest import MANAGER_PIN


class TestSetPin:
    @pytest.mark.parametrize("bad_pin", ["12345", "1234567", "12a456", "", " 123456"])
    def test_rejects_bad_format(self, db, org, bad_pin):
        with pytest.raises(ValidationError):
            credential_vault.set_pin(db, org.manager_b, bad_pin)

    def test_creates_then_replaces(self, db, org):
        pin_store.delete_pin(db, org.manager_b.id)

        assert credential_vault.set_pin(db, org.manager_b, "111111") is False
        assert credential_vault.set_pin(db, org.manager_b, "222222") is True

        assert credential_vault.verify_pin(db, org.manager_b.id, "222222")
        assert not credential_vault.verify_pin(db, org.manager_b.id, "111111")

    def test_hash_is_not_the_plain_pin(self, db, org):
        record = pin_store.get_pin(db, org.manager_a.id)
        assert record.pin_hash != MANAGER_PIN
        assert record.pin_hash.startswith("$2")

    def test_cashier_cannot_hold_a_pin(self, db, org):
        with pytest.raises(AuthorizationError):
            credential_vault.set_pin(db, org.cashier_a, "123456")


class TestVerify:
    def test_correct_and_wrong_pin(self, db, org):
        assert credential_vault.verify_pin(db, org.manager_a.id, MANAGER_PIN) is True
        assert credential_vault.verify_pin(db, org.manager_a.id, "000000") is False

    def test_missing_credential_fails_closed(self, db, org):
        assert credential_vault.verify_pin(db, org.cashier_a.id, "123456") is False

    def test_check_pin_distinguishes_not_configured_from_invalid(self, db, org):
        with pytest.raises(PinNotConfigured) as not_configured:
            credential_vault.check_pin(db, org.cashier_a.id, "123456")
        with pytest.raises(InvalidPin) as invalid:
            credential_vault.check_pin(db, org.manager_a.id, "000000")

        assert not_configured.value.reason == "not_configured"
        assert invalid.value.reason == "invalid"
        # Mismo status HTTP para no ayudar a adivinar
        assert not_configured.value.status_code == invalid.value.status_code


class TestStatusAndDelete:
    def test_status_never_exposes_hash(self, db, org):
        status = credential_vault.pin_status(db, org.manager_a)
        assert status["has_pin"] is True
        assert set(status) == {"has_pin", "created_at", "updated_at"}

    def test_delete_is_idempotent(self, db, org):
        credential_vault.delete_pin(db, org.manager_a)
        credential_vault.delete_pin(db, org.manager_a)
        assert credential_vault.has_pin(db, org.manager_a.id) is False


def test_pin_directory_only_reports_given_candidates(db, org):
    directory = credential_vault.PinDirectory(db)
    found = directory.configured_among([org.manager_a, org.cashier_a, org.admin])
    assert found == {org.manager_a.id, org.admin.id}
