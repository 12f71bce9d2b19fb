"""Unit tests for the UserRules domain service."""

from datetime import timedelta

import pytest

from storefront.domain.exceptions import BusinessRuleError, PermissionDeniedError
from storefront.domain.model.value_objects import EmailAddress
from storefront.domain.service.user_rules import MAX_ADMINS, UserRules
from storefront.infrastructure.persistence.in_memory import InMemoryUserRepository
from tests.fakes import T0, FixedClock, make_user


def _rules(*users) -> UserRules:
    return UserRules(InMemoryUserRepository(users), clock=FixedClock(T0))


class TestRegistration:

    def test_duplicate_email_rejected(self):
        rules = _rules(make_user(1, email="taken@example.com"))
        with pytest.raises(BusinessRuleError, match="already in use"):
            rules.validate_registration(EmailAddress.of("TAKEN@example.com"), "Ken", "Ito")

    def test_fresh_email_accepted(self):
        _rules(make_user(1)).validate_registration(EmailAddress.of("new@example.com"), "Ken", "Ito")

    @pytest.mark.parametrize("first, last, message", [
        ("<b>", "Ito", "prohibited characters"),
        ("12345", "Ito", "only numbers"),
        ("Root", "Ito", "reserved word: root"),
    ])
    def test_name_policy(self, first, last, message):
        with pytest.raises(BusinessRuleError, match=message):
            _rules().validate_name(first, last)


class TestAdminPromotion:

    def test_non_admin_cannot_promote(self):
        with pytest.raises(PermissionDeniedError, match="Only administrators"):
            _rules().validate_admin_promotion(make_user(1), make_user(2))

    def test_cannot_promote_self(self):
        admin = make_user(1, is_admin=True)
        with pytest.raises(BusinessRuleError, match="yourself"):
            _rules(admin).validate_admin_promotion(admin, admin)

    def test_already_admin_rejected(self):
        admin, other = make_user(1, is_admin=True), make_user(2, is_admin=True)
        with pytest.raises(BusinessRuleError, match="already an administrator"):
            _rules(admin, other).validate_admin_promotion(admin, other)

    def test_admin_ceiling(self):
        admins = [make_user(i, is_admin=True) for i in range(1, MAX_ADMINS + 1)]
        target = make_user(99)
        with pytest.raises(BusinessRuleError, match=r"Maximum number of administrators reached \(10\)"):
            _rules(*admins, target).validate_admin_promotion(admins[0], target)

    def test_below_ceiling_accepted(self):
        admins = [make_user(i, is_admin=True) for i in range(1, MAX_ADMINS)]
        target = make_user(99)
        _rules(*admins, target).validate_admin_promotion(admins[0], target)


class TestAdminDemotion:

    def test_last_admin_cannot_be_demoted(self):
        # a lone admin can only target itself, which is refused first
        admin = make_user(1, is_admin=True)
        with pytest.raises(BusinessRuleError, match="yourself"):
            _rules(admin).validate_admin_demotion(admin, admin)

    def test_last_admin_guard_counts_stored_admins(self):
        actor, target = make_user(1, is_admin=True), make_user(2, is_admin=True)
        # the store only knows one admin
        rules = UserRules(InMemoryUserRepository([target, make_user(1)]))
        with pytest.raises(BusinessRuleError, match="last administrator"):
            rules.validate_admin_demotion(actor, target)

    def test_demotion_with_two_admins(self):
        actor, target = make_user(1, is_admin=True), make_user(2, is_admin=True)
        _rules(actor, target).validate_admin_demotion(actor, target)


class TestClassification:

    def test_new_and_recent_users(self):
        rules = _rules()
        assert rules.is_new_user(make_user(created_at=T0 - timedelta(days=3)))
        assert not rules.is_new_user(make_user(created_at=T0 - timedelta(days=10)))
        assert rules.is_recent_user(make_user(created_at=T0 - timedelta(days=10)))

    def test_statistics(self):
        rules = _rules(
            make_user(1, is_admin=True, created_at=T0 - timedelta(days=60)),
            make_user(2, created_at=T0 - timedelta(days=1)),
            make_user(3, created_at=T0 - timedelta(days=20)),
            make_user(4, created_at=T0 - timedelta(days=20)),
        )
        stats = rules.generate_statistics()
        assert stats.total_users == 4
        assert stats.admin_users == 1
        assert stats.regular_users == 3
        assert stats.new_users == 1
        assert stats.recent_users == 3
        assert stats.admin_percentage == 25.0
