"""
Unit tests for the compiled-in plan catalog.
"""

import pytest

from packages.billing.exceptions import PlanNotFoundError
from packages.billing.models.domain.enums import PlanId
from packages.billing.models.domain.plans import (
    PLAN_CATALOG,
    PlanDefinition,
    _check_catalog,
    get_plan,
    list_plans,
)


class TestPlanCatalog:
    def test_every_plan_id_has_a_definition(self):
        assert set(PLAN_CATALOG) == set(PlanId)

    def test_catalog_values(self):
        assert get_plan(PlanId.TRIAL).quota == 5
        assert get_plan(PlanId.TRIAL).period_days == 30
        assert get_plan(PlanId.SPOTLIGHT).quota == 1
        assert get_plan(PlanId.BUNDLE).quota == 4
        assert get_plan(PlanId.UNLIMITED).quota is None
        assert get_plan(PlanId.UNLIMITED).period_days == 365
        assert get_plan(PlanId.NETWORK).grants_extended_access is True
        assert get_plan(PlanId.NETWORK_QUARTERLY).period_days == 90
        assert get_plan(PlanId.NETWORK_QUARTERLY).grants_extended_access is True

    def test_only_network_plans_grant_extended_access(self):
        granting = {p.plan_id for p in PLAN_CATALOG.values() if p.grants_extended_access}
        assert granting == {PlanId.NETWORK, PlanId.NETWORK_QUARTERLY}

    def test_get_plan_accepts_string(self):
        assert get_plan("BUNDLE").plan_id == PlanId.BUNDLE

    def test_get_plan_unknown_raises(self):
        with pytest.raises(PlanNotFoundError):
            get_plan("GOLD")

    def test_list_plans_hides_trial(self):
        plan_ids = [p.plan_id for p in list_plans()]
        assert PlanId.TRIAL not in plan_ids
        assert len(plan_ids) == len(PlanId) - 1

        assert PlanId.TRIAL in [p.plan_id for p in list_plans(include_trial=True)]

    def test_incomplete_catalog_is_rejected(self):
        partial = {k: v for k, v in PLAN_CATALOG.items() if k != PlanId.BUNDLE}
        with pytest.raises(RuntimeError, match="BUNDLE"):
            _check_catalog(partial)

    def test_mismatched_key_is_rejected(self):
        broken = dict(PLAN_CATALOG)
        broken[PlanId.BUNDLE] = PLAN_CATALOG[PlanId.SPOTLIGHT]
        with pytest.raises(RuntimeError):
            _check_catalog(broken)

    def test_definitions_are_immutable(self):
        plan = get_plan(PlanId.SPOTLIGHT)
        with pytest.raises(Exception):
            plan.quota = 10

    def test_price_formatting(self):
        assert get_plan(PlanId.NETWORK).price_formatted == "$17,500.00"
        assert isinstance(get_plan(PlanId.SPOTLIGHT), PlanDefinition)
        assert get_plan(PlanId.UNLIMITED).is_unlimited
