"""Tests for pricing rule management (/pricing/rules)."""

from tests.conftest import API, make_rule

RULES_URL = f"{API}/pricing/rules"


def rule_payload(business_type_id: str, **overrides) -> dict:
    payload = {
        "businessTypeId": business_type_id,
        "name": "Large order",
        "ruleType": "PERCENTAGE_DISCOUNT",
        "conditions": {"minQuantity": 50},
        "calculation": {"percentage": 10},
        "priority": 1,
    }
    payload.update(overrides)
    return payload


class TestCreatePricingRule:
    def test_super_admin_creates_rule(self, client, super_admin_headers, carpet_business_type):
        """Stored conditions and calculation use camelCase keys"""
        response = client.post(RULES_URL, headers=super_admin_headers, json=rule_payload(carpet_business_type.id))

        assert response.status_code == 201
        data = response.json()
        assert data["ruleType"] == "PERCENTAGE_DISCOUNT"
        assert data["conditions"] == {"minQuantity": 50}
        assert data["calculation"] == {"percentage": 10}
        assert data["isActive"] is True

    def test_other_roles_forbidden(self, client, admin_a_headers, carpet_business_type):
        """Tenant ADMIN is not in the allow-list"""
        response = client.post(RULES_URL, headers=admin_a_headers, json=rule_payload(carpet_business_type.id))
        assert response.status_code == 403
        assert response.json()["code"] == "INSUFFICIENT_PERMISSIONS"

    def test_duplicate_name_rejected(self, client, super_admin_headers, carpet_business_type, db_session):
        make_rule(db_session, carpet_business_type, "Large order", "FIXED_DISCOUNT", calculation={"amount": 5})

        response = client.post(RULES_URL, headers=super_admin_headers, json=rule_payload(carpet_business_type.id))
        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE_RULE_NAME"

    def test_unknown_business_type(self, client, super_admin_headers):
        response = client.post(RULES_URL, headers=super_admin_headers, json=rule_payload("missing"))
        assert response.status_code == 404
        assert response.json()["code"] == "BUSINESS_TYPE_NOT_FOUND"

    def test_calculation_must_match_rule_type(self, client, super_admin_headers, carpet_business_type):
        """A FIXED_DISCOUNT needs `amount`, not `percentage`"""
        response = client.post(
            RULES_URL,
            headers=super_admin_headers,
            json=rule_payload(carpet_business_type.id, ruleType="FIXED_DISCOUNT"),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_unknown_condition_key_rejected(self, client, super_admin_headers, carpet_business_type):
        response = client.post(
            RULES_URL,
            headers=super_admin_headers,
            json=rule_payload(carpet_business_type.id, conditions={"minQty": 50}),
        )
        assert response.status_code == 400

    def test_unknown_season_rejected(self, client, super_admin_headers, carpet_business_type):
        response = client.post(
            RULES_URL,
            headers=super_admin_headers,
            json=rule_payload(
                carpet_business_type.id,
                ruleType="SEASONAL_ADJUSTMENT",
                calculation={"seasonal": {"monsoon": {"type": "percentage", "value": 5}}},
            ),
        )
        assert response.status_code == 400

    def test_express_needs_multiplier_or_amount(self, client, super_admin_headers, carpet_business_type):
        response = client.post(
            RULES_URL,
            headers=super_admin_headers,
            json=rule_payload(carpet_business_type.id, ruleType="EXPRESS_SURCHARGE", calculation={}),
        )
        assert response.status_code == 400


class TestListPricingRules:
    def test_rules_listed_by_priority(self, client, employee_a_headers, carpet_business_type, db_session):
        make_rule(db_session, carpet_business_type, "Second", "FIXED_DISCOUNT", calculation={"amount": 5}, priority=2)
        make_rule(db_session, carpet_business_type, "First", "FIXED_DISCOUNT", calculation={"amount": 5}, priority=1)

        response = client.get(f"{RULES_URL}/{carpet_business_type.id}", headers=employee_a_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [r["name"] for r in data["rules"]] == ["First", "Second"]

    def test_filter_by_active(self, client, employee_a_headers, carpet_business_type, db_session):
        make_rule(db_session, carpet_business_type, "On", "FIXED_DISCOUNT", calculation={"amount": 5})
        make_rule(db_session, carpet_business_type, "Off", "FIXED_DISCOUNT", calculation={"amount": 5}, is_active=False)

        response = client.get(
            f"{RULES_URL}/{carpet_business_type.id}", params={"isActive": "false"}, headers=employee_a_headers
        )
        assert [r["name"] for r in response.json()["rules"]] == ["Off"]

    def test_unknown_business_type(self, client, employee_a_headers):
        response = client.get(f"{RULES_URL}/missing", headers=employee_a_headers)
        assert response.status_code == 404


class TestUpdateAndDeletePricingRule:
    def test_update_priority_and_status(self, client, super_admin_headers, carpet_business_type, db_session):
        rule = make_rule(db_session, carpet_business_type, "Promo", "FIXED_DISCOUNT", calculation={"amount": 5})

        response = client.put(
            f"{RULES_URL}/{rule.id}", headers=super_admin_headers, json={"priority": 7, "isActive": False}
        )

        assert response.status_code == 200
        assert response.json()["priority"] == 7
        assert response.json()["isActive"] is False

    def test_changing_type_revalidates_calculation(
        self, client, super_admin_headers, carpet_business_type, db_session
    ):
        """The stored calculation must fit the new rule type"""
        rule = make_rule(db_session, carpet_business_type, "Promo", "FIXED_DISCOUNT", calculation={"amount": 5})

        response = client.put(
            f"{RULES_URL}/{rule.id}", headers=super_admin_headers, json={"ruleType": "PERCENTAGE_DISCOUNT"}
        )
        assert response.status_code == 400

        response = client.put(
            f"{RULES_URL}/{rule.id}",
            headers=super_admin_headers,
            json={"ruleType": "PERCENTAGE_DISCOUNT", "calculation": {"percentage": 15}},
        )
        assert response.status_code == 200
        assert response.json()["ruleType"] == "PERCENTAGE_DISCOUNT"
        assert response.json()["calculation"] == {"percentage": 15}

    def test_rename_to_existing_name_rejected(self, client, super_admin_headers, carpet_business_type, db_session):
        make_rule(db_session, carpet_business_type, "Taken", "FIXED_DISCOUNT", calculation={"amount": 5})
        rule = make_rule(db_session, carpet_business_type, "Promo", "FIXED_DISCOUNT", calculation={"amount": 5})

        response = client.put(f"{RULES_URL}/{rule.id}", headers=super_admin_headers, json={"name": "Taken"})
        assert response.status_code == 409

    def test_update_missing_rule(self, client, super_admin_headers):
        response = client.put(f"{RULES_URL}/missing", headers=super_admin_headers, json={"priority": 1})
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_delete_rule(self, client, super_admin_headers, carpet_business_type, db_session):
        rule = make_rule(db_session, carpet_business_type, "Promo", "FIXED_DISCOUNT", calculation={"amount": 5})

        response = client.delete(f"{RULES_URL}/{rule.id}", headers=super_admin_headers)
        assert response.status_code == 200

        response = client.get(f"{RULES_URL}/{carpet_business_type.id}", headers=super_admin_headers)
        assert response.json()["total"] == 0

    def test_delete_forbidden_for_tenant_admin(self, client, admin_a_headers, carpet_business_type, db_session):
        rule = make_rule(db_session, carpet_business_type, "Promo", "FIXED_DISCOUNT", calculation={"amount": 5})
        response = client.delete(f"{RULES_URL}/{rule.id}", headers=admin_a_headers)
        assert response.status_code == 403
