"""Tests for POST /pricing/calculate."""

from datetime import datetime, timedelta
from decimal import Decimal

from app.models.business_type import BusinessType
from app.models.template import ProductTemplate
from tests.conftest import API, make_rule

CALCULATE_URL = f"{API}/pricing/calculate"


def product_item(template_id: str, quantity=1, **extra) -> dict:
    return {"itemType": "product", "templateId": template_id, "quantity": quantity, **extra}


class TestPriceCalculation:
    """Quotes computed against stored templates and rules"""

    def test_worked_example(self, client, employee_a_headers, carpet_business_type, wool_carpet, db_session):
        """60 m2 of wool carpet with a 10% rule from 50 m2: 900 / 90 / 810"""
        make_rule(
            db_session,
            carpet_business_type,
            "Large order",
            "PERCENTAGE_DISCOUNT",
            conditions={"minQuantity": 50, "unit": "m2"},
            calculation={"percentage": 10},
        )

        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={"businessTypeId": carpet_business_type.id, "items": [product_item(wool_carpet.id, 60)]},
        )

        assert response.status_code == 200
        data = response.json()
        calculation = data["calculation"]
        assert calculation["subtotal"] == 900.0
        assert len(calculation["discounts"]) == 1
        assert calculation["discounts"][0]["amount"] == 90.0
        assert calculation["discounts"][0]["type"] == "PERCENTAGE_DISCOUNT"
        assert calculation["discounts"][0]["name"] == "Large order"
        assert calculation["surcharges"] == []
        assert calculation["total"] == 810.0

        item = calculation["items"][0]
        assert item["itemType"] == "product"
        assert item["unitPrice"] == 15.0
        assert item["template"]["name"] == "Wool Carpet"

        assert data["businessType"] == {
            "id": carpet_business_type.id,
            "name": "CARPET_CLEANING",
            "displayName": "Carpet Cleaning",
        }

    def test_quote_valid_for_thirty_minutes(self, client, employee_a_headers, carpet_business_type, wool_carpet):
        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={"businessTypeId": carpet_business_type.id, "items": [product_item(wool_carpet.id)]},
        )
        data = response.json()
        calculated_at = datetime.fromisoformat(data["calculatedAt"])
        valid_until = datetime.fromisoformat(data["validUntil"])
        assert valid_until - calculated_at == timedelta(minutes=30)

    def test_express_surcharge(self, client, employee_a_headers, carpet_business_type, db_session):
        """Express multiplier 1.5 on 200 adds 100"""
        template = ProductTemplate(
            business_type_id=carpet_business_type.id,
            name="Silk Carpet",
            base_price=Decimal("200.00"),
            unit="piece",
        )
        db_session.add(template)
        db_session.commit()
        make_rule(
            db_session,
            carpet_business_type,
            "Express",
            "EXPRESS_SURCHARGE",
            calculation={"expressMultiplier": 1.5},
        )

        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={"businessTypeId": carpet_business_type.id, "items": [product_item(template.id)]},
        )

        calculation = response.json()["calculation"]
        assert calculation["surcharges"][0]["amount"] == 100.0
        assert calculation["total"] == 300.0

    def test_attribute_modifiers_and_type_alias(
        self, client, employee_a_headers, carpet_business_type, wool_carpet, pickup_service
    ):
        """`type` is accepted for `itemType`; modifiers are listed per item"""
        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={
                "businessTypeId": carpet_business_type.id,
                "items": [
                    {
                        "type": "product",
                        "templateId": wool_carpet.id,
                        "quantity": 2,
                        "customAttributes": {"stain": "heavy", "fringe": True},
                    },
                    {"type": "service", "templateId": pickup_service.id},
                ],
            },
        )

        assert response.status_code == 200
        items = response.json()["calculation"]["items"]
        assert items[0]["unitPrice"] == 18.0
        assert items[0]["total"] == 61.0
        assert items[0]["appliedModifiers"] == ["stain: x1.2 multiplier", "fringe: +25"]
        assert items[1]["itemType"] == "service"
        assert items[1]["template"]["duration"] == 30
        assert response.json()["calculation"]["subtotal"] == 111.0

    def test_inactive_rules_ignored(self, client, employee_a_headers, carpet_business_type, wool_carpet, db_session):
        make_rule(
            db_session,
            carpet_business_type,
            "Paused",
            "FIXED_DISCOUNT",
            calculation={"amount": 5},
            is_active=False,
        )
        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={"businessTypeId": carpet_business_type.id, "items": [product_item(wool_carpet.id)]},
        )
        assert response.json()["calculation"]["discounts"] == []

    def test_unknown_template_fails_whole_calculation(
        self, client, employee_a_headers, carpet_business_type, wool_carpet
    ):
        """One unknown template means no partial quote"""
        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={
                "businessTypeId": carpet_business_type.id,
                "items": [product_item(wool_carpet.id), product_item("missing-template")],
            },
        )

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "TEMPLATE_NOT_FOUND"
        assert "calculation" not in body

    def test_template_of_other_business_type_not_found(
        self, client, employee_a_headers, wool_carpet, db_session
    ):
        other = BusinessType(name="DRY_CLEANING", display_name="Dry Cleaning")
        db_session.add(other)
        db_session.commit()

        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={"businessTypeId": other.id, "items": [product_item(wool_carpet.id)]},
        )
        assert response.status_code == 404
        assert response.json()["code"] == "TEMPLATE_NOT_FOUND"

    def test_wrong_item_type_not_found(self, client, employee_a_headers, carpet_business_type, wool_carpet):
        """A product id looked up as a service is not found"""
        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={
                "businessTypeId": carpet_business_type.id,
                "items": [{"itemType": "service", "templateId": wool_carpet.id}],
            },
        )
        assert response.status_code == 404

    def test_unknown_business_type(self, client, employee_a_headers, wool_carpet):
        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={"businessTypeId": "missing", "items": [product_item(wool_carpet.id)]},
        )
        assert response.status_code == 404
        assert response.json()["code"] == "BUSINESS_TYPE_NOT_FOUND"


class TestPriceCalculationValidation:
    """Request validation and authentication"""

    def test_requires_authentication(self, client, carpet_business_type, wool_carpet):
        response = client.post(
            CALCULATE_URL,
            json={"businessTypeId": carpet_business_type.id, "items": [product_item(wool_carpet.id)]},
        )
        assert response.status_code == 401
        assert response.json()["code"] == "TOKEN_REQUIRED"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_zero_quantity_rejected(self, client, employee_a_headers, carpet_business_type, wool_carpet):
        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={"businessTypeId": carpet_business_type.id, "items": [product_item(wool_carpet.id, 0)]},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_empty_items_rejected(self, client, employee_a_headers, carpet_business_type):
        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={"businessTypeId": carpet_business_type.id, "items": []},
        )
        assert response.status_code == 400

    def test_unknown_item_type_rejected(self, client, employee_a_headers, carpet_business_type, wool_carpet):
        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={
                "businessTypeId": carpet_business_type.id,
                "items": [{"itemType": "bundle", "templateId": wool_carpet.id}],
            },
        )
        assert response.status_code == 400

    def test_oversized_quantity_rejected(self, client, employee_a_headers, carpet_business_type, wool_carpet):
        for quantity in (100001, 1e27):
            response = client.post(
                CALCULATE_URL,
                headers=employee_a_headers,
                json={"businessTypeId": carpet_business_type.id, "items": [product_item(wool_carpet.id, quantity)]},
            )
            assert response.status_code == 400
            assert response.json()["code"] == "VALIDATION_ERROR"

    def test_largest_quantity_accepted(self, client, employee_a_headers, carpet_business_type, wool_carpet):
        response = client.post(
            CALCULATE_URL,
            headers=employee_a_headers,
            json={"businessTypeId": carpet_business_type.id, "items": [product_item(wool_carpet.id, 100000)]},
        )
        assert response.status_code == 200
        assert response.json()["calculation"]["subtotal"] == 1500000.0
