"""Per-application defaults used when onboarding a new tenant."""

from typing import Any

DEFAULT_APP_SLUG = "laundry"

APP_CONFIGURATIONS: dict[str, dict[str, Any]] = {
    "laundry": {
        "name": "LaundryPro - Carpet & Upholstery Cleaning",
        "business_type": "LAUNDRY_SERVICE",
        "default_settings": {
            "currency": "TRY",
            "timezone": "Europe/Istanbul",
            "language": "tr",
            "features": {
                "carpetWashing": True,
                "homePickup": True,
                "deliveryTracking": True,
                "customerManagement": True,
                "orderManagement": True,
                "vehicleManagement": True,
            },
        },
    },
    "restaurant": {
        "name": "Restaurant Management System",
        "business_type": "RESTAURANT",
        "default_settings": {
            "currency": "TRY",
            "timezone": "Europe/Istanbul",
            "language": "tr",
            "features": {
                "menuManagement": True,
                "tableReservation": True,
                "orderManagement": True,
                "inventoryManagement": True,
                "staffManagement": True,
                "loyaltyProgram": True,
            },
        },
    },
    "hotel": {
        "name": "Hotel Management System",
        "business_type": "HOTEL",
        "default_settings": {
            "currency": "TRY",
            "timezone": "Europe/Istanbul",
            "language": "tr",
            "features": {
                "roomManagement": True,
                "reservations": True,
                "guestServices": True,
                "housekeeping": True,
                "billing": True,
                "reportAnalytics": True,
            },
        },
    },
}
