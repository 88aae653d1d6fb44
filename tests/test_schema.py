import pandas as pd

from rides.schema import ColumnRoles, Role, ValueKind, infer_roles, infer_schema


NCR_COLUMNS = [
    "Date",
    "Time",
    "Booking ID",
    "Booking Status",
    "Vehicle Type",
    "Pickup Location",
    "Drop Location",
    "Booking Value",
    "Ride Distance",
    "Driver Ratings",
    "Customer Rating",
]


def test_roles_from_ride_booking_headers():
    roles = infer_roles(NCR_COLUMNS)
    assert roles == ColumnRoles(
        date="Date",
        category="Pickup Location",
        vehicle_type="Vehicle Type",
        status="Booking Status",
        time="Time",
        value="Booking Value",
        distance="Ride Distance",
        rating="Driver Ratings",
    )


def test_roles_match_case_insensitively():
    roles = infer_roles(["BARANGAY_NAME", "booking_DATE", "Ride TYPE"])
    assert roles.date == "booking_DATE"
    assert roles.category == "BARANGAY_NAME"
    assert roles.vehicle_type == "Ride TYPE"


def test_roles_fall_back_to_column_positions():
    roles = infer_roles(["when", "where", "what", "extra"])
    assert (roles.date, roles.category, roles.vehicle_type) == ("when", "where", "what")
    assert roles.status is None
    assert roles.rating is None


def test_roles_with_too_few_columns():
    roles = infer_roles(["only"])
    assert roles.date == "only"
    assert roles.category is None
    assert roles.vehicle_type is None


def test_role_of():
    roles = infer_roles(NCR_COLUMNS)
    assert roles.role_of("Date") is Role.DATE
    assert roles.role_of("Pickup Location") is Role.CATEGORY
    assert roles.role_of("Vehicle Type") is Role.TYPE
    assert roles.role_of("Booking ID") is Role.OTHER


def test_rating_prefers_driver_rating():
    roles = infer_roles(["Date", "Customer Rating", "Driver Ratings"])
    assert roles.rating == "Driver Ratings"


def test_schema_kinds():
    frame = pd.DataFrame(
        {
            "Date": ["2024-01-01", "2024-01-02", "2024-01-03"],
            "Fare": ["10", "null", "12.5"],
            "Pickup Location": ["Rohini", "Saket", ""],
            "Empty": ["", "", ""],
        }
    )
    schema = infer_schema(frame, infer_roles(frame.columns))
    assert schema.kind("Date") is ValueKind.DATE
    assert schema.kind("Fare") is ValueKind.NUMBER
    assert schema.kind("Pickup Location") is ValueKind.TEXT
    assert schema.kind("Empty") is ValueKind.TEXT
    assert schema.columns_of(ValueKind.NUMBER) == ["Fare"]
    assert schema.to_dict()["Date"] == "date"
