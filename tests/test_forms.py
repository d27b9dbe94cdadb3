import pytest

from startups.forms import (
    BasicInformationForm,
    BusinessInformationForm,
    ContactDetailsForm,
    FinalDetailsForm,
    FounderForm,
    FounderFormSet,
    ProductDetailsForm,
    ProductFormSet,
    founder_entries,
    product_entries,
)
from tests.factories import STEP_DATA


def _product_data(**overrides):
    data = dict(STEP_DATA[3])
    data.update(overrides)
    return data


def test_pitch_of_exactly_500_chars_is_accepted():
    form = ProductDetailsForm(data=_product_data(pitch="x" * 500))
    assert form.is_valid(), form.errors


def test_pitch_of_501_chars_is_rejected():
    form = ProductDetailsForm(data=_product_data(pitch="x" * 501))
    assert not form.is_valid()
    assert form.errors["pitch"] == ["Elevator pitch should be under 500 characters"]


def test_pitch_line_breaks_count_as_one_char():
    form = ProductDetailsForm(data=_product_data(pitch="a" * 498 + "\r\n" + "b"))
    assert form.is_valid(), form.errors
    assert form.cleaned_data["pitch"] == "a" * 498 + "\n" + "b"


@pytest.mark.parametrize("email", ["asha@acmerobotics.io", "first.last+deals@sub.example.co.in", "ASHA@ACME.COM"])
def test_well_formed_contact_email_is_accepted(email):
    form = ContactDetailsForm(data=dict(STEP_DATA[1], contact_email=email))
    assert form.is_valid(), form.errors


@pytest.mark.parametrize("email", ["asha", "asha@acme", "asha.acme.io", "asha@acme.c", "@acme.io"])
def test_malformed_contact_email_is_rejected(email):
    form = ContactDetailsForm(data=dict(STEP_DATA[1], contact_email=email))
    assert not form.is_valid()
    assert "Invalid email address" in form.errors["contact_email"]


def test_contact_email_is_normalised():
    form = ContactDetailsForm(data=dict(STEP_DATA[1], contact_email="  Asha@AcmeRobotics.io "))
    assert form.is_valid(), form.errors
    assert form.cleaned_data["contact_email"] == "asha@acmerobotics.io"


@pytest.mark.parametrize("field,message", [
    ("num_founders", "Must have at least 1 founder"),
    ("team_size", "Team size must be at least 1"),
])
def test_business_counts_must_be_at_least_one(field, message):
    form = BusinessInformationForm(data=dict(STEP_DATA[2], **{field: "0"}))
    assert not form.is_valid()
    assert form.errors[field] == [message]


def test_business_counts_are_cleaned_to_ints():
    form = BusinessInformationForm(data=STEP_DATA[2])
    assert form.is_valid(), form.errors
    assert form.cleaned_data["num_founders"] == 2
    assert isinstance(form.cleaned_data["team_size"], int)


def test_required_fields_use_their_own_messages():
    form = BasicInformationForm(data={})
    assert not form.is_valid()
    assert form.errors["startup_name"] == ["Startup name is required"]
    assert form.errors["pan_number"] == ["PAN number is required"]
    assert "brand_name" not in form.errors


def test_entity_type_must_be_a_known_choice():
    form = BasicInformationForm(data=dict(STEP_DATA[0], entity_type="Trust"))
    assert not form.is_valid()
    assert "entity_type" in form.errors


def test_terms_must_be_accepted():
    form = FinalDetailsForm(data={})
    assert not form.is_valid()
    assert form.errors["terms_accepted"] == ["You must accept the terms"]


def test_blank_sub_forms_yield_empty_collections():
    data = {
        "founders-TOTAL_FORMS": "1",
        "founders-INITIAL_FORMS": "0",
        "products-TOTAL_FORMS": "1",
        "products-INITIAL_FORMS": "0",
    }
    founders = FounderFormSet(data, prefix="founders")
    products = ProductFormSet(data, prefix="products")
    assert founders.is_valid() and products.is_valid()
    assert founder_entries(founders) == []
    assert product_entries(products) == []


def test_sub_forms_keep_entry_order():
    data = {
        "founders-TOTAL_FORMS": "2",
        "founders-INITIAL_FORMS": "0",
        "founders-0-name": "Alice Smith",
        "founders-0-email": "alice@example.com",
        "founders-0-linkedin": "linkedin.com/in/alice",
        "founders-0-role": "CEO",
        "founders-1-name": "Bob Jones",
        "products-TOTAL_FORMS": "2",
        "products-INITIAL_FORMS": "0",
        "products-0-name": "Analytics Platform",
        "products-1-name": "Mobile App",
    }
    founders = FounderFormSet(data, prefix="founders")
    products = ProductFormSet(data, prefix="products")
    assert founders.is_valid() and products.is_valid()
    assert founder_entries(founders) == [
        {"name": "Alice Smith", "email": "alice@example.com", "linkedin": "linkedin.com/in/alice", "role": "CEO"},
        {"name": "Bob Jones", "email": "", "linkedin": "", "role": ""},
    ]
    assert product_entries(products) == ["Analytics Platform", "Mobile App"]


def test_founder_email_is_checked():
    form = FounderForm(data={"name": "Alice", "email": "alice-at-example"})
    assert not form.is_valid()
    assert "email" in form.errors
