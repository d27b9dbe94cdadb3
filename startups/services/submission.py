# startups/services/submission.py
import json
import logging
import uuid

from django.conf import settings
from django.utils import timezone

from launchpad.backend import get_supabase_client
from startups.forms import PROFILE_FORMS, FinalDetailsForm, FounderForm, ProductForm
from .upload import upload_file

logger = logging.getLogger(__name__)

LOGO_FOLDER = "logos"
UPLOAD_POLICY_DEGRADE = "degrade"
UPLOAD_POLICY_ABORT = "abort"
UPLOAD_POLICIES = (UPLOAD_POLICY_DEGRADE, UPLOAD_POLICY_ABORT)


class SubmissionError(Exception):
    """Submission could not be saved. The message is safe to show to the user."""


class LogoUploadError(SubmissionError):
    pass


class SubmissionPayloadError(Exception):
    """Raw submission data didn't validate. `errors` maps field -> list of messages."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {' '.join(v)}" for k, v in errors.items()))


def parse_collection(value, label: str) -> list:
    """
    founders / products may arrive as a list or as JSON text.
    Blank -> []. Malformed JSON or anything but a list is an error.
    """
    if value is None:
        return []
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise SubmissionPayloadError({label: [f"{label.capitalize()} must be valid JSON."]})
    if not isinstance(value, list):
        raise SubmissionPayloadError({label: [f"{label.capitalize()} must be a list."]})
    return value


def validate_submission_payload(data: dict):
    """
    Validate a whole profile sent in one go (JSON API).
    Runs the same step forms the wizard uses; founders/products are checked
    entry by entry. Returns (profile, founders, products).
    """
    errors = {}
    profile = {}

    for form_class in PROFILE_FORMS + (FinalDetailsForm,):
        form = form_class(data={name: data.get(name) for name in form_class.base_fields if data.get(name) is not None})
        if form.is_valid():
            profile.update(form.cleaned_data)
        else:
            errors.update({k: list(v) for k, v in form.errors.items()})

    founders = []
    try:
        raw_founders = parse_collection(data.get("founders"), "founders")
    except SubmissionPayloadError as e:
        errors.update(e.errors)
        raw_founders = []
    for i, item in enumerate(raw_founders):
        form = FounderForm(data=item if isinstance(item, dict) else {})
        if form.is_valid():
            founders.append({k: (v or "") for k, v in form.cleaned_data.items()})
        else:
            for field, messages in form.errors.items():
                errors[f"founders[{i}].{field}"] = list(messages)

    products = []
    try:
        raw_products = parse_collection(data.get("products"), "products")
    except SubmissionPayloadError as e:
        errors.update(e.errors)
        raw_products = []
    for i, item in enumerate(raw_products):
        form = ProductForm(data={"name": item if isinstance(item, str) else ""})
        if form.is_valid():
            products.append(form.cleaned_data["name"])
        else:
            errors[f"products[{i}]"] = list(form.errors["name"])

    if errors:
        raise SubmissionPayloadError(errors)

    profile.pop("logo", None)
    return profile, founders, products


def build_payload(user_id, profile, founders, products, logo_url, submission_key):
    return {
        "user_id": user_id,
        "startup_name": profile["startup_name"],
        "brand_name": profile.get("brand_name") or None,
        "incorporation_date": profile["incorporation_date"].isoformat(),
        "entity_type": profile["entity_type"],
        "registration_number": profile["registration_number"],
        "pan_number": profile["pan_number"],
        "address": profile["address"],
        "contact_name": profile["contact_name"],
        "contact_role": profile["contact_role"],
        "contact_email": profile["contact_email"],
        "contact_phone": profile["contact_phone"],
        "num_founders": int(profile["num_founders"]),
        "team_size": int(profile["team_size"]),
        "sector": profile["sector"],
        "stage": profile["stage"],
        "business_model": profile["business_model"],
        "pitch": profile["pitch"],
        "problem_statement": profile["problem_statement"],
        "target_market": profile["target_market"],
        "product_description": profile["product_description"],
        "founders": [dict(f) for f in founders],
        "products": list(products),
        "logo_url": logo_url,
        "terms_accepted": bool(profile.get("terms_accepted")),
        "created_at": timezone.now().isoformat(),
        "submission_key": submission_key,
    }


def submit_profile(user_id, profile, founders, products, logo=None, submission_key=None):
    """
    Upload the logo (if any), then insert the startup row.
    Retrying with the same submission_key never creates a second row.
    Returns the inserted payload.
    """
    if not user_id:
        raise SubmissionError("You need to be signed in to submit a profile.")
    if not profile.get("terms_accepted"):
        raise SubmissionError("You must accept the terms.")

    submission_key = submission_key or str(uuid.uuid4())

    logo_url = None
    if logo is not None:
        logo_url = upload_file(logo, LOGO_FOLDER, user_id)
        if logo_url is None:
            if settings.STARTUP_LOGO_UPLOAD_POLICY == UPLOAD_POLICY_ABORT:
                raise LogoUploadError("Logo upload failed. Please try again.")
            logger.warning("Logo upload failed for %s, continuing without logo", user_id)

    payload = build_payload(user_id, profile, founders, products, logo_url, submission_key)

    try:
        (
            get_supabase_client()
            .table(settings.STARTUPS_TABLE)
            .upsert(payload, on_conflict="submission_key", ignore_duplicates=True)
            .execute()
        )
    except Exception as e:
        logger.exception("Insert into %s failed (submission %s)", settings.STARTUPS_TABLE, submission_key)
        raise SubmissionError(getattr(e, "message", None) or str(e)) from e

    logger.info("Startup profile submitted by %s (submission %s)", user_id, submission_key)
    return payload
