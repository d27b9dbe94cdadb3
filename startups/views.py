import json
import logging

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from accounts.decorators import identity_required
from .forms import FounderFormSet, ProductFormSet, founder_entries, product_entries
from .services.submission import (
    SubmissionError,
    SubmissionPayloadError,
    submit_profile,
    validate_submission_payload,
)
from .wizard import STEPS, IncompleteStep, ProfileWizard

logger = logging.getLogger(__name__)


def _render_wizard(request, wizard, form, founders=None, products=None, status=200):
    if wizard.is_last:
        if founders is None:
            founders = FounderFormSet(prefix="founders")
        if products is None:
            products = ProductFormSet(prefix="products")
    return render(request, "startups/profile_create.html", {
        "wizard": wizard,
        "steps": STEPS,
        "step": wizard.current,
        "form": form,
        "founders": founders,
        "products": products,
        "progress": int(wizard.step / (len(STEPS) - 1) * 100),
    }, status=status)


def _submit(request, wizard):
    form = wizard.form_for(wizard.step, data=request.POST, files=request.FILES)
    founders = FounderFormSet(request.POST, prefix="founders")
    products = ProductFormSet(request.POST, prefix="products")

    if not (form.is_valid() and founders.is_valid() and products.is_valid()):
        return _render_wizard(request, wizard, form, founders, products)

    try:
        profile = wizard.cleaned_steps()
    except IncompleteStep as e:
        logger.info("Stored step %s no longer validates, rewinding", e.index)
        messages.error(request, str(e))
        wizard.rewind(e.index)
        return redirect("startup_create")

    profile["terms_accepted"] = form.cleaned_data["terms_accepted"]

    try:
        submit_profile(
            request.identity,
            profile,
            founder_entries(founders),
            product_entries(products),
            logo=form.cleaned_data.get("logo") or None,
            submission_key=wizard.submission_key,
        )
    except SubmissionError as e:
        messages.error(request, f"Error: {e}")
        return _render_wizard(request, wizard, form, founders, products)

    wizard.reset()
    messages.success(request, "Profile submitted successfully!")
    return redirect("startup_created")


@identity_required
def profile_create(request):
    wizard = ProfileWizard(request.session)

    if request.method == "POST":
        action = request.POST.get("action", "next")

        if action == "prev":
            wizard.retreat(request.POST)
            return redirect("startup_create")

        if wizard.is_last:
            return _submit(request, wizard)

        form = wizard.advance(request.POST)
        if form.is_valid():
            return redirect("startup_create")
        return _render_wizard(request, wizard, form)

    form = wizard.form_for(wizard.step)
    return _render_wizard(request, wizard, form)


@identity_required
def profile_created(request):
    return render(request, "startups/profile_created.html")


# token-authenticated API, the Idempotency-Key header already rules out plain form posts
@csrf_exempt
@identity_required
@require_POST
def submit_api(request):
    """
    Create a startup profile in one request.
    Accepts JSON with the wizard's fields; founders/products as arrays or JSON text.
    Requires an Idempotency-Key header; retries with the same key are no-ops.
    """
    try:
        payload = json.loads(request.body or b"{}")
    except ValueError:
        return JsonResponse({"ok": False, "error": "Invalid JSON"}, status=400)

    if not isinstance(payload, dict):
        return JsonResponse({"ok": False, "error": "Expected a JSON object."}, status=400)

    submission_key = (request.headers.get("Idempotency-Key") or "").strip()
    if not submission_key:
        return JsonResponse({"ok": False, "error": "Idempotency-Key header is required."}, status=400)

    try:
        profile, founders, products = validate_submission_payload(payload)
    except SubmissionPayloadError as e:
        return JsonResponse({"ok": False, "errors": e.errors}, status=400)

    try:
        submit_profile(request.identity, profile, founders, products, submission_key=submission_key)
    except SubmissionError as e:
        return JsonResponse({"ok": False, "error": str(e)}, status=502)

    return JsonResponse({"ok": True, "submission_key": submission_key}, status=201)
