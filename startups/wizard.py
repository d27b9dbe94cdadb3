# startups/wizard.py
"""
Five-step startup profile wizard.

State lives in the session under ProfileWizard.SESSION_KEY:
    {"step": 0..4, "data": {step_key: {field: raw value}}, "submission_key": uuid}

Raw values are kept (not cleaned ones) so every step can be re-validated at
submit time with exactly the rules that let the user past it.
"""
import uuid
from dataclasses import dataclass

from django import forms

from .forms import (
    BasicInformationForm,
    BusinessInformationForm,
    ContactDetailsForm,
    FinalDetailsForm,
    ProductDetailsForm,
)


@dataclass(frozen=True)
class Step:
    key: str
    title: str
    description: str
    form_class: type


STEPS = (
    Step("basic", "Basic Information", "Enter your startup's fundamental details", BasicInformationForm),
    Step("contact", "Contact Details", "Who should we contact regarding this application?", ContactDetailsForm),
    Step("business", "Business Information", "Tell us about your business structure", BusinessInformationForm),
    Step("product", "Product Details", "Describe what your startup offers", ProductDetailsForm),
    Step("final", "Final Details", "Complete your profile setup", FinalDetailsForm),
)
FIRST_STEP = 0
LAST_STEP = len(STEPS) - 1


class IncompleteStep(Exception):
    """A step's required fields aren't satisfied yet."""

    def __init__(self, index, errors=None):
        self.index = index
        self.errors = errors or {}
        super().__init__(f"Please complete step {index + 1} ({STEPS[index].title}) first.")


class ProfileWizard:
    SESSION_KEY = "startup_wizard"

    def __init__(self, session):
        self.session = session
        state = session.get(self.SESSION_KEY) or {}
        self.step = min(max(int(state.get("step", FIRST_STEP)), FIRST_STEP), LAST_STEP)
        self.data = state.get("data") or {}
        self.submission_key = state.get("submission_key") or str(uuid.uuid4())

    def save(self):
        self.session[self.SESSION_KEY] = {
            "step": self.step,
            "data": self.data,
            "submission_key": self.submission_key,
        }

    @property
    def current(self) -> Step:
        return STEPS[self.step]

    @property
    def is_last(self) -> bool:
        return self.step == LAST_STEP

    def values(self, index) -> dict:
        return self.data.get(STEPS[index].key) or {}

    def remember(self, index, data):
        # files can't go in the session; the logo is only read on submit
        form_class = STEPS[index].form_class
        self.data[STEPS[index].key] = {
            name: data.get(name)
            for name in form_class.base_fields
            if data.get(name) is not None and not isinstance(form_class.base_fields[name], forms.FileField)
        }

    def form_for(self, index, data=None, files=None):
        form_class = STEPS[index].form_class
        if data is None:
            return form_class(initial=self.values(index))
        return form_class(data=data, files=files)

    def stored_form(self, index):
        """Step form bound to what was stored for it, or None."""
        key = STEPS[index].key
        if key not in self.data:
            return None
        return STEPS[index].form_class(data=self.data[key])

    def step_errors(self, index) -> dict:
        form = self.stored_form(index)
        if form is None:
            return {"__all__": ["This step hasn't been filled in."]}
        if form.is_valid():
            return {}
        return {k: list(v) for k, v in form.errors.items()}

    def next(self) -> int:
        if self.step < LAST_STEP:
            errors = self.step_errors(self.step)
            if errors:
                raise IncompleteStep(self.step, errors)
        self.step = min(self.step + 1, LAST_STEP)
        self.save()
        return self.step

    def prev(self) -> int:
        self.step = max(self.step - 1, FIRST_STEP)
        self.save()
        return self.step

    def rewind(self, index) -> int:
        if index < self.step:
            self.step = max(index, FIRST_STEP)
            self.save()
        return self.step

    def advance(self, data):
        """Validate the current step against `data`; move on if it passes."""
        form = self.form_for(self.step, data=data)
        self.remember(self.step, data)
        if form.is_valid():
            self.next()
        else:
            self.save()
        return form

    def retreat(self, data):
        # keep whatever was typed, valid or not
        if not self.is_last:
            self.remember(self.step, data)
        return self.prev()

    def cleaned_steps(self) -> dict:
        """Merged cleaned data of every step before the final one."""
        merged = {}
        for index in range(LAST_STEP):
            form = self.stored_form(index)
            if form is None or not form.is_valid():
                raise IncompleteStep(index, self.step_errors(index))
            merged.update(form.cleaned_data)
        return merged

    def reset(self):
        self.session.pop(self.SESSION_KEY, None)
        self.step = FIRST_STEP
        self.data = {}
        self.submission_key = str(uuid.uuid4())

