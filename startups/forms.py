import re

from django import forms
from django.core.validators import RegexValidator
from django.forms import formset_factory

ENTITY_TYPE_CHOICES = [
    ("Private Limited", "Private Limited"),
    ("Partnership", "Partnership"),
    ("LLP", "LLP"),
    ("Sole Proprietorship", "Sole Proprietorship"),
    ("Other", "Other"),
]
CONTACT_ROLE_CHOICES = [
    ("Founder", "Founder"),
    ("Co-founder", "Co-founder"),
    ("CEO", "CEO"),
    ("CTO", "CTO"),
    ("CFO", "CFO"),
    ("Other", "Other"),
]
SECTOR_CHOICES = [
    ("Software", "Software"),
    ("FinTech", "FinTech"),
    ("HealthTech", "HealthTech"),
    ("EdTech", "EdTech"),
    ("E-commerce", "E-commerce"),
    ("AI/ML", "AI/ML"),
    ("Hardware", "Hardware"),
    ("CleanTech", "CleanTech"),
    ("Other", "Other"),
]
STAGE_CHOICES = [
    ("Idea", "Idea"),
    ("Prototype", "Prototype"),
    ("MVP", "MVP"),
    ("Pre-seed", "Pre-seed"),
    ("Seed", "Seed"),
    ("Series A", "Series A"),
    ("Series B+", "Series B+"),
]
BUSINESS_MODEL_CHOICES = [
    ("B2B", "B2B"),
    ("B2C", "B2C"),
    ("B2B2C", "B2B2C"),
    ("D2C", "D2C"),
    ("Marketplace", "Marketplace"),
    ("SaaS", "SaaS"),
    ("Subscription", "Subscription"),
    ("Freemium", "Freemium"),
    ("Other", "Other"),
]

PITCH_MAX_CHARS = 500

EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)
email_format = RegexValidator(EMAIL_RE, "Invalid email address")


def _with_placeholder(label, choices):
    return [("", label)] + choices


def _required(message):
    return {"required": message}


class TextareaField(forms.CharField):
    """Counts a submitted line break (\\r\\n) as one character, like the textarea does."""

    def to_python(self, value):
        value = super().to_python(value)
        return value.replace("\r\n", "\n")


class BasicInformationForm(forms.Form):
    startup_name = forms.CharField(
        max_length=200,
        error_messages=_required("Startup name is required"),
        widget=forms.TextInput(attrs={"placeholder": "Your startup's official name"}),
    )
    brand_name = forms.CharField(
        max_length=200,
        required=False,
        widget=forms.TextInput(attrs={"placeholder": "Your trading or brand name (if different)"}),
    )
    incorporation_date = forms.DateField(
        error_messages=_required("Date is required"),
        widget=forms.DateInput(attrs={"type": "date"}),
    )
    entity_type = forms.ChoiceField(
        choices=_with_placeholder("Select entity type", ENTITY_TYPE_CHOICES),
        error_messages=_required("Entity type is required"),
    )
    registration_number = forms.CharField(
        max_length=64,
        error_messages=_required("Registration number is required"),
        widget=forms.TextInput(attrs={"placeholder": "CIN/LLPIN/Registration number"}),
    )
    pan_number = forms.CharField(
        max_length=20,
        error_messages=_required("PAN number is required"),
        widget=forms.TextInput(attrs={"placeholder": "Your company's PAN"}),
    )
    address = forms.CharField(
        error_messages=_required("Address is required"),
        widget=forms.Textarea(attrs={"rows": 3, "placeholder": "Full registered address as per documents"}),
    )


class ContactDetailsForm(forms.Form):
    contact_name = forms.CharField(
        max_length=120,
        error_messages=_required("Contact name is required"),
        widget=forms.TextInput(attrs={"placeholder": "Full name of primary contact"}),
    )
    contact_role = forms.ChoiceField(
        choices=_with_placeholder("Select role", CONTACT_ROLE_CHOICES),
        error_messages=_required("Contact role is required"),
    )
    contact_email = forms.EmailField(
        validators=[email_format],
        error_messages={"required": "Email is required", "invalid": "Invalid email address"},
        widget=forms.EmailInput(attrs={"placeholder": "Email address"}),
    )
    contact_phone = forms.CharField(
        max_length=32,
        error_messages=_required("Phone number is required"),
        widget=forms.TextInput(attrs={"type": "tel", "placeholder": "Contact phone number"}),
    )

    def clean_contact_email(self):
        return (self.cleaned_data.get("contact_email") or "").strip().lower()


class BusinessInformationForm(forms.Form):
    num_founders = forms.IntegerField(
        min_value=1,
        error_messages={
            "required": "Number of founders is required",
            "min_value": "Must have at least 1 founder",
        },
    )
    team_size = forms.IntegerField(
        min_value=1,
        error_messages={
            "required": "Team size is required",
            "min_value": "Team size must be at least 1",
        },
    )
    sector = forms.ChoiceField(
        choices=_with_placeholder("Select sector", SECTOR_CHOICES),
        error_messages=_required("Sector is required"),
    )
    stage = forms.ChoiceField(
        choices=_with_placeholder("Select stage", STAGE_CHOICES),
        error_messages=_required("Stage is required"),
    )
    business_model = forms.ChoiceField(
        choices=_with_placeholder("Select business model", BUSINESS_MODEL_CHOICES),
        error_messages=_required("Business model is required"),
    )


class ProductDetailsForm(forms.Form):
    pitch = TextareaField(
        max_length=PITCH_MAX_CHARS,
        error_messages={
            "required": "Elevator pitch is required",
            "max_length": f"Elevator pitch should be under {PITCH_MAX_CHARS} characters",
        },
        widget=forms.Textarea(attrs={"rows": 3, "placeholder": "One-paragraph pitch explaining your startup"}),
    )
    problem_statement = forms.CharField(
        error_messages=_required("Problem statement is required"),
        widget=forms.Textarea(attrs={"rows": 3, "placeholder": "What problem are you solving?"}),
    )
    target_market = forms.CharField(
        error_messages=_required("Target market is required"),
        widget=forms.Textarea(attrs={"rows": 3, "placeholder": "Describe your target audience or customer segments"}),
    )
    product_description = forms.CharField(
        error_messages=_required("Product description is required"),
        widget=forms.Textarea(attrs={"rows": 4, "placeholder": "Describe your product/service in detail"}),
    )


class FinalDetailsForm(forms.Form):
    logo = forms.ImageField(
        required=False,
        help_text="Recommended: square format, minimum 400x400px",
        widget=forms.ClearableFileInput(attrs={"accept": "image/*"}),
    )
    terms_accepted = forms.BooleanField(
        label="I confirm this information is accurate and complete",
        error_messages=_required("You must accept the terms"),
    )


class FounderForm(forms.Form):
    name = forms.CharField(max_length=120, error_messages=_required("Founder name is required"))
    email = forms.EmailField(
        required=False,
        validators=[email_format],
        error_messages={"invalid": "Invalid email address"},
    )
    linkedin = forms.CharField(max_length=300, required=False)
    role = forms.CharField(max_length=60, required=False)


class ProductForm(forms.Form):
    name = forms.CharField(
        max_length=200,
        error_messages=_required("Product name is required"),
        widget=forms.TextInput(attrs={"placeholder": "Product A - Analytics Platform"}),
    )


FounderFormSet = formset_factory(FounderForm, extra=1)
ProductFormSet = formset_factory(ProductForm, extra=1)

# steps 0-3, in wizard order; step 4 is FinalDetailsForm + the two formsets
PROFILE_FORMS = (BasicInformationForm, ContactDetailsForm, BusinessInformationForm, ProductDetailsForm)


def founder_entries(formset):
    # blank extra rows come back as {}
    return [
        {k: (v or "") for k, v in form.cleaned_data.items()}
        for form in formset.forms
        if form.cleaned_data
    ]


def product_entries(formset):
    return [form.cleaned_data["name"] for form in formset.forms if form.cleaned_data]
