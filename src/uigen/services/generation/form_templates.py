"""Canned form templates and the keywords that select them."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from .documents import FieldOption, FormField


@dataclass(frozen=True)
class FormTemplate:
    title: str
    description: str
    fields: Tuple[FormField, ...]
    submit_text: str
    success_message: str

    def clone_fields(self) -> List[FormField]:
        """Fresh, mutable copies of the template fields."""
        return [deepcopy(f) for f in self.fields]


def _field(name: str, type: str, label: str, placeholder: str = "", required: bool = True,
           helper_text: Optional[str] = None, options: Tuple[Tuple[str, str], ...] = (), **validation) -> FormField:
    return FormField(
        name=name,
        type=type,
        label=label,
        placeholder=placeholder,
        required=required,
        validation=dict(validation),
        helper_text=helper_text,
        options=[FieldOption(label, value) for label, value in options],
    )


FORM_TEMPLATES: Mapping[str, FormTemplate] = MappingProxyType({
    "registration": FormTemplate(
        "Create Your Account",
        "Join us today! Fill out the form below to create your account and get started.",
        (
            _field("firstName", "text", "First Name", "John", minLength=2, maxLength=50),
            _field("lastName", "text", "Last Name", "Doe", minLength=2, maxLength=50),
            _field("email", "email", "Email Address", "john.doe@example.com",
                   helper_text="We'll never share your email with anyone else.", pattern="email"),
            _field("password", "password", "Password", "Create a strong password",
                   helper_text="Must be at least 8 characters with uppercase, lowercase, and numbers.",
                   minLength=8, pattern="password"),
            _field("confirmPassword", "password", "Confirm Password", "Re-enter your password",
                   custom="matchPassword"),
            _field("phone", "tel", "Phone Number", "+1 (555) 123-4567", required=False,
                   helper_text="Optional. We'll use this for important account updates.", pattern="phone"),
            _field("dateOfBirth", "datepicker", "Date of Birth", "Select your date of birth",
                   helper_text="You must be at least 18 years old to register.", custom="age18"),
            _field("terms", "checkbox", "I agree to the Terms of Service and Privacy Policy"),
            _field("newsletter", "checkbox", "Subscribe to our newsletter for updates and special offers",
                   required=False),
        ),
        "Create Account",
        "Account created successfully! Welcome aboard!",
    ),
    "contact": FormTemplate(
        "Get in Touch",
        "Have a question or want to work together? Send us a message and we'll get back to you as soon as possible.",
        (
            _field("name", "text", "Full Name", "Jane Smith", minLength=2),
            _field("email", "email", "Email Address", "jane.smith@example.com", pattern="email"),
            _field("subject", "text", "Subject", "What is this regarding?", minLength=5),
            _field("message", "textarea", "Message", "Tell us more about your inquiry...",
                   helper_text="Please provide as much detail as possible.", minLength=10, maxLength=1000),
        ),
        "Send Message",
        "Thank you! Your message has been sent. We'll respond within 24 hours.",
    ),
    "login": FormTemplate(
        "Welcome Back",
        "Sign in to your account to continue.",
        (
            _field("email", "email", "Email Address", "your.email@example.com", pattern="email"),
            _field("password", "password", "Password", "Enter your password"),
            _field("remember", "checkbox", "Remember me for 30 days", required=False),
        ),
        "Sign In",
        "Welcome back! Redirecting to your dashboard...",
    ),
    "feedback": FormTemplate(
        "Share Your Feedback",
        "We'd love to hear from you! Your feedback helps us improve our service.",
        (
            _field("name", "text", "Your Name", "John Doe", minLength=2),
            _field("email", "email", "Email Address", "john.doe@example.com", pattern="email"),
            _field("rating", "select", "Rating", "Select a rating", options=(
                ("5 - Excellent", "5"),
                ("4 - Very Good", "4"),
                ("3 - Good", "3"),
                ("2 - Fair", "2"),
                ("1 - Poor", "1"),
            )),
            _field("feedback", "textarea", "Your Feedback", "Tell us what you think...",
                   helper_text="Please share your thoughts, suggestions, or concerns.",
                   minLength=10, maxLength=500),
        ),
        "Submit Feedback",
        "Thank you for your feedback! We appreciate your input.",
    ),
    "newsletter": FormTemplate(
        "Subscribe to Our Newsletter",
        "Stay updated with our latest news, tips, and exclusive offers.",
        (
            _field("email", "email", "Email Address", "your.email@example.com",
                   helper_text="We'll send you weekly updates. You can unsubscribe at any time.",
                   pattern="email"),
            _field("name", "text", "Your Name (Optional)", "John Doe", required=False),
            _field("interests", "checkbox", "I'm interested in product updates and special offers",
                   required=False),
        ),
        "Subscribe",
        "Thank you for subscribing! Check your email to confirm.",
    ),
    "password-reset": FormTemplate(
        "Reset Your Password",
        "Enter your email address and we'll send you a link to reset your password.",
        (
            _field("email", "email", "Email Address", "your.email@example.com",
                   helper_text="We'll send password reset instructions to this email.", pattern="email"),
        ),
        "Send Reset Link",
        "Password reset link sent! Please check your email.",
    ),
    "profile": FormTemplate(
        "Edit Profile",
        "Update your personal information and preferences.",
        (
            _field("firstName", "text", "First Name", "John", minLength=2),
            _field("lastName", "text", "Last Name", "Doe", minLength=2),
            _field("email", "email", "Email Address", "john.doe@example.com", pattern="email"),
            _field("phone", "tel", "Phone Number", "+1 (555) 123-4567", required=False, pattern="phone"),
            _field("bio", "textarea", "Bio", "Tell us about yourself...", required=False,
                   helper_text="A short description about yourself (optional).", maxLength=200),
        ),
        "Save Changes",
        "Profile updated successfully!",
    ),
    "checkout": FormTemplate(
        "Checkout",
        "Complete your purchase by filling in your payment and shipping information.",
        (
            _field("fullName", "text", "Full Name", "John Doe", minLength=2),
            _field("email", "email", "Email Address", "john.doe@example.com", pattern="email"),
            _field("phone", "tel", "Phone Number", "+1 (555) 123-4567", pattern="phone"),
            _field("address", "text", "Street Address", "123 Main Street"),
            _field("city", "text", "City", "New York"),
            _field("zipCode", "text", "ZIP / Postal Code", "10001", pattern=r"^[0-9]{5}(-[0-9]{4})?$"),
            _field("country", "select", "Country", "Select country", options=(
                ("United States", "US"),
                ("Canada", "CA"),
                ("United Kingdom", "UK"),
                ("Poland", "PL"),
            )),
        ),
        "Complete Purchase",
        "Order placed successfully! You'll receive a confirmation email shortly.",
    ),
})

# First match wins, so order matters ("message" resolves to contact before feedback)
FORM_TYPE_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("registration", ("rejestrac", "registration", "sign up", "create account", "register", "zarejestruj")),
    ("contact", ("kontakt", "contact", "message", "wiadomość", "get in touch")),
    ("login", ("logowanie", "login", "sign in", "zaloguj")),
    ("feedback", ("feedback", "review", "opinia", "ocena", "rating")),
    ("newsletter", ("newsletter", "subscribe", "subskrypcja")),
    ("password-reset", ("password reset", "reset hasła", "forgot password", "zapomniałem hasła", "reset password")),
    ("profile", ("profile", "profil", "edit profile", "edytuj profil")),
    ("checkout", ("checkout", "płatność", "payment", "zamówienie")),
)
