import json
import re

from markupsafe import Markup, escape

from mailchimp_signup.errors import InvalidDataError, NoDataProvidedError
from mailchimp_signup.outcome import AudienceSummary

UNCONFIGURED = "unconfigured"
AWAITING_INPUT = "awaiting_input"
SUBMITTED = "submitted"

NO_CREDENTIALS_MESSAGE = "No Mailchimp API credentials found."
SUBSCRIPTION_FAILED_MESSAGE = (
    "An error occurred. Your subscription has not been completed."
)
DEFAULT_THANK_YOU_MESSAGE = "Thank you for joining our mailing list."
INVALID_CREDENTIALS_MESSAGE = "The API key or the Audience list ID are not correct."


def failure_response(message, status_code=400, **extra):
    return {
        "status": "failure",
        "detail": message,
        **extra,
    }, status_code


def read_request_dict(request):
    try:
        if not request.form and not request.data:
            raise NoDataProvidedError

        if request.data:
            # POST submitted via api
            request_dict = json.loads(request.data)
        else:
            # POST submitted via form
            request_dict = request.form

    except NoDataProvidedError:
        raise InvalidDataError("No data was provided")
    except ValueError:
        raise InvalidDataError("Request body is not valid JSON")

    if not hasattr(request_dict, "get"):
        raise InvalidDataError("Request body must be an object")
    return request_dict


def read_text(request_dict, name, label=None):
    """Returns the stripped text value of a field, None when it is absent."""
    value = request_dict.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidDataError(f"{label or name} must be a string")
    return value.strip()


def render_thank_you(thank_you):
    """Renders the stored thank-you rich text. `full_html` is trusted admin
    markup; every other format is treated as plain text."""
    value = thank_you.get("value") or DEFAULT_THANK_YOU_MESSAGE
    if thank_you.get("format") == "full_html":
        return Markup(value)
    return Markup("<br>\n").join(escape(value).splitlines())


class SignupForm:
    """The public sign-up form.

    unconfigured -> no submission possible until the credentials have been
    validated; awaiting_input -> submitted once Mailchimp accepts the member,
    back to awaiting_input otherwise.
    """

    fields = (
        ("first_name", "First Name", "textfield"),
        ("last_name", "Last Name", "textfield"),
        ("email", "Email Address", "email"),
        ("zip_code", "Zip Code", "textfield"),
    )

    def __init__(self, config):
        self.config = config

    @property
    def is_configured(self):
        return self.config.is_checked

    def build(self, config_url=None):
        if not self.is_configured:
            return {
                "state": UNCONFIGURED,
                "detail": NO_CREDENTIALS_MESSAGE,
                "config_url": config_url,
            }

        return {
            "state": AWAITING_INPUT,
            "fields": [
                {
                    "name": name,
                    "title": title,
                    "type": field_type,
                    "placeholder": f"{title} *",
                    "required": True,
                }
                for name, title, field_type in self.fields
            ],
            "button_label": self.config.button_label,
        }

    @classmethod
    def values_from_request(cls, request):
        request_dict = read_request_dict(request)
        return {name: read_text(request_dict, name) for name, _, _ in cls.fields}

    @staticmethod
    def is_email_valid(email):
        return bool(re.match(r"[^@]+@[^@]+\.[^@]+", email or ""))

    def validate(self, values):
        errors = {}
        for name, title, _ in self.fields:
            if not values.get(name):
                errors[name] = f"{title} field is required."

        if values.get("email") and not self.is_email_valid(values["email"]):
            errors["email"] = "Email address is invalid."

        zip_code = values.get("zip_code")
        if zip_code and len(str(zip_code)) < 5:
            errors["zip_code"] = "Please enter a correct ZIP Code."

        return errors

    def submit(self, values, service):
        """Sends the values to Mailchimp. Returns True once the member has
        been added."""
        if service.send_to_mailchimp(values):
            return True

        # The real errors are logged on the mailchimp_signup channel
        service.messenger.add_error(SUBSCRIPTION_FAILED_MESSAGE)
        return False

    def thank_you(self):
        return {
            "status": "subscribed",
            "state": SUBMITTED,
            "detail": str(render_thank_you(self.config.thank_you)),
        }


class CredentialsConfigForm:
    """Admin form storing the Mailchimp API credentials and the sign-up
    form's content settings."""

    required = (
        ("mailchimp_api_key", "API key"),
        ("mailchimp_list_id", "Audience list ID"),
        ("button_label", "Label of the submit button"),
    )

    def __init__(self, config):
        self.config = config

    def build(self):
        return {"config": self.config.to_dict()}

    @classmethod
    def values_from_request(cls, request):
        request_dict = read_request_dict(request)
        values = {name: read_text(request_dict, name) for name, _ in cls.required}

        thank_you = request_dict.get("thank_you")
        if isinstance(thank_you, dict):
            value = read_text(thank_you, "value", "thank_you.value")
            text_format = read_text(thank_you, "format", "thank_you.format")
        else:
            value = read_text(request_dict, "thank_you_value")
            text_format = read_text(request_dict, "thank_you_format")
        values["thank_you"] = {
            "value": value or "",
            "format": text_format or "plain_text",
        }
        return values

    def validate(self, values):
        return {
            name: f"{title} field is required."
            for name, title in self.required
            if not values.get(name)
        }

    def validate_credentials(self, values, service):
        """Returns the audience summary when Mailchimp accepts the
        credentials, otherwise the field errors to show."""
        outcome = service.validate_credentials(
            values["mailchimp_api_key"], values["mailchimp_list_id"]
        )
        if not outcome:
            return None, {
                "mailchimp_api_key": "",
                "mailchimp_list_id": INVALID_CREDENTIALS_MESSAGE,
            }
        return AudienceSummary.from_payload(outcome.payload), {}

    def submit(self, values, summary, store, messenger):
        message = (
            f"Successfully connected to Audience: {summary.name} ({summary.id})"
            f" with {summary.member_count} members."
        )
        messenger.add_status(message)

        self.config.values.update(
            {
                "mailchimp_api_key": values["mailchimp_api_key"],
                "mailchimp_list_id": values["mailchimp_list_id"],
                "button_label": values["button_label"],
                "thank_you": values["thank_you"],
                # At this stage the credentials are known to work
                "mailchimp_checked": True,
            }
        )
        self.config.save(store)
        return message
