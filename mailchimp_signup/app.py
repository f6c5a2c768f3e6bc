import functools
import hmac
import logging

from flask import Flask, request, Response, url_for

import sentry_sdk
from sentry_sdk.integrations.aws_lambda import AwsLambdaIntegration
from sentry_sdk.integrations.flask import FlaskIntegration

from mailchimp_signup import settings
from mailchimp_signup.config_store import ConfigStore, MailchimpConfig
from mailchimp_signup.errors import InvalidDataError
from mailchimp_signup.forms import (
    AWAITING_INPUT,
    INVALID_CREDENTIALS_MESSAGE,
    NO_CREDENTIALS_MESSAGE,
    SUBSCRIPTION_FAILED_MESSAGE,
    UNCONFIGURED,
    CredentialsConfigForm,
    SignupForm,
    failure_response,
)
from mailchimp_signup.mailchimp import MailchimpService
from mailchimp_signup.messenger import RequestMessenger


sentry_sdk.init(
    dsn=settings.SENTRY_DSN,
    integrations=[AwsLambdaIntegration(), FlaskIntegration()],
    environment=settings.ENV,
    release=settings.SENTRY_RELEASE,
    # Set traces_sample_rate to 1.0 to capture 100%
    # of transactions for performance monitoring.
    traces_sample_rate=1.0
)

logging.basicConfig(level=settings.LOG_LEVEL)

app = Flask(__name__)

path_prefix = settings.APP_NAME


def admin_required(view):
    @functools.wraps(view)
    def wrapper(*args, **kwargs):
        token = request.headers.get("X-Admin-Token", "")
        if not settings.ADMIN_TOKEN or not hmac.compare_digest(
            token.encode(), settings.ADMIN_TOKEN.encode()
        ):
            return failure_response("Admin token is missing or invalid", 403)
        return view(*args, **kwargs)

    return wrapper


@app.route(f"/{path_prefix}/", methods=["GET"])
def healthcheck():
    return Response(status=204)


@app.route(f"/{path_prefix}/form", methods=["GET"])
def signup_form():
    form = SignupForm(MailchimpConfig.load())
    return form.build(config_url=url_for("credentials_config"))


@app.route(f"/{path_prefix}/subscribe", methods=["POST"])
def subscribe():
    config = MailchimpConfig.load()
    form = SignupForm(config)
    if not form.is_configured:
        return failure_response(NO_CREDENTIALS_MESSAGE, 503, state=UNCONFIGURED)

    try:
        values = SignupForm.values_from_request(request)
    except InvalidDataError as e:
        return failure_response(e.message, state=AWAITING_INPUT)

    errors = form.validate(values)
    if errors:
        return failure_response(
            "Please correct the errors below.", state=AWAITING_INPUT, errors=errors
        )

    messenger = RequestMessenger()
    with MailchimpService.from_config(config, messenger=messenger) as service:
        submitted = form.submit(values, service)
    if submitted:
        return form.thank_you()

    return failure_response(
        SUBSCRIPTION_FAILED_MESSAGE,
        state=AWAITING_INPUT,
        messages=messenger.all(),
    )


@app.route(f"/{path_prefix}/config", methods=["GET", "POST"])
@admin_required
def credentials_config():
    store = ConfigStore()
    form = CredentialsConfigForm(MailchimpConfig.load(store))
    if request.method == "GET":
        return form.build()

    try:
        values = CredentialsConfigForm.values_from_request(request)
    except InvalidDataError as e:
        return failure_response(e.message)

    errors = form.validate(values)
    if errors:
        return failure_response("Please correct the errors below.", errors=errors)

    messenger = RequestMessenger()
    with MailchimpService(messenger=messenger) as service:
        summary, errors = form.validate_credentials(values, service)
    if errors:
        return failure_response(
            INVALID_CREDENTIALS_MESSAGE,
            errors=errors,
            messages=messenger.all(),
        )

    message = form.submit(values, summary, store, messenger)
    return {
        "status": "saved",
        "detail": message,
        "audience": summary.to_dict(),
        "messages": messenger.all(),
    }
