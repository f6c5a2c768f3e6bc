import os

from dotenv import load_dotenv

load_dotenv()

APP_NAME = os.environ.get("APP_NAME") or "mailchimp-signup"

# DynamoDB table holding the module configuration objects
CONFIG_TABLE = os.environ.get("CONFIG_TABLE") or "MailchimpSignupConfigStore"
CONFIG_NAME = os.environ.get("CONFIG_NAME") or "mailchimp_credentials.config"
AWS_DEFAULT_REGION = os.environ.get("AWS_DEFAULT_REGION") or "us-east-1"

ADMIN_TOKEN = os.environ.get("ADMIN_TOKEN")

MAILCHIMP_API_HOST = os.environ.get("MAILCHIMP_API_HOST") or "api.mailchimp.com"
MAILCHIMP_API_VERSION = os.environ.get("MAILCHIMP_API_VERSION") or "3.0"
# Seconds; unset leaves the requests default
MAILCHIMP_TIMEOUT = (
    float(os.environ["MAILCHIMP_TIMEOUT"]) if os.environ.get("MAILCHIMP_TIMEOUT") else None
)

LOG_LEVEL = os.environ.get("LOG_LEVEL") or "INFO"

SENTRY_DSN = os.environ.get("SENTRY_DSN")
ENV = os.environ.get("ENV")
SENTRY_RELEASE = os.environ.get("SENTRY_RELEASE")
