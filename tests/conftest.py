import json
import logging
from http import HTTPStatus

import boto3
import moto
import pytest
import requests
from dotmap import DotMap

from mailchimp_signup import mailchimp, settings

API_KEY = "0123456789abcdef0123456789abcdef-us7"
LIST_ID = "a1b2c3d4e5"


def mailchimp_response(status_code, payload=None, text=""):
    response = requests.Response()
    response.status_code = status_code
    response.reason = HTTPStatus(status_code).phrase
    response.url = f"https://us7.api.mailchimp.com/3.0/lists/{LIST_ID}"
    if payload is not None:
        response._content = json.dumps(payload).encode("utf-8")
        response.headers["Content-Type"] = "application/problem+json"
    else:
        response._content = text.encode("utf-8")
    return response


def problem(title, detail, status):
    return {
        "type": "https://mailchimp.com/developer/marketing/docs/errors/",
        "title": title,
        "status": status,
        "detail": detail,
        "instance": "d5ebfbe4-a25e-2956-7e72-09574da7a6e2",
    }


class FakeSession:
    """Stands in for requests.Session; records every request it is asked to
    send and answers with a canned response or exception."""

    def __init__(self, response=None, exception=None):
        self.response = response
        self.exception = exception
        self.calls = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.exception is not None:
            raise self.exception
        return self.response

    def close(self):
        self.closed = True


class RecordingMessenger:
    def __init__(self):
        self.messages = []

    def add_status(self, message):
        self.messages.append(("status", message))

    def add_warning(self, message):
        self.messages.append(("warning", message))

    def add_error(self, message):
        self.messages.append(("error", message))

    def of_type(self, message_type):
        return [message for kind, message in self.messages if kind == message_type]


@pytest.fixture
def messenger():
    return RecordingMessenger()


@pytest.fixture
def make_response():
    return mailchimp_response


@pytest.fixture
def make_problem():
    return problem


@pytest.fixture
def service_factory(messenger):
    """Builds a MailchimpService wired to a FakeSession."""

    def factory(response=None, exception=None, api_key=API_KEY, list_id=LIST_ID):
        session = FakeSession(response, exception)
        service = mailchimp.MailchimpService.from_config(
            DotMap({"api_key": api_key, "list_id": list_id}),
            session=session,
            messenger=messenger,
        )
        return service, session

    return factory


@pytest.fixture
def mailchimp_session(monkeypatch):
    """Makes every MailchimpService built by the app use one FakeSession."""
    session = FakeSession(mailchimp_response(200, {}))
    monkeypatch.setattr(mailchimp.requests, "Session", lambda: session)
    return session


@pytest.fixture
def mailchimp_logs(caplog):
    caplog.set_level(logging.ERROR, logger="mailchimp_signup")

    def records():
        return [r for r in caplog.records if r.name == "mailchimp_signup"]

    return records


@pytest.fixture
def dynamo_table():
    with moto.mock_aws():
        client = boto3.client("dynamodb", region_name=settings.AWS_DEFAULT_REGION)
        client.create_table(
            TableName=settings.CONFIG_TABLE,
            KeySchema=[{"AttributeName": "KeyName", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "KeyName", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        yield client
