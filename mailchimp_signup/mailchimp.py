import logging

import requests

from mailchimp_signup import settings
from mailchimp_signup.errors import Error, EmptyInputError, MalformedCredentialError
from mailchimp_signup.messenger import RequestMessenger
from mailchimp_signup.outcome import (
    EMPTY_INPUT,
    MALFORMED_CREDENTIAL,
    REMOTE_CLIENT_ERROR,
    TRANSPORT_FAILURE,
    Failure,
    Success,
)

logger = logging.getLogger("mailchimp_signup")

MEMBER_EXISTS_MESSAGE = "It seems that you're already subscribed."

# Form field name -> Mailchimp merge tag
MERGE_FIELDS = (
    ("first_name", "FNAME"),
    ("last_name", "LNAME"),
    ("zip_code", "ZIP"),
)


def resolve_region(api_key):
    """Extracts the data center (us1, us2, ...) from an API key such as
    `0123456789abcdef-us7`. The data center is whatever follows the first
    dash."""
    if not isinstance(api_key, str) or "-" not in api_key:
        raise MalformedCredentialError("Unable to extract DataCenter from API Key")
    return api_key.partition("-")[2]


def api_url(api_key, endpoint):
    region = resolve_region(api_key)
    return (
        f"https://{region}.{settings.MAILCHIMP_API_HOST}"
        f"/{settings.MAILCHIMP_API_VERSION}{endpoint}"
    )


def error_content(response):
    """Returns the Mailchimp problem document carried by an error response,
    or None when the body is not one."""
    if response is None:
        return None
    try:
        content = response.json()
    except ValueError:
        return None
    if not isinstance(content, dict) or "title" not in content:
        return None
    return content


def error_code(exception):
    response = getattr(exception, "response", None)
    if response is not None:
        return response.status_code
    return 0


class UnexpectedStatusError(requests.RequestException):
    """A 2xx/3xx answer other than 200."""


class MailchimpService:
    """Talks to the Mailchimp Marketing API on behalf of the sign-up and
    credentials forms.

    The HTTP session, logger and notifier are injected; the defaults are a
    fresh `requests.Session`, the `mailchimp_signup` logger and a
    `RequestMessenger`.
    """

    def __init__(self, api_key=None, list_id=None, session=None, log=None, messenger=None):
        self.api_key = api_key
        self.list_id = list_id
        # Only a session we opened ourselves is closed by close()
        self.owns_session = session is None
        self.session = session or requests.Session()
        self.logger = log or logger
        self.messenger = messenger or RequestMessenger()

    @classmethod
    def from_config(cls, config, **kwargs):
        return cls(config.api_key, config.list_id, **kwargs)

    def close(self):
        if self.owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def send_to_mailchimp(self, data=None):
        """Sends the registration form's data to Mailchimp. Returns True when
        the member was added."""
        return bool(self.subscribe(data))

    def subscribe(self, data=None):
        if not data:
            self.log_error_message("No data to send")
            return Failure(EMPTY_INPUT, EmptyInputError("No data to send").message)

        return self.connect(
            self.api_key,
            f"/lists/{self.list_id}/members",
            method="post",
            body=self.prepare_body(data),
            show_errors=True,
        )

    @staticmethod
    def prepare_body(data):
        """Anything beyond `email_address` and `status` has to travel in the
        `merge_fields` sub-document."""
        body = {
            "email_address": data.get("email") or "",
            "status": "subscribed",
        }

        merge_fields = {
            tag: data[field]
            for field, tag in MERGE_FIELDS
            if data.get(field) is not None
        }
        if merge_fields:
            body["merge_fields"] = merge_fields

        return body

    def _dispatch(self, api_key, endpoint, method, body=None, query=None):
        url = api_url(api_key, endpoint)
        response = self.session.request(
            method.upper(),
            url,
            auth=("anystring", api_key),
            json=body,
            params=query,
            timeout=settings.MAILCHIMP_TIMEOUT,
        )
        response.raise_for_status()
        if response.status_code != 200:
            raise UnexpectedStatusError(
                f"Unexpected response status {response.status_code} for url: {url}",
                response=response,
            )
        return response.json()

    def connect(self, api_key, endpoint, method="get", body=None, query=None, show_errors=False):
        """Calls the Mailchimp API once and classifies the outcome.

        Failures are always logged; they are only reported to the user when
        `show_errors` is set.
        """
        try:
            return Success(self._dispatch(api_key, endpoint, method, body, query))

        except requests.HTTPError as e:
            content = error_content(e.response)
            if content is None:
                return self._unstructured_failure(TRANSPORT_FAILURE, e, show_errors)

            self.log_error_message(f"{content.get('detail')} - {e}")
            failure = Failure(
                REMOTE_CLIENT_ERROR,
                str(e),
                code=error_code(e),
                title=content.get("title"),
                detail=content.get("detail"),
                status=content.get("status"),
            )
            if show_errors:
                self.show_errors(failure)
            return failure

        except MalformedCredentialError as e:
            return self._unstructured_failure(MALFORMED_CREDENTIAL, e, show_errors)

        except (requests.RequestException, Error) as e:
            return self._unstructured_failure(TRANSPORT_FAILURE, e, show_errors)

    def _unstructured_failure(self, kind, exception, show_errors):
        self.log_error_message(str(exception))
        failure = Failure(kind, str(exception), code=error_code(exception))
        if show_errors:
            self.show_errors(failure)
        return failure

    def show_errors(self, failure):
        """Shows a human readable message when the server gave us one."""
        if failure.is_structured:
            if failure.is_member_exists:
                self.messenger.add_warning(MEMBER_EXISTS_MESSAGE)
            else:
                self.messenger.add_error(f"{failure.title} {failure.detail}")
        else:
            self.messenger.add_error(failure.message)
            self.messenger.add_error(f"Error Code: {failure.code}")

    def validate_credentials(self, api_key, list_id):
        """Checks an API key and audience list id before they are saved.

        Returns `Success` with the decoded audience (name, id, stats) or a
        `Failure`. Errors are always logged and shown, whatever the caller
        wants.
        """
        try:
            return Success(
                self._dispatch(
                    api_key,
                    f"/lists/{list_id}",
                    "get",
                    query={"fields": "name,id,stats"},
                )
            )

        except requests.HTTPError as e:
            content = error_content(e.response)
            if content is not None and 400 <= error_code(e) < 500:
                message = (
                    f"{content.get('title')}. {content.get('detail')}"
                    f" Error code: {content.get('status')}"
                )
                self.log_error_message(message)
                self.messenger.add_error(message)
                return Failure(
                    REMOTE_CLIENT_ERROR,
                    message,
                    code=error_code(e),
                    title=content.get("title"),
                    detail=content.get("detail"),
                    status=content.get("status"),
                )
            return self._unstructured_failure(TRANSPORT_FAILURE, e, True)

        except MalformedCredentialError as e:
            return self._unstructured_failure(MALFORMED_CREDENTIAL, e, True)

        except (requests.RequestException, Error) as e:
            return self._unstructured_failure(TRANSPORT_FAILURE, e, True)

    def log_error_message(self, error=None):
        self.logger.error(
            "Failed to complete Mailchimp call: %s", error or "Unknown error"
        )
