"""Results of a Mailchimp API call.

A call either succeeds with the decoded JSON payload or fails with a kind
and whatever diagnostic the remote side or the transport gave us. `Success`
is truthy and `Failure` falsy, so callers that only care about the boolean
can keep writing `if service.connect(...):`.
"""

MALFORMED_CREDENTIAL = "malformed_credential"
TRANSPORT_FAILURE = "transport_failure"
REMOTE_CLIENT_ERROR = "remote_client_error"
EMPTY_INPUT = "empty_input"


class Success:
    def __init__(self, payload):
        self.payload = payload

    def __bool__(self):
        return True

    def __eq__(self, other):
        return isinstance(other, Success) and other.payload == self.payload

    def __repr__(self):
        return f"Success({self.payload!r})"


class Failure:
    def __init__(self, kind, message, code=0, title=None, detail=None, status=None):
        self.kind = kind
        self.message = message
        self.code = code
        self.title = title
        self.detail = detail
        self.status = status

    def __bool__(self):
        return False

    @property
    def is_structured(self):
        """True when the server sent a Mailchimp problem document."""
        return self.title is not None

    @property
    def is_member_exists(self):
        return self.title == "Member Exists"

    def __repr__(self):
        return f"Failure({self.kind!r}, {self.message!r}, code={self.code!r})"


class AudienceSummary:
    """Name, id and member count of an audience list."""

    def __init__(self, name, id, member_count):
        self.name = name
        self.id = id
        self.member_count = member_count

    @classmethod
    def from_payload(cls, payload):
        stats = payload.get("stats") or {}
        return cls(payload.get("name"), payload.get("id"), stats.get("member_count"))

    def to_dict(self):
        return {"name": self.name, "id": self.id, "member_count": self.member_count}
