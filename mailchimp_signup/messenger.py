from flask import g

STATUS = "status"
WARNING = "warning"
ERROR = "error"


class RequestMessenger:
    """Collects user-facing notices for the current request on `flask.g`.

    Anything with `add_status`, `add_warning` and `add_error` methods can be
    handed to `MailchimpService` instead.
    """

    def add_status(self, message):
        self._add(STATUS, message)

    def add_warning(self, message):
        self._add(WARNING, message)

    def add_error(self, message):
        self._add(ERROR, message)

    @staticmethod
    def _add(message_type, message):
        g.setdefault("messages", []).append({"type": message_type, "message": message})

    @staticmethod
    def all():
        return list(g.get("messages", []))
