import json

import boto3

from mailchimp_signup import settings

DEFAULT_THANK_YOU = {"value": "", "format": "plain_text"}


class ConfigStore:
    """Key/value configuration objects kept in DynamoDB.

    Each object is one item: `KeyName` holds the object name and `KeyValue`
    the JSON encoded document.
    """

    def __init__(self, table_name=None, client=None):
        self.table_name = table_name or settings.CONFIG_TABLE
        self.client = client or boto3.client(
            "dynamodb", region_name=settings.AWS_DEFAULT_REGION
        )

    def get(self, name):
        item = self.client.get_item(
            TableName=self.table_name,
            Key={"KeyName": {"S": name}},
        )
        try:
            return json.loads(item["Item"]["KeyValue"]["S"])
        except KeyError:
            return {}

    def save(self, name, values):
        self.client.put_item(
            TableName=self.table_name,
            Item={
                "KeyName": {"S": name},
                "KeyValue": {"S": json.dumps(values)},
            },
        )


class MailchimpConfig:
    """The `mailchimp_credentials.config` object: API credentials plus the
    sign-up form's content settings."""

    def __init__(self, values=None):
        self.values = dict(values or {})

    @classmethod
    def load(cls, store=None, name=None):
        store = store or ConfigStore()
        return cls(store.get(name or settings.CONFIG_NAME))

    def save(self, store=None, name=None):
        store = store or ConfigStore()
        store.save(name or settings.CONFIG_NAME, self.values)

    @property
    def api_key(self):
        return self.values.get("mailchimp_api_key")

    @property
    def list_id(self):
        return self.values.get("mailchimp_list_id")

    @property
    def is_checked(self):
        """Set once the credentials have been validated against Mailchimp."""
        return bool(self.values.get("mailchimp_checked"))

    @property
    def button_label(self):
        return self.values.get("button_label") or "Submit"

    @property
    def thank_you(self):
        return {**DEFAULT_THANK_YOU, **(self.values.get("thank_you") or {})}

    def to_dict(self):
        return {
            "mailchimp_api_key": self.api_key,
            "mailchimp_list_id": self.list_id,
            "mailchimp_checked": self.is_checked,
            "button_label": self.values.get("button_label"),
            "thank_you": self.thank_you,
        }
