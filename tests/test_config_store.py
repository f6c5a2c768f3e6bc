from mailchimp_signup import settings
from mailchimp_signup.config_store import ConfigStore, MailchimpConfig


def test_get_missing_object(dynamo_table):
    store = ConfigStore(client=dynamo_table)
    assert store.get("nothing.here") == {}


def test_save_and_get(dynamo_table):
    store = ConfigStore(client=dynamo_table)
    store.save("some.config", {"a": 1, "thank_you": {"value": "Hi", "format": "full_html"}})

    assert store.get("some.config") == {
        "a": 1,
        "thank_you": {"value": "Hi", "format": "full_html"},
    }
    item = dynamo_table.get_item(
        TableName=settings.CONFIG_TABLE, Key={"KeyName": {"S": "some.config"}}
    )
    assert "KeyValue" in item["Item"]


def test_mailchimp_config_defaults():
    config = MailchimpConfig()

    assert config.api_key is None
    assert config.list_id is None
    assert config.is_checked is False
    assert config.button_label == "Submit"
    assert config.thank_you == {"value": "", "format": "plain_text"}


def test_mailchimp_config_round_trip(dynamo_table):
    config = MailchimpConfig(
        {
            "mailchimp_api_key": "key-us7",
            "mailchimp_list_id": "abc",
            "mailchimp_checked": True,
            "button_label": "Join",
            "thank_you": {"value": "<b>Thanks</b>"},
        }
    )
    config.save()

    loaded = MailchimpConfig.load()
    assert loaded.api_key == "key-us7"
    assert loaded.list_id == "abc"
    assert loaded.is_checked
    assert loaded.button_label == "Join"
    assert loaded.thank_you == {"value": "<b>Thanks</b>", "format": "plain_text"}
