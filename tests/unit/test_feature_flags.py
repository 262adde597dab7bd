import pytest

from inventory.utils.feature_flags import (
    FeatureFlagKey,
    get_feature_flags,
    is_feature_enabled,
    item_delete_enabled,
    refresh_feature_flag_cache,
    web_ui_enabled,
)

_ENV_FLAG_MAPPING = {
    "WEB_UI_ENABLED": "web_ui_enabled",
    "FEATURE_ITEM_DELETE_ENABLED": "item_delete_enabled",
}


def test_get_feature_flags_defaults_true():
    assert get_feature_flags() == {
        "web_ui_enabled": True,
        "item_delete_enabled": True,
    }


@pytest.mark.parametrize("env_name,flag_key", list(_ENV_FLAG_MAPPING.items()))
def test_individual_flag_disabled_via_env(monkeypatch, env_name: str, flag_key: FeatureFlagKey):
    monkeypatch.setenv(env_name, "false")
    refresh_feature_flag_cache()

    assert get_feature_flags()[flag_key] is False
    assert is_feature_enabled(flag_key) is False


@pytest.mark.parametrize("raw_value", ["maybe", "junk", "2"])
def test_invalid_value_falls_back_to_default(monkeypatch, raw_value):
    monkeypatch.setenv("WEB_UI_ENABLED", raw_value)
    refresh_feature_flag_cache()

    assert web_ui_enabled() is True


@pytest.mark.parametrize("raw_value", ["", "0", "off", "No"])
def test_falsy_values_disable(monkeypatch, raw_value):
    monkeypatch.setenv("FEATURE_ITEM_DELETE_ENABLED", raw_value)
    refresh_feature_flag_cache()

    assert item_delete_enabled() is False


def test_cache_requires_refresh(monkeypatch):
    assert item_delete_enabled() is True
    monkeypatch.setenv("FEATURE_ITEM_DELETE_ENABLED", "off")
    assert item_delete_enabled() is True

    refresh_feature_flag_cache()
    assert item_delete_enabled() is False


def test_unrecognised_value_is_logged(monkeypatch, caplog):
    monkeypatch.setenv("WEB_UI_ENABLED", "sometimes")
    refresh_feature_flag_cache()

    with caplog.at_level("WARNING", logger="inventory.utils.feature_flags"):
        assert web_ui_enabled() is True
    assert "sometimes" in caplog.text
