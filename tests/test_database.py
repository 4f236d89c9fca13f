import pytest
from cryptography.fernet import InvalidToken

from mediavault.core.database import DEFAULT_SETTINGS, DatabaseManager


def test_defaults_are_seeded(db):
    assert db.get_config("api_base_url") == "http://localhost:8080"
    assert db.get_config("http_timeout_seconds") == "10"
    assert db.get_config("app_version") == DatabaseManager.VERSION
    assert db.get_config("missing", "fallback") == "fallback"


def test_reconnect_keeps_user_settings(tmp_path, encryption_key):
    first = DatabaseManager(tmp_path / "data.db", encryption_key=encryption_key)
    first.connect()
    first.set_config("image_quality", 55)
    first.close()

    second = DatabaseManager(tmp_path / "data.db", encryption_key=encryption_key)
    second.connect()
    try:
        assert second.get_config("image_quality") == "55"
    finally:
        second.close()


def test_encrypted_values_round_trip_and_stay_private(db):
    db.set_configs({"token": "abc", "user": "{}"}, encrypt_keys=("token",))

    assert db.get_config("token") == "abc"
    settings = db.get_all_config()
    assert "token" not in settings
    assert settings["user"] == "{}"
    assert set(DEFAULT_SETTINGS) <= set(settings)


def test_tampered_value_raises_invalid_token(db):
    db.set_config("token", "abc", encrypt=True)
    with db.conn:
        db.conn.execute("UPDATE config SET value = 'garbage' WHERE key = 'token'")

    with pytest.raises(InvalidToken):
        db.get_config("token")
    assert db.has_config("token")


def test_delete_config_ignores_missing_keys(db):
    db.set_config("a", "1")
    db.delete_config("a", "never-set")

    assert not db.has_config("a")
