from chat_relay.config.env import first_env, mask_secret, read_bool_env, read_float_env, read_str_env


def test_read_bool_env(monkeypatch):
    monkeypatch.setenv("BOOL_FLAG", "true")
    assert read_bool_env("BOOL_FLAG", default=False) is True
    monkeypatch.setenv("BOOL_FLAG", "off")
    assert read_bool_env("BOOL_FLAG", default=True) is False
    monkeypatch.delenv("BOOL_FLAG", raising=False)
    assert read_bool_env("BOOL_FLAG", default=True) is True


def test_read_float_env(monkeypatch):
    monkeypatch.setenv("FLOAT_FLAG", "2.5")
    assert read_float_env("FLOAT_FLAG", default=0.5) == 2.5
    monkeypatch.setenv("FLOAT_FLAG", "oops")
    assert read_float_env("FLOAT_FLAG", default=0.5) == 0.5
    monkeypatch.setenv("FLOAT_FLAG", "-1")
    assert read_float_env("FLOAT_FLAG", default=0.5, min_value=0.0) == 0.0


def test_read_str_env_and_first_env(monkeypatch):
    monkeypatch.setenv("STR_A", "  ")
    monkeypatch.setenv("STR_B", " value ")
    assert read_str_env("STR_A", "fallback") == "fallback"
    assert first_env("STR_A", "STR_B") == "value"


def test_mask_secret():
    assert mask_secret("sk-1234567890abcdef") == "sk-1234567..."
    assert mask_secret("") == ""
