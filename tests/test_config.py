import pytest
from confidential_chat_verifier.config import NEARAI_API_BASE, VerifierConfig


def test_defaults():
    config = VerifierConfig()
    assert config.api_key is None
    assert config.api_base == NEARAI_API_BASE
    assert config.timeout == 30.0


def test_from_env_prefers_process_environment(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "NEARAI_CLOUD_API_KEY=from-file\nVERIFIER_TIMEOUT=12\n"
    )
    monkeypatch.setenv("NEARAI_CLOUD_API_KEY", "from-env")
    monkeypatch.delenv("VERIFIER_TIMEOUT", raising=False)

    config = VerifierConfig.from_env(str(env_file))
    assert config.api_key == "from-env"
    assert config.timeout == 12.0


def test_from_yaml(tmp_path):
    path = tmp_path / "verifier.yml"
    path.write_text("api_key: yaml-key\ndefault_model: llama-3.3-70b-instruct\n")

    config = VerifierConfig.from_yaml(str(path))
    assert config.api_key == "yaml-key"
    assert config.default_model == "llama-3.3-70b-instruct"


def test_from_yaml_rejects_non_mapping(tmp_path):
    path = tmp_path / "verifier.yml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ValueError):
        VerifierConfig.from_yaml(str(path))
