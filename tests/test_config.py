import config


def test_get_secret_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("LOAN_INTAKE_TEST_KEY", "from-env")
    assert config.get_secret("LOAN_INTAKE_TEST_KEY") == "from-env"
    assert config.get_secret("LOAN_INTAKE_MISSING_KEY", "fallback") == "fallback"


def test_load_config_uses_module_settings(monkeypatch):
    monkeypatch.setattr(config, "SUBMIT_ENDPOINT", "https://sink.example.com")
    monkeypatch.setattr(config, "GATE_FORWARD_JUMPS", True)
    cfg = config.load_config()
    assert cfg.submission_endpoint == "https://sink.example.com"
    assert cfg.gate_forward_jumps is True
    assert cfg.contact_email == config.CONTACT_EMAIL


def test_intake_config_defaults():
    cfg = config.IntakeConfig(contact_email="a@b.co", contact_phone="1")
    assert cfg.submission_endpoint == ""
    assert cfg.gate_forward_jumps is False
    assert cfg.mail_subject == "New AION Capital Application"
