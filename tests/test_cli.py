"""Tests for the sign/verify command-line interface."""

import hashlib
import hmac
import io
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from hmacgate.cli import envelope as cli_envelope
from hmacgate.cli.envelope import main


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Drop CLI log output and never cache loggers bound to a captured stream."""
    monkeypatch.setattr(cli_envelope, "configure_logging", lambda settings, file=None: None)
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL))
    yield
    structlog.reset_defaults()


@pytest.fixture
def body_file(tmp_path):
    """Write a sample body to disk and return its path."""
    path = tmp_path / "payload.json"
    path.write_bytes(b'{"event":"push"}')
    return path


class TestSignCommand:
    """Test suite for `hmacgate sign`."""

    def test_sign_with_explicit_secret(self, body_file, capsys):
        # Arrange
        expected = hmac.new(b"cli_secret", b'{"event":"push"}', hashlib.sha256).hexdigest()

        # Act
        exit_code = main(["sign", "--secret", "cli_secret", str(body_file)])

        # Assert
        assert exit_code == 0
        assert capsys.readouterr().out.strip() == f"sha256={expected}"

    def test_sign_uses_configured_secret(self, body_file, capsys, webhook_secret):
        expected = hmac.new(
            webhook_secret.encode(), b'{"event":"push"}', hashlib.sha512
        ).hexdigest()

        exit_code = main(["sign", "--algorithm", "sha512", str(body_file)])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == f"sha512={expected}"

    def test_sign_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"hello")))
        expected = hmac.new(b"key", b"hello", hashlib.sha256).hexdigest()

        exit_code = main(["sign", "--secret", "key", "-"])

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == f"sha256={expected}"

    def test_missing_file(self, tmp_path, capsys):
        exit_code = main(["sign", "--secret", "key", str(tmp_path / "missing.json")])

        assert exit_code == 1
        assert "cannot read" in capsys.readouterr().err

    def test_unsupported_algorithm_choice(self, body_file):
        """Test that argparse rejects algorithms outside the supported set."""
        with pytest.raises(SystemExit) as exc_info:
            main(["sign", "--algorithm", "md5", str(body_file)])

        assert exc_info.value.code == 2


class TestVerifyCommand:
    """Test suite for `hmacgate verify`."""

    def test_valid_envelope(self, body_file, capsys):
        envelope = "sha256=" + hmac.new(b"k", b'{"event":"push"}', hashlib.sha256).hexdigest()

        exit_code = main(["verify", "--secret", "k", "--envelope", envelope, str(body_file)])

        assert exit_code == 0
        assert "Signature valid" in capsys.readouterr().out

    def test_wrong_secret(self, body_file, capsys):
        envelope = "sha256=" + hmac.new(b"k", b'{"event":"push"}', hashlib.sha256).hexdigest()

        exit_code = main(["verify", "--secret", "other", "--envelope", envelope, str(body_file)])

        assert exit_code == 1
        assert "signature_mismatch" in capsys.readouterr().err

    def test_malformed_envelope(self, body_file, capsys):
        exit_code = main(["verify", "--secret", "k", "--envelope", "sha256", str(body_file)])

        assert exit_code == 1
        assert "malformed_envelope" in capsys.readouterr().err

    def test_sign_then_verify(self, body_file, capsys):
        main(["sign", "--secret", "k", "--algorithm", "sha512", str(body_file)])
        signed = capsys.readouterr().out.strip()

        exit_code = main(
            ["verify", "--secret", "k", "--algorithm", "sha512", "--envelope", signed,
             str(body_file)]
        )

        assert exit_code == 0


class TestSecretResolution:
    """Test how --secret and WEBHOOK_SECRET combine outside the test environment."""

    @pytest.fixture(autouse=True)
    def development_env(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "development")
        monkeypatch.delenv("WEBHOOK_SECRET", raising=False)

    def test_explicit_secret_without_env_secret(self, body_file, capsys):
        """Test that --secret works when WEBHOOK_SECRET is unset."""
        # Arrange
        expected = hmac.new(b"key", b'{"event":"push"}', hashlib.sha256).hexdigest()

        # Act
        exit_code = main(["sign", "--secret", "key", str(body_file)])

        # Assert
        assert exit_code == 0
        assert capsys.readouterr().out.strip() == f"sha256={expected}"

    def test_verify_with_explicit_secret_without_env_secret(self, body_file):
        envelope = "sha256=" + hmac.new(b"k", b'{"event":"push"}', hashlib.sha256).hexdigest()

        exit_code = main(["verify", "--secret", "k", "--envelope", envelope, str(body_file)])

        assert exit_code == 0

    def test_no_secret_from_either_source(self, body_file, capsys):
        """Test that a missing secret exits 1 with a configuration error."""
        exit_code = main(["sign", str(body_file)])

        assert exit_code == 1
        assert "WEBHOOK_SECRET" in capsys.readouterr().err


def test_sign_logs_event_without_secret(body_file, capsys):
    """Test that signing logs cli.signed with the algorithm but no secret or digest."""
    # Arrange
    structlog.reset_defaults()

    # Act
    with capture_logs() as logs:
        exit_code = main(["sign", "--secret", "cli_secret", str(body_file)])

    # Assert
    assert exit_code == 0
    signed = capsys.readouterr().out.strip()
    events = [log for log in logs if log["event"] == "cli.signed"]
    assert len(events) == 1
    assert events[0]["algorithm"] == "sha256"
    assert "cli_secret" not in str(events[0])
    assert signed.split("=")[1] not in str(events[0])
