"""Tests for URL, endpoint, secret and free-text validation."""

import pytest

from readme_generator.domain.entities import DocumentStyle, Provider
from readme_generator.domain.exceptions import (
    InvalidEndpointError,
    InvalidGitHubUrlError,
    InvalidSecretError,
)
from readme_generator.services.input_validator import (
    normalize_provider,
    normalize_style,
    sanitize_free_text,
    sanitize_secret,
    validate_custom_endpoint,
    validate_repository_url,
)


# ---------------------------------------------------------------------------
# Repository URL
# ---------------------------------------------------------------------------

class TestRepositoryUrl:

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/psf/requests",
            "https://github.com/psf/requests/",
            "https://github.com/psf/requests///",
            "https://github.com/psf/requests.git",
            "https://github.com/psf/requests.git/",
            "https://www.github.com/psf/requests",
            "https://github.com/psf/requests/tree/main/src",
            "  https://github.com/psf/requests  ",
        ],
    )
    def test_accepts_and_normalises(self, url):
        ref = validate_repository_url(url)
        assert (ref.owner, ref.repo) == ("psf", "requests")

    def test_case_preserved(self):
        ref = validate_repository_url("https://github.com/PSF/Requests")
        assert ref.full_name == "PSF/Requests"

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "not-a-url",
            "http://github.com/psf/requests",
            "https://gitlab.com/psf/requests",
            "https://github.com.evil.com/psf/requests",
            "https://github.com/psf",
            "https://github.com/",
            "https://github.com//requests",
            "github.com/psf/requests",
            "https://" + "a" * 2100,
        ],
    )
    def test_rejects(self, url):
        with pytest.raises(InvalidGitHubUrlError):
            validate_repository_url(url)


# ---------------------------------------------------------------------------
# Custom endpoint (SSRF)
# ---------------------------------------------------------------------------

class TestCustomEndpoint:

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_is_valid(self, raw):
        assert validate_custom_endpoint(raw) == ""

    def test_strips_fragment_keeps_path_and_query(self):
        result = validate_custom_endpoint("https://llm.example.com/api/v1/chat?x=1#frag")
        assert result == "https://llm.example.com/api/v1/chat?x=1"

    def test_keeps_port(self):
        assert (
            validate_custom_endpoint("https://llm.example.com:8443/v1")
            == "https://llm.example.com:8443/v1"
        )

    @pytest.mark.parametrize(
        "raw",
        [
            "http://llm.example.com/v1",
            "ftp://llm.example.com/v1",
            "llm.example.com/v1",
            "/relative/path",
        ],
    )
    def test_requires_https_absolute_url(self, raw):
        with pytest.raises(InvalidEndpointError):
            validate_custom_endpoint(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            "https://lоcalhost/v1",  # Cyrillic "о"
            "https://ⓛocalhost/v1",
            "https://аpi.openai.com/v1",  # Cyrillic "а"
            "https://exämple.com/v1",
        ],
    )
    def test_rejects_non_ascii_hostnames(self, raw):
        with pytest.raises(InvalidEndpointError):
            validate_custom_endpoint(raw)

    @pytest.mark.parametrize(
        "host",
        [
            "localhost",
            "LOCALHOST",
            "127.0.0.1",
            "127.1.2.3",
            "10.0.0.5",
            "172.16.0.1",
            "172.31.255.255",
            "192.168.1.1",
            "169.254.169.254",
            "0.0.0.0",
            "8.8.8.8",
            "[::1]",
            "[fe80::1]",
            "[2001:db8::1]",
            "2130706433",
            "0x7f000001",
            "0x7f.1",
            "127.1",
            "017700000001",
            "127.0.0.1.",
            "localhost.",
            "%6Cocalhost",
            "127%2E0%2E0%2E1",
        ],
    )
    def test_rejects_private_and_literal_hosts(self, host):
        with pytest.raises(InvalidEndpointError):
            validate_custom_endpoint(f"https://{host}/v1")

    def test_hex_looking_dns_name_accepted(self):
        assert validate_custom_endpoint("https://0xcafe.example.com/v1") == "https://0xcafe.example.com/v1"

    def test_rejects_private_prefix_hostnames(self):
        # Not an IPv4 literal, but starts like a private range.
        with pytest.raises(InvalidEndpointError):
            validate_custom_endpoint("https://10.internal.example/v1")

    def test_userinfo_does_not_hide_host(self):
        with pytest.raises(InvalidEndpointError):
            validate_custom_endpoint("https://api.example.com@127.0.0.1/v1")

    def test_public_172_range_outside_private_block(self):
        assert validate_custom_endpoint("https://172.example.com/v1") == "https://172.example.com/v1"


# ---------------------------------------------------------------------------
# Secrets and free text
# ---------------------------------------------------------------------------

class TestSecrets:

    def test_trimmed(self):
        assert sanitize_secret("  sk-abc  ", "API key") == "sk-abc"

    def test_empty(self):
        assert sanitize_secret(None, "API key") == ""
        assert sanitize_secret("", "API key") == ""

    def test_max_length_inclusive(self):
        assert sanitize_secret("k" * 256, "API key") == "k" * 256

    def test_too_long(self):
        with pytest.raises(InvalidSecretError, match="API key is too long"):
            sanitize_secret("k" * 257, "API key")

    @pytest.mark.parametrize("bad", ["sk\x00abc", "sk\nabc", "sk\x1fabc", "sk\x7fabc"])
    def test_control_characters(self, bad):
        with pytest.raises(InvalidSecretError, match="GitHub token contains invalid characters"):
            sanitize_secret(bad, "GitHub token")


class TestFreeText:

    def test_strips_control_characters(self):
        assert sanitize_free_text("line one\nline\ttwo\x07") == "line onelinetwo"

    def test_truncates(self):
        assert len(sanitize_free_text("x" * 5000)) == 2000

    def test_empty(self):
        assert sanitize_free_text(None) == ""


class TestNormalisers:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("gemini", Provider.GEMINI),
            ("OpenRouter", Provider.OPENROUTER),
            ("openai", Provider.OPENAI),
            ("anthropic", Provider.OPENAI),
            (None, Provider.OPENAI),
        ],
    )
    def test_provider(self, raw, expected):
        assert normalize_provider(raw) is expected

    @pytest.mark.parametrize(
        "raw, expected",
        [("deep", DocumentStyle.DEEP), ("light", DocumentStyle.LIGHT), ("huge", DocumentStyle.NORMAL)],
    )
    def test_style(self, raw, expected):
        assert normalize_style(raw) is expected
