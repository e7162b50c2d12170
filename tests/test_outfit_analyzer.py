"""Tests for the analyzer facade: credential check, call sites and the model availability check."""

import pytest

from ai.src.errors import (
    InvalidResponseShapeError,
    MalformedResponseError,
    MissingCredentialError,
    QuotaExceededError,
    UpstreamError,
)
from ai.src.model_fallback import DEFAULT_FALLBACK_MODELS
from ai.src.outfit_analyzer import (
    NO_MODEL_AVAILABLE,
    analyze_image,
    analyze_outfit,
    check_models,
    generate_comparison,
)
from ai.src.prompts import ANALYZE_PROMPT, COMPARISON_PROMPT


def test_missing_credential_short_circuits(no_api_key, install_client, fake_client_factory, png_bytes):
    """Without a key no client is built and no model is attempted."""
    built = install_client(fake_client_factory())

    outcome = analyze_image("describe", png_bytes, "image/png")

    assert not outcome.ok
    assert isinstance(outcome.error, MissingCredentialError)
    assert outcome.attempted_models == []
    assert built == []


def test_analyze_image_uses_configured_key(api_key, install_client, fake_client_factory, listed_model, png_bytes):
    client = fake_client_factory(listed=[listed_model("m1"), listed_model("m2-flash")], behaviours={"m2-flash": "ok"})
    built = install_client(client)

    outcome = analyze_image("describe", png_bytes)

    assert built == ["test-key"]
    assert outcome.ok
    assert outcome.attempted_models == ["m2-flash"]
    assert client.calls[0]["contents"][1].inline_data.mime_type == "image/jpeg"


def test_analyze_image_explicit_key_wins(no_api_key, install_client, fake_client_factory, png_bytes):
    client = fake_client_factory(list_error=RuntimeError("offline"), behaviours={DEFAULT_FALLBACK_MODELS[0]: "ok"})
    built = install_client(client)

    outcome = analyze_image("describe", png_bytes, api_key="explicit")

    assert built == ["explicit"]
    assert outcome.ok


def test_analyze_outfit_returns_text(api_key, install_client, fake_client_factory, png_bytes):
    client = fake_client_factory(list_error=RuntimeError("offline"), behaviours={DEFAULT_FALLBACK_MODELS[1]: "분석 결과"})
    install_client(client)

    assert analyze_outfit(png_bytes, "image/png") == "분석 결과"
    assert client.attempted == DEFAULT_FALLBACK_MODELS[:2]
    assert client.calls[0]["contents"][0] == ANALYZE_PROMPT


def test_analyze_outfit_all_models_fail(api_key, install_client, fake_client_factory, png_bytes):
    """The last model's error is classified; generic errors become UpstreamError."""
    client = fake_client_factory(list_error=RuntimeError("offline"))
    install_client(client)

    with pytest.raises(UpstreamError) as excinfo:
        analyze_outfit(png_bytes, "image/png")

    assert client.attempted == DEFAULT_FALLBACK_MODELS
    assert excinfo.value.attempted_models == DEFAULT_FALLBACK_MODELS
    assert DEFAULT_FALLBACK_MODELS[-1] in excinfo.value.detail


def test_analyze_outfit_quota_on_last_model(api_key, install_client, fake_client_factory, png_bytes):
    behaviours = {DEFAULT_FALLBACK_MODELS[-1]: RuntimeError("429 RESOURCE_EXHAUSTED")}
    install_client(fake_client_factory(list_error=RuntimeError("offline"), behaviours=behaviours))

    with pytest.raises(QuotaExceededError):
        analyze_outfit(png_bytes, "image/png")


def test_generate_comparison(api_key, install_client, fake_client_factory, png_bytes):
    client = fake_client_factory(
        list_error=RuntimeError("offline"),
        behaviours={DEFAULT_FALLBACK_MODELS[0]: '{"celebrityItems": [{"part": "top"}], "budgetItems": []}'},
    )
    install_client(client)

    comparison = generate_comparison(png_bytes, "image/png")

    assert comparison["celebrityItems"] == [{"part": "top"}]
    assert client.calls[0]["contents"][0] == COMPARISON_PROMPT
    assert client.calls[0]["config"].response_mime_type == "application/json"


def test_generate_comparison_malformed_is_not_retried(api_key, install_client, fake_client_factory, png_bytes):
    """A non-JSON success is reported as malformed and no other model is tried."""
    client = fake_client_factory(list_error=RuntimeError("offline"), behaviours={DEFAULT_FALLBACK_MODELS[0]: "not json"})
    install_client(client)

    with pytest.raises(MalformedResponseError):
        generate_comparison(png_bytes, "image/png")

    assert client.attempted == [DEFAULT_FALLBACK_MODELS[0]]


def test_generate_comparison_invalid_shape(api_key, install_client, fake_client_factory, png_bytes):
    client = fake_client_factory(list_error=RuntimeError("offline"), behaviours={DEFAULT_FALLBACK_MODELS[0]: '{"items": []}'})
    install_client(client)

    with pytest.raises(InvalidResponseShapeError):
        generate_comparison(png_bytes, "image/png")


def test_generate_comparison_missing_credential(no_api_key, install_client, fake_client_factory, png_bytes):
    built = install_client(fake_client_factory())

    with pytest.raises(MissingCredentialError):
        generate_comparison(png_bytes, "image/png")

    assert built == []


def test_check_models_recommends_first_available(api_key, install_client, fake_client_factory):
    install_client(fake_client_factory(behaviours={DEFAULT_FALLBACK_MODELS[2]: "ok", DEFAULT_FALLBACK_MODELS[3]: "ok"}))

    report = check_models()

    assert report["recommendation"] == DEFAULT_FALLBACK_MODELS[2]
    assert list(report["results"]) == DEFAULT_FALLBACK_MODELS
    assert report["results"][DEFAULT_FALLBACK_MODELS[0]]["available"] is False


def test_check_models_none_available(api_key, install_client, fake_client_factory):
    install_client(fake_client_factory())

    assert check_models()["recommendation"] == NO_MODEL_AVAILABLE


def test_check_models_missing_credential(no_api_key):
    with pytest.raises(MissingCredentialError):
        check_models()
