import pytest
from pydantic import ValidationError

from ctrxml2json import config
from ctrxml2json.models.schemas import (
    AmpersandPolicy,
    BatchSummary,
    ConversionOptions,
    ConversionResult,
    ConversionStatus,
    ParseErrorPolicy,
)


def test_defaults_come_from_config(monkeypatch):
    monkeypatch.setattr(config, "ON_PARSE_ERROR", "abort")
    monkeypatch.setattr(config, "AMPERSAND_POLICY", "preserve-entities")
    monkeypatch.setattr(config, "JSON_ASCII_ONLY", False)

    options = ConversionOptions.from_config()

    assert options.on_parse_error is ParseErrorPolicy.ABORT
    assert options.ampersand_policy is AmpersandPolicy.PRESERVE_ENTITIES
    assert options.ascii_only is False


def test_overrides_replace_config_values():
    options = ConversionOptions.from_config(on_parse_error="abort", ampersand_policy=None)
    assert options.on_parse_error is ParseErrorPolicy.ABORT
    assert options.ampersand_policy is AmpersandPolicy(config.AMPERSAND_POLICY)


def test_invalid_policy_is_rejected():
    with pytest.raises(ValidationError):
        ConversionOptions(on_parse_error="retry")


def test_unknown_option_is_rejected():
    with pytest.raises(ValidationError):
        ConversionOptions(pretty=True)


def _result(status):
    return ConversionResult(input_path="a.xml", output_path="a.json", status=status)


def test_batch_summary_counts():
    summary = BatchSummary(results=[
        _result(ConversionStatus.CONVERTED),
        _result(ConversionStatus.CONVERTED),
        _result(ConversionStatus.FAILED),
        _result(ConversionStatus.SKIPPED),
    ])
    assert (summary.converted, summary.failed, summary.skipped) == (2, 1, 1)
    assert not summary.ok


def test_empty_batch_is_ok():
    assert BatchSummary().ok


def test_unknown_encoding_is_rejected():
    with pytest.raises(ValidationError):
        ConversionOptions(input_encoding="utf-9")


def test_unknown_encoding_from_config_is_rejected(monkeypatch):
    monkeypatch.setattr(config, "INPUT_ENCODING", "utf-9")
    with pytest.raises(ValidationError):
        ConversionOptions.from_config()


def test_encoding_aliases_are_accepted():
    assert ConversionOptions(input_encoding="latin-1").input_encoding == "latin-1"
