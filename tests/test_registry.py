"""
Tests for the per-scrape metric registry
"""

import pytest

from tests.helpers import parse_samples
from uls_exporter.kernel.errors import RegistrationError
from uls_exporter.registry import (
    CONTENT_TYPE,
    HEALTH_HELP,
    HEALTH_METRIC,
    LEASE_HELP,
    LEASE_LABELS,
    LEASE_METRIC,
    UPTIME_HELP,
    UPTIME_METRIC,
    MetricRegistry,
    format_value,
)


def test_encode_empty_registry():
    """Test a registry with nothing registered encodes to empty text"""
    assert MetricRegistry().encode() == ""


def test_encode_scalar_gauge_with_help_and_type():
    """Test a scalar gauge renders HELP, TYPE and its value"""
    registry = MetricRegistry()
    registry.gauge(HEALTH_METRIC, HEALTH_HELP).set(1)

    text = registry.encode()

    assert "# HELP uls_health Health of the ULS\n" in text
    assert "# TYPE uls_health gauge\n" in text
    assert "uls_health 1\n" in text


def test_labeled_gauge_keeps_label_order():
    """Test labels render in declaration order"""
    registry = MetricRegistry()
    registry.gauge(LEASE_METRIC, LEASE_HELP, LEASE_LABELS).labels(
        "7", "alice", "host1", "corp"
    ).set(1)

    text = registry.encode()

    assert (
        'uls_license_leased{lease_id="7",lease_user="alice",'
        'lease_hostname="host1",lease_domain="corp"} 1\n'
    ) in text


def test_label_values_are_escaped():
    """Test quotes and backslashes in label values stay valid exposition text"""
    registry = MetricRegistry()
    registry.gauge(LEASE_METRIC, LEASE_HELP, LEASE_LABELS).labels(
        "1", 'ali"ce', "host\\1", "corp"
    ).set(0)

    text = registry.encode()

    assert 'lease_user="ali\\"ce"' in text
    assert 'lease_hostname="host\\\\1"' in text


def test_duplicate_metric_raises_registration_error():
    """Test registering the same name twice is an invariant violation"""
    registry = MetricRegistry()
    registry.gauge(HEALTH_METRIC, HEALTH_HELP)

    with pytest.raises(RegistrationError) as exc_info:
        registry.gauge(HEALTH_METRIC, HEALTH_HELP)

    assert exc_info.value.metric_name == HEALTH_METRIC


def test_reserved_label_name_raises_registration_error():
    """Test an invalid metric definition is reported as RegistrationError"""
    with pytest.raises(RegistrationError):
        MetricRegistry().gauge(LEASE_METRIC, LEASE_HELP, ("__lease_id",))


def test_registries_are_independent():
    """Test two scrapes never share samples"""
    first = MetricRegistry()
    second = MetricRegistry()
    first.gauge(HEALTH_METRIC, HEALTH_HELP).set(1)
    second.gauge(HEALTH_METRIC, HEALTH_HELP).set(0)

    assert "uls_health 1\n" in first.encode()
    assert "uls_health 0\n" in second.encode()


def test_content_type_is_prometheus_text():
    """Test the advertised content type is the text exposition format"""
    assert CONTENT_TYPE.startswith("text/plain")
    assert "version=" in CONTENT_TYPE


@pytest.mark.parametrize(
    "value,expected",
    [
        (86400000, "86400000"),
        (1_000_000, "1000000"),
        (2**53, "9007199254740992"),
        (0, "0"),
        (0.5, "0.5"),
        (float("inf"), "+Inf"),
        (float("nan"), "NaN"),
    ],
)
def test_format_value_keeps_whole_numbers_integral(value, expected):
    """Test whole numbers never switch to exponent notation"""
    assert format_value(value) == expected


def test_encode_large_uptime_as_integer():
    """Test an uptime of one day renders as a plain integer"""
    registry = MetricRegistry()
    registry.gauge(UPTIME_METRIC, UPTIME_HELP).set(86400000)

    text = registry.encode()

    assert "uls_uptime_ms 86400000\n" in text
    assert "e+" not in text


def test_encode_escapes_help_text():
    """Test backslashes and newlines in HELP stay on one line"""
    registry = MetricRegistry()
    registry.gauge("uls_test", "line one\nline \\ two").set(1)

    assert "# HELP uls_test line one\\nline \\\\ two\n" in registry.encode()


def test_encode_matches_prometheus_parser():
    """Test encoded text round-trips through prometheus_client's parser"""
    registry = MetricRegistry()
    registry.gauge(UPTIME_METRIC, UPTIME_HELP).set(123456789)
    registry.gauge(LEASE_METRIC, LEASE_HELP, LEASE_LABELS).labels(
        "1", 'a"b', "h\nx", "d\\e"
    ).set(1)

    samples = parse_samples(registry.encode())

    assert samples["uls_uptime_ms"] == {(): 123456789.0}
    assert samples["uls_license_leased"] == {
        (("lease_domain", "d\\e"), ("lease_hostname", "h\nx"), ("lease_id", "1"), ("lease_user", 'a"b')): 1.0
    }
