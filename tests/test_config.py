"""Tests for configuration loading and validation."""

import io
from datetime import timedelta

import pytest

from openstack_cloudprovider.config import (
    Config,
    GlobalOpts,
    load_config,
    parse_duration,
    read_config,
    validate_config,
)
from openstack_cloudprovider.exceptions import ConfigError

FULL_CONFIG = """
[Global]
auth-url = https://keystone.example.com:5000/v3
username = demo
user-id = 0123abcd
password = "s3cr#t pass"
api-key = key-1
tenant-id = tenant-1
tenant-name = demo-project
domain-id = default
domain-name = Default
region = RegionOne

[LoadBalancer]
subnet-id = 6937f8fa-858d-4bc9-a3a5-18d2c957166a
floating-network-id = 9b1e5f36-7d3d-4f4e-9b0a-2a1f5c0b6f11
lb-method = ROUND_ROBIN
create-monitor = yes
monitor-delay = 1m30s
monitor-timeout = 500ms
monitor-max-retries = 3

[Route]
router-id = router-1
hostname-override

[Logging]
level = DEBUG
format = text
"""


def _read(text: str) -> Config:
    return read_config(io.StringIO(text))


class TestReadConfig:
    def test_full_config(self):
        config = _read(FULL_CONFIG)
        g = config.global_opts
        assert g.auth_url == "https://keystone.example.com:5000/v3"
        assert g.username == "demo"
        assert g.user_id == "0123abcd"
        assert g.password == "s3cr#t pass"
        assert g.tenant_name == "demo-project"
        assert g.domain_name == "Default"
        assert g.region == "RegionOne"

        lb = config.load_balancer
        assert lb.subnet_id == "6937f8fa-858d-4bc9-a3a5-18d2c957166a"
        assert lb.lb_method == "ROUND_ROBIN"
        assert lb.create_monitor is True
        assert lb.monitor_delay == timedelta(seconds=90)
        assert lb.monitor_timeout == timedelta(milliseconds=500)
        assert lb.monitor_max_retries == 3

        assert config.route.router_id == "router-1"
        assert config.route.hostname_override is True
        assert config.logging.format == "text"

    def test_none_stream_raises(self):
        with pytest.raises(ConfigError, match="no OpenStack cloud provider config file given"):
            read_config(None)

    def test_empty_stream_gives_defaults(self):
        assert _read("") == Config()

    def test_unknown_sections_and_keys_ignored(self):
        config = _read("[Global]\nregion = r1\nflavor = m1.small\n[BlockStorage]\nbs-version = v2\n")
        assert config.global_opts == GlobalOpts(region="r1")

    def test_names_are_case_insensitive(self):
        config = _read("[global]\nAuth-URL = https://k\n[LOADBALANCER]\nSubnet_Id = s1\n")
        assert config.global_opts.auth_url == "https://k"
        assert config.load_balancer.subnet_id == "s1"

    def test_comments(self):
        config = _read("; leading comment\n[Global]\n# another\nregion = r1 ; trailing\n")
        assert config.global_opts.region == "r1"

    def test_last_value_wins(self):
        assert _read("[Global]\nregion = r1\nregion = r2\n").global_opts.region == "r2"

    def test_malformed_raises(self):
        with pytest.raises(ConfigError, match="Malformed"):
            _read("region = r1\n")

    def test_invalid_duration_raises(self):
        with pytest.raises(ConfigError, match="monitor-delay"):
            _read("[LoadBalancer]\nmonitor-delay = soon\n")

    def test_invalid_boolean_raises(self):
        with pytest.raises(ConfigError, match="create-monitor"):
            _read("[LoadBalancer]\ncreate-monitor = maybe\n")

    def test_negative_retries_raises(self):
        with pytest.raises(ConfigError, match=">= 0"):
            _read("[LoadBalancer]\nmonitor-max-retries = -1\n")

    def test_env_var_interpolation(self, monkeypatch):
        monkeypatch.setenv("TEST_OS_PASSWORD", "from-env")
        assert _read("[Global]\npassword = ${TEST_OS_PASSWORD}\n").global_opts.password == "from-env"

    def test_env_var_missing_raises(self, monkeypatch):
        monkeypatch.delenv("SURELY_MISSING_VAR", raising=False)
        with pytest.raises(ConfigError, match="SURELY_MISSING_VAR"):
            _read("[Global]\npassword = ${SURELY_MISSING_VAR}\n")

    def test_config_is_frozen(self):
        config = _read("[Global]\nregion = r1\n")
        with pytest.raises(AttributeError):
            config.global_opts.region = "r2"  # type: ignore[misc]


class TestLoadConfig:
    def test_loads_file(self, tmp_path):
        path = tmp_path / "cloud.conf"
        path.write_text("[Global]\nauth-url = https://k\n")
        assert load_config(path).global_opts.auth_url == "https://k"

    def test_missing_file_raises(self):
        with pytest.raises(ConfigError, match="not found"):
            load_config("/nonexistent/cloud.conf")


class TestValidateConfig:
    def test_requires_auth_url(self):
        with pytest.raises(ConfigError, match="auth-url"):
            validate_config(Config())

    def test_invalid_logging_format(self):
        with pytest.raises(ConfigError, match="format"):
            validate_config(_read("[Global]\nauth-url = https://k\n[Logging]\nformat = xml\n"))

    def test_invalid_logging_level(self):
        with pytest.raises(ConfigError, match="level"):
            validate_config(_read("[Global]\nauth-url = https://k\n[Logging]\nlevel = LOUD\n"))

    def test_valid(self):
        validate_config(_read(FULL_CONFIG))


class TestParseDuration:
    @pytest.mark.parametrize("text, expected", [
        ("5s", timedelta(seconds=5)),
        ("0", timedelta(0)),
        ("1h", timedelta(hours=1)),
        ("1.5h", timedelta(minutes=90)),
        ("2m3s", timedelta(minutes=2, seconds=3)),
        ("250ms", timedelta(milliseconds=250)),
        ("100us", timedelta(microseconds=100)),
        ("-3s", timedelta(seconds=-3)),
    ])
    def test_valid(self, text, expected):
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["", "5", "s", "5 s", "5x", "abc", "-"])
    def test_invalid(self, text):
        with pytest.raises(ConfigError, match="Invalid duration"):
            parse_duration(text)

    def test_out_of_range(self):
        with pytest.raises(ConfigError, match="Invalid duration"):
            parse_duration("99999999999999999h")

    def test_out_of_range_in_config(self):
        with pytest.raises(ConfigError, match=r"\[LoadBalancer\] monitor-delay: Invalid duration"):
            _read("[LoadBalancer]\nmonitor-delay = 99999999999999999h\n")
