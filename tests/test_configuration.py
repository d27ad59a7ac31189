from decimal import Decimal

import pytest
from omegaconf import OmegaConf

from appconfigurator.configuration import Configuration, MapConfiguration


@pytest.fixture
def config() -> MapConfiguration:
    return MapConfiguration(
        {
            "name": "svc",
            "db": {"host": "localhost", "port": "5432", "pool": {"size": 8}},
            "hosts": "a, b ,c",
            "ports": [8080, 8081],
            "mask": "0x1F",
            "flags": "0b101",
            "enabled": "Yes",
            "ratio": "0.25",
        }
    )


def test_satisfies_configuration_protocol(config):
    assert isinstance(config, Configuration)


def test_keys_are_dotted_leaf_paths(config):
    assert set(config.keys()) == {
        "name",
        "db.host",
        "db.port",
        "db.pool.size",
        "hosts",
        "ports",
        "mask",
        "flags",
        "enabled",
        "ratio",
    }


def test_subset_strips_prefix(config):
    db = config.subset("db")

    assert db.get_str("host") == "localhost"
    assert db.subset("pool").get_int("size") == 8
    assert not db.contains_key("name")


def test_subset_of_unknown_prefix_is_empty(config):
    assert config.subset("cache").is_empty()
    assert config.subset("na").is_empty()


def test_missing_keys_read_as_none(config):
    assert config.get_int("missing") is None
    assert config.get_bool("missing") is None
    assert config.get_str("missing") is None
    assert config.get_list("missing") is None


def test_integers_accept_hex_and_binary(config):
    assert config.get_int("db.port") == 5432
    assert config.get_int("mask") == 31
    assert config.get_int("flags") == 5


def test_non_numeric_text_is_rejected(config):
    with pytest.raises(ValueError):
        config.get_int("name")


@pytest.mark.parametrize("text,expected", [("Yes", True), ("off", False), ("T", True)])
def test_booleans_accept_common_words(text, expected):
    assert MapConfiguration({"flag": text}).get_bool("flag") is expected


def test_unknown_boolean_word_is_rejected():
    with pytest.raises(ValueError, match="is not a boolean"):
        MapConfiguration({"flag": "maybe"}).get_bool("flag")


def test_decimal_and_float(config):
    assert config.get_decimal("ratio") == Decimal("0.25")
    assert config.get_float("ratio") == 0.25


def test_strings_are_split_into_lists(config):
    assert config.get_str_list("hosts") == ["a", "b", "c"]
    assert config.get_str_list("name") == ["svc"]


def test_list_values_are_kept_whole(config):
    assert config.get_list("ports") == [8080, 8081]
    assert config.get_str_list("ports") == ["8080", "8081"]


def test_scalar_accessor_reads_first_list_element(config):
    assert config.get_int("ports") == 8080


def test_interpolations_are_resolved():
    config = MapConfiguration(
        {"host": "localhost", "url": "http://${host}:${db.port}", "db": {"port": 5432}}
    )

    assert config.get_str("url") == "http://localhost:5432"


def test_subset_resolves_interpolations_against_the_whole_tree():
    config = MapConfiguration(
        OmegaConf.create({"host": "localhost", "db": {"host": "${host}"}})
    )

    assert config.subset("db").get_str("host") == "localhost"
    assert list(config.subset("db").keys()) == ["host"]


def test_dictconfig_is_used_as_is():
    source = OmegaConf.create({"db": {"port": 5432}})
    config = MapConfiguration(source)
    source.db.port = 6543

    assert config.get_int("db.port") == 6543
