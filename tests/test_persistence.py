import json
import os
import stat
from pathlib import Path

import pytest

from confstore.store import (
    Configuration,
    ConfigurationError,
    ParseError,
    SerializationError,
    SerializationOptions,
)


def test_save_then_load_in_fresh_store(populated_store: Configuration, store_file: Path):
    populated_store.save_to_file(store_file)

    fresh = Configuration()
    fresh.load_from_file(store_file)
    assert fresh.exists("a") is True
    assert fresh.get_value("a") == (1, True)
    assert fresh.get_value("b") == ("x", True)


def test_saved_file_is_plain_json_object(populated_store: Configuration, store_file: Path):
    populated_store.save(store_file)
    assert store_file.read_text(encoding="utf-8") == '{"a":1,"b":"x"}'


def test_bound_file_round_trip(populated_store: Configuration, store_file: Path):
    populated_store.set_file_name(store_file)
    populated_store.save()

    fresh = Configuration(file_name=store_file)
    fresh.load()
    assert fresh.to_dict() == {"a": 1, "b": "x"}


def test_save_without_bound_file_performs_no_write(populated_store: Configuration, mocker):
    os_open = mocker.patch("confstore.store.configuration.os.open")

    with pytest.raises(ConfigurationError, match="file name not set"):
        populated_store.save()

    os_open.assert_not_called()


def test_load_without_bound_file(populated_store: Configuration):
    with pytest.raises(ConfigurationError):
        populated_store.load()
    assert populated_store.to_dict() == {"a": 1, "b": "x"}


def test_empty_file_name_counts_as_unbound(populated_store: Configuration):
    populated_store.set_file_name("")
    assert populated_store.file_name is None
    with pytest.raises(ConfigurationError):
        populated_store.save()


def test_explicit_path_does_not_rebind(populated_store: Configuration, tmp_path: Path):
    bound = tmp_path / "bound.json"
    other = tmp_path / "other.json"
    populated_store.set_file_name(bound)

    populated_store.save(other)

    assert populated_store.file_name == str(bound)
    assert other.exists()
    assert not bound.exists()


def test_save_overwrites_whole_file(store: Configuration, store_file: Path):
    store_file.write_text('{"old": "value", "padding": "' + "x" * 200 + '"}', encoding="utf-8")
    store.set_value("new", 1)
    store.save(store_file)
    assert json.loads(store_file.read_text(encoding="utf-8")) == {"new": 1}


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_save_creates_file_with_0644(populated_store: Configuration, store_file: Path):
    old_umask = os.umask(0o022)
    try:
        populated_store.save(store_file)
    finally:
        os.umask(old_umask)
    assert stat.S_IMODE(store_file.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_save_honours_configured_file_mode(store_file: Path):
    conf = Configuration(options=SerializationOptions(file_mode=0o600))
    conf.set_value("secret", "s")
    old_umask = os.umask(0o022)
    try:
        conf.save(store_file)
    finally:
        os.umask(old_umask)
    assert stat.S_IMODE(store_file.stat().st_mode) == 0o600


def test_serialization_error_leaves_existing_file_untouched(store: Configuration, store_file: Path):
    store_file.write_text('{"keep": true}', encoding="utf-8")
    store.set_value("bad", object())

    with pytest.raises(SerializationError):
        store.save(store_file)

    assert store_file.read_text(encoding="utf-8") == '{"keep": true}'


def test_load_missing_file_propagates_os_error(populated_store: Configuration, tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        populated_store.load(tmp_path / "missing.json")
    assert populated_store.to_dict() == {"a": 1, "b": "x"}


def test_save_into_missing_directory_propagates_os_error(populated_store: Configuration, tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        populated_store.save(tmp_path / "nope" / "config.json")


def test_load_malformed_file_keeps_mapping(populated_store: Configuration, store_file: Path):
    store_file.write_text("not json", encoding="utf-8")
    with pytest.raises(ParseError):
        populated_store.load(store_file)
    assert populated_store.to_dict() == {"a": 1, "b": "x"}


def test_load_non_object_file_keeps_mapping(populated_store: Configuration, store_file: Path):
    store_file.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ParseError):
        populated_store.load(store_file)
    assert populated_store.get_value("b") == ("x", True)


def test_load_replaces_previous_entries(populated_store: Configuration, store_file: Path):
    store_file.write_text('{"c": {"d": [1, 2]}}', encoding="utf-8")
    populated_store.load(store_file)
    assert populated_store.keys() == ["c"]
    assert populated_store.get_value("c") == ({"d": [1, 2]}, True)


def test_non_ascii_round_trip_through_file(store: Configuration, store_file: Path):
    store.set_value("名称", "沪深300")
    store.save(store_file)

    fresh = Configuration()
    fresh.load(store_file)
    assert fresh.get_value("名称") == ("沪深300", True)


@pytest.mark.parametrize("encoding", ["latin-1", "ascii", "no-such-codec"])
def test_unencodable_text_leaves_existing_file_untouched(store_file: Path, encoding):
    store_file.write_text('{"keep": true}', encoding="utf-8")
    conf = Configuration(options=SerializationOptions(encoding=encoding, ensure_ascii=False))
    conf.set_value("名称", "配置")

    with pytest.raises(SerializationError):
        conf.save(store_file)

    assert store_file.read_text(encoding="utf-8") == '{"keep": true}'


def test_ensure_ascii_output_saves_under_ascii_encoding(store_file: Path):
    conf = Configuration(options=SerializationOptions(encoding="ascii", ensure_ascii=True))
    conf.set_value("名称", "配置")
    conf.save(store_file)

    fresh = Configuration(options=SerializationOptions(encoding="ascii"))
    fresh.load(store_file)
    assert fresh.get_value("名称") == ("配置", True)


def test_load_with_unknown_encoding_raises_parse_error(populated_store: Configuration, store_file: Path):
    store_file.write_text('{"c": 3}', encoding="utf-8")
    populated_store.options.encoding = "no-such-codec"

    with pytest.raises(ParseError):
        populated_store.load(store_file)
    assert populated_store.to_dict() == {"a": 1, "b": "x"}


def test_empty_explicit_path_is_not_the_bound_file(populated_store: Configuration, store_file: Path):
    populated_store.set_file_name(store_file)

    with pytest.raises(FileNotFoundError):
        populated_store.save_to_file("")
    with pytest.raises(FileNotFoundError):
        populated_store.load_from_file("")

    assert not store_file.exists()
