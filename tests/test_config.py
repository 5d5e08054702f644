"""Tests for termkeys.config: configuration loading and validation."""

from __future__ import annotations

import json

import pytest

from termkeys.config import (
    DEFAULT_CONFIG,
    _sanitize_json_text,
    load_config,
    validate_config,
)


# ------------------------------------------------------------------
# DEFAULT_CONFIG
# ------------------------------------------------------------------

class TestDefaultConfig:
    """DEFAULT_CONFIG contains all expected keys with correct types."""

    EXPECTED_KEYS = {'fps', 'read_size', 'poll_timeout', 'debug'}

    def test_contains_all_expected_keys(self):
        assert set(DEFAULT_CONFIG.keys()) == self.EXPECTED_KEYS

    def test_defaults_are_valid(self):
        assert validate_config(dict(DEFAULT_CONFIG)) == DEFAULT_CONFIG


# ------------------------------------------------------------------
# validate_config
# ------------------------------------------------------------------

class TestValidateConfig:
    """validate_config normalises input and rejects invalid values."""

    def test_valid_data_passes(self):
        result = validate_config({
            'fps': 60,
            'read_size': 64,
            'poll_timeout': 0.1,
            'debug': True,
        })
        assert result == {'fps': 60, 'read_size': 64, 'poll_timeout': 0.1, 'debug': True}

    def test_fractional_fps_kept(self):
        assert validate_config({'fps': 12.5})['fps'] == 12.5

    def test_numeric_strings_accepted(self):
        result = validate_config({'fps': '24', 'read_size': '16'})
        assert result['fps'] == 24
        assert result['read_size'] == 16

    @pytest.mark.parametrize("value", [0, -5, 241, 'fast', None, True])
    def test_invalid_fps(self, value):
        with pytest.raises(ValueError, match="fps"):
            validate_config({'fps': value})

    @pytest.mark.parametrize("value", [0, 4097, 2.5, 'big'])
    def test_invalid_read_size(self, value):
        with pytest.raises(ValueError, match="read_size"):
            validate_config({'read_size': value})

    @pytest.mark.parametrize("value", [0, 0.0001, 5, 'soon'])
    def test_invalid_poll_timeout(self, value):
        with pytest.raises(ValueError, match="poll_timeout"):
            validate_config({'poll_timeout': value})

    def test_invalid_debug_type(self):
        with pytest.raises(ValueError, match="debug"):
            validate_config({'debug': 'yes'})

    def test_none_returns_defaults(self):
        assert validate_config(None) == DEFAULT_CONFIG

    def test_empty_dict_returns_defaults(self):
        assert validate_config({}) == DEFAULT_CONFIG

    def test_unknown_keys_ignored(self):
        assert 'colour' not in validate_config({'colour': 'red'})


# ------------------------------------------------------------------
# _sanitize_json_text
# ------------------------------------------------------------------

class TestSanitizeJsonText:
    """_sanitize_json_text strips comments and trailing commas."""

    def test_removes_hash_comments(self):
        text = '{\n  # this is a comment\n  "a": 1\n}'
        assert json.loads(_sanitize_json_text(text)) == {"a": 1}

    def test_removes_slash_comments(self):
        text = '{\n  "a": 1 // inline comment\n}'
        assert json.loads(_sanitize_json_text(text)) == {"a": 1}

    def test_removes_trailing_commas(self):
        text = '{\n  "a": 1,\n  "b": 2,\n}'
        assert json.loads(_sanitize_json_text(text)) == {"a": 1, "b": 2}


# ------------------------------------------------------------------
# load_config
# ------------------------------------------------------------------

class TestLoadConfig:
    def test_explicit_path(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'fps': 60}), encoding='utf-8')
        config = load_config(str(path))
        assert config['fps'] == 60
        assert config['read_size'] == DEFAULT_CONFIG['read_size']

    def test_commented_file(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('{\n  "fps": 15, // slow terminal\n  "debug": true,\n}', encoding='utf-8')
        config = load_config(str(path))
        assert config['fps'] == 15
        assert config['debug'] is True

    def test_missing_explicit_path_gives_defaults(self, tmp_path):
        assert load_config(str(tmp_path / 'nope.json')) == DEFAULT_CONFIG

    def test_invalid_values_give_defaults(self, tmp_path, caplog):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'fps': 0}), encoding='utf-8')
        with caplog.at_level('WARNING', logger='termkeys.config'):
            assert load_config(str(path), debug=True) == DEFAULT_CONFIG
        assert 'fps' in caplog.text

    def test_garbage_gives_defaults(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('not json at all', encoding='utf-8')
        assert load_config(str(path)) == DEFAULT_CONFIG

    def test_non_object_gives_defaults(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text('[1, 2]', encoding='utf-8')
        assert load_config(str(path)) == DEFAULT_CONFIG

    def test_user_config_fallback(self, tmp_path, monkeypatch):
        monkeypatch.setenv('HOME', str(tmp_path))
        cfg_dir = tmp_path / '.config' / 'termkeys'
        cfg_dir.mkdir(parents=True)
        (cfg_dir / 'config.json').write_text(json.dumps({'read_size': 8}), encoding='utf-8')
        assert load_config()['read_size'] == 8

    def test_no_user_config(self, tmp_path, monkeypatch):
        monkeypatch.setenv('HOME', str(tmp_path))
        assert load_config() == DEFAULT_CONFIG

    def test_returns_fresh_dict(self, tmp_path):
        config = load_config(str(tmp_path / 'nope.json'))
        config['fps'] = 1
        assert DEFAULT_CONFIG['fps'] == 30
