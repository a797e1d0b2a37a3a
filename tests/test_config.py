"""Tests for configuration loading and hot reload."""

import pytest

from sqlreviewer.config import ConfigStore, ReviewConfig, load_config
from sqlreviewer.exceptions import InvalidConfigError


class TestDefaults:
    def test_defaults(self):
        config = load_config()
        assert config == ReviewConfig()
        assert config.max_text_cols_count == 2
        assert config.max_varchar_length == 1022
        assert config.allow_charsets == ("utf8", "utf8mb4")
        assert config.explain_sql_report_type == "pretty"
        assert config.report_type == "markdown"

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ReviewConfig().report_type = "json"


class TestYaml:
    def test_yaml_file(self, tmp_path):
        path = tmp_path / "sqlreviewer.yaml"
        path.write_text(
            "ignore-rules:\n  - COL.001\n  - 'RES*'\n"
            "max_varchar_length: 255\n"
            "allow_engines: [innodb, rocksdb]\n"
            "explain-sql-report-type: fingerprint\n"
        )
        config = load_config(path)
        assert config.ignore_rules == ("COL.001", "RES*")
        assert config.max_varchar_length == 255
        assert config.allow_engines == ("innodb", "rocksdb")
        assert config.explain_sql_report_type == "fingerprint"

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("no_such_setting: 1\n")
        with pytest.raises(InvalidConfigError, match="no_such_setting"):
            load_config(path)

    def test_bad_value(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("max_text_cols_count: many\n")
        with pytest.raises(InvalidConfigError):
            load_config(path)

    def test_bad_sample_style(self):
        with pytest.raises(InvalidConfigError):
            load_config(explain_sql_report_type="fancy")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(InvalidConfigError):
            load_config(path)

    def test_blacklist_file(self, tmp_path):
        bl = tmp_path / "blacklist.txt"
        bl.write_text("# generated\n^select 1$\n\nsakila.audit\n")
        path = tmp_path / "c.yaml"
        path.write_text(f"blacklist: [users]\nblacklist_file: {bl}\n")
        assert load_config(path).blacklist == ("users", "^select 1$", "sakila.audit")

    def test_relative_blacklist_file_next_to_config(self, tmp_path, monkeypatch):
        conf_dir = tmp_path / "conf"
        conf_dir.mkdir()
        (conf_dir / "blacklist.txt").write_text("audit_log\n")
        path = conf_dir / "c.yaml"
        path.write_text("blacklist-file: blacklist.txt\n")
        monkeypatch.chdir(tmp_path)
        assert load_config(path).blacklist == ("audit_log",)

    def test_missing_blacklist_file(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("blacklist_file: nowhere.txt\n")
        with pytest.raises(InvalidConfigError, match="blacklist_file"):
            load_config(path)

    def test_dialect(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("dialect: postgres\n")
        assert load_config(path).dialect == "postgres"

    def test_unknown_dialect(self):
        with pytest.raises(InvalidConfigError) as excinfo:
            load_config(dialect="mysqll")
        assert excinfo.value.key == "dialect"

    def test_supersede_rules(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("supersede_rules:\n  IDX.001: CLA.004\n  SUB.001: [ARG.005]\n")
        config = load_config(path)
        assert config.supersede_rules == {"IDX.001": ("CLA.004",), "SUB.001": ("ARG.005",)}


class TestPrecedence:
    def test_env_over_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "c.yaml"
        path.write_text("report_type: text\nignore_rules: [CLA]\n")
        monkeypatch.setenv("SQLREVIEWER_REPORT_TYPE", "json")
        monkeypatch.setenv("SQLREVIEWER_IGNORE_RULES", "COL, RES")
        config = load_config(path)
        assert config.report_type == "json"
        assert config.ignore_rules == ("COL", "RES")

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("SQLREVIEWER_REPORT_TYPE", "json")
        assert load_config(report_type="lint").report_type == "lint"

    def test_none_override_ignored(self):
        assert load_config(report_type=None).report_type == "markdown"

    def test_timeout_off(self, monkeypatch):
        monkeypatch.setenv("SQLREVIEWER_PARSE_TIMEOUT", "off")
        assert load_config().parse_timeout is None


class TestConfigStore:
    def test_reload_swaps_snapshot(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("report_type: text\n")
        store = ConfigStore(path)
        before = store.current()

        path.write_text("report_type: json\n")
        after = store.reload()

        assert before.report_type == "text"
        assert after.report_type == "json"
        assert store.current() is after
        assert before is not after

    def test_failed_reload_keeps_current(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("report_type: text\n")
        store = ConfigStore(path)
        path.write_text("bogus: 1\n")
        with pytest.raises(InvalidConfigError):
            store.reload()
        assert store.current().report_type == "text"
