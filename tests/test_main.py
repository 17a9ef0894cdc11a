"""Tests for the command line entry point (headless actions only)."""

import base64
import gzip

import pytest

from skillradar.__main__ import (
    build_parser,
    decode_shared_argument,
    main,
    open_repository,
    resolve_data_file,
    resolve_session,
)
from skillradar.common.config_store import JsonFileConfigStore
from skillradar.common.settings import AppSettings
from skillradar.core.aggregation import levels_from_source
from skillradar.core.persistence import StateRepository
from skillradar.core.snapshot import encode_snapshot, parse_share_fragment, snapshot_from_store


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def base_args(workdir, *extra):
    return ["--config", str(workdir / "cfg.json"), "--data", str(workdir / "data.json"), *extra]


class TestDecodeSharedArgument:
    def test_accepts_url_fragment_and_token(self, reception_store):
        token = encode_snapshot(snapshot_from_store(reception_store))
        for value in (f"https://example.org/r.html#d={token}", f"#d={token}", f"d={token}", token, f" {token} "):
            assert decode_shared_argument(value).success, value

    def test_rejects_garbage(self):
        assert not decode_shared_argument("https://example.org/r.html#x=1").success
        assert not decode_shared_argument("%%%").success


class TestResolveSession:
    def test_shared_argument_gives_read_only_session(self, workdir, reception_store):
        token = encode_snapshot(snapshot_from_store(reception_store, "Ada"))
        args = build_parser().parse_args(base_args(workdir, "--shared", token))
        config_store = JsonFileConfigStore(args.config)
        session = resolve_session(args, AppSettings(), config_store)
        assert session.read_only
        assert session.subject_name == "Ada"

    def test_bad_shared_argument_falls_back_to_interactive(self, workdir, caplog):
        args = build_parser().parse_args(base_args(workdir, "--shared", "#d=broken"))
        session = resolve_session(args, AppSettings(), JsonFileConfigStore(args.config))
        assert not session.read_only
        assert len(session.source.competencies) == 4  # demo data
        assert "starting interactive mode" in caplog.text

    def test_deeply_nested_shared_token_falls_back_to_interactive(self, workdir):
        nested = base64.urlsafe_b64encode(gzip.compress(b"[" * 200_000)).rstrip(b"=").decode("ascii")
        args = build_parser().parse_args(base_args(workdir, "--shared", f"#d={nested}"))
        session = resolve_session(args, AppSettings(), JsonFileConfigStore(args.config))
        assert not session.read_only

    def test_persisted_data_preferred_over_demo(self, workdir, reception_store):
        StateRepository.open(str(workdir / "data.json")).save(reception_store)
        args = build_parser().parse_args(base_args(workdir))
        session = resolve_session(args, AppSettings(), JsonFileConfigStore(args.config))
        assert [c.name for c in session.source.competencies] == ["Reception"]

    def test_subject_from_settings(self, workdir):
        args = build_parser().parse_args(base_args(workdir))
        session = resolve_session(args, AppSettings(subject_name="Ada"), JsonFileConfigStore(args.config))
        assert session.subject_name == "Ada"

    def test_subject_argument_wins(self, workdir):
        args = build_parser().parse_args(base_args(workdir, "--subject", "Bo"))
        session = resolve_session(args, AppSettings(subject_name="Ada"), JsonFileConfigStore(args.config))
        assert session.subject_name == "Bo"


class TestResolveDataFile:
    def test_data_argument_wins(self, workdir):
        args = build_parser().parse_args(base_args(workdir))
        settings = AppSettings(data_file="elsewhere.json")
        assert resolve_data_file(args, settings) == str(workdir / "data.json")

    def test_falls_back_to_settings(self, workdir):
        args = build_parser().parse_args(["--config", str(workdir / "cfg.json")])
        assert resolve_data_file(args, AppSettings(data_file="elsewhere.json")) == "elsewhere.json"


class TestOpenRepository:
    def test_shares_config_store_when_same_file(self, workdir, reception_store):
        config_store = JsonFileConfigStore(str(workdir / "cfg.json"))
        config_store.put("settings", log_level="INFO")
        open_repository(config_store, str(workdir / "cfg.json")).save(reception_store)

        reloaded = JsonFileConfigStore(str(workdir / "cfg.json"))
        assert reloaded.get("settings") == {"log_level": "INFO"}
        assert reloaded.exists("skill-data")


class TestHeadlessMain:
    def test_share_url(self, workdir, capsys):
        assert main(base_args(workdir, "--share-url")) == 0
        url = capsys.readouterr().out.strip()
        assert url.startswith("skillradar.html#d=")
        result = parse_share_fragment(url)
        assert result.success
        assert [entry.level for entry in levels_from_source(result.payload)] == [5.8, 5.6, 3.9, 5.1]

    def test_share_url_uses_configured_base(self, workdir, capsys):
        JsonFileConfigStore(str(workdir / "cfg.json")).put("settings", share_base_url="https://example.org/r.html")
        assert main(base_args(workdir, "--share-url")) == 0
        assert capsys.readouterr().out.startswith("https://example.org/r.html#d=")

    def test_export(self, workdir, capsys):
        target = workdir / "overview.html"
        assert main(base_args(workdir, "--export", str(target), "--auto-print", "--subject", "Ada")) == 0
        assert capsys.readouterr().out.strip() == str(target)
        document = target.read_text(encoding="utf-8")
        assert "const AUTO_PRINT = true;" in document
        assert "Skill overview: Ada" in document

    def test_export_failure_returns_nonzero(self, workdir, capsys):
        assert main(base_args(workdir, "--export", str(workdir))) == 1
        assert "Export failed" in capsys.readouterr().err

    def test_headless_actions_do_not_write_data(self, workdir):
        main(base_args(workdir, "--share-url"))
        assert not (workdir / "data.json").exists()
