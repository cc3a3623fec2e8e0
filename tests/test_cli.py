"""Test the command line interface."""

import logging

import pytest

from domain_crawler import cli
from domain_crawler.core.crawl_engine import CrawlEngine, CrawlResult

from fakes import FakeFetcher, page


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def fake_engine(monkeypatch):
    """Route the CLI's engine to an in-memory site."""
    created = []
    site = {
        "https://example.com/": page("/a"),
        "https://example.com/a": page("/"),
    }

    def factory(config):
        engine = CrawlEngine(config, fetcher=FakeFetcher(pages=site))
        created.append(engine)
        return engine

    monkeypatch.setattr(cli, "CrawlEngine", factory)
    return created


class TestArguments:
    """Test argument parsing."""

    @pytest.mark.parametrize("threads", ["0", "-2", "four", "1.5"])
    def test_invalid_thread_count(self, threads, capsys):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["https://example.com/", threads])
        assert excinfo.value.code == 2
        assert "thread count" in capsys.readouterr().err

    @pytest.mark.parametrize("seed", ["example.com", "ftp://example.com/", "/relative"])
    def test_invalid_start_url(self, seed, fake_engine, capsys):
        with pytest.raises(SystemExit) as excinfo:
            cli.main([seed, "2"])
        assert excinfo.value.code == 2
        err = capsys.readouterr().err
        assert "usage: domain-crawler" in err
        assert "http(s)" in err
        assert fake_engine == []

    def test_missing_arguments(self):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["https://example.com/"])
        assert excinfo.value.code == 2

    def test_parser_options(self):
        args = cli.build_parser().parse_args(
            ["https://example.com/", "3", "--interval", "0.5", "--strict-domain", "-v"]
        )
        assert args.threads == 3
        assert args.interval == 0.5
        assert args.strict_domain
        assert args.verbose
        assert args.config is None


class TestCrawlCommand:
    """Test full CLI runs."""

    def test_prints_unique_page_count(self, fake_engine, capsys):
        code = cli.main(["https://example.com/", "2", "--interval", "0.05"])

        assert code == cli.EXIT_OK
        out = capsys.readouterr().out
        assert "--- Crawling Finished ---" in out
        assert "Total unique pages visited: 2" in out
        assert fake_engine[0].config.workers == 2

    def test_strict_flag_reaches_engine(self, fake_engine):
        cli.main(["https://example.com/", "1", "--interval", "0.05", "--strict-domain"])
        assert fake_engine[0].config.resolution.strict_host_boundary is True

    def test_config_file(self, fake_engine, tmp_path):
        path = tmp_path / "crawler.yaml"
        path.write_text("crawler:\n  monitor_interval_seconds: 0.05\n")

        code = cli.main(["https://example.com/", "2", "-c", str(path)])

        assert code == cli.EXIT_OK
        assert fake_engine[0].config.monitor_interval_seconds == 0.05

    def test_bad_config_file(self, fake_engine, tmp_path, capsys):
        code = cli.main(["https://example.com/", "2", "-c", str(tmp_path / "missing.yaml")])

        assert code == cli.EXIT_ERROR
        assert "Configuration error" in capsys.readouterr().err
        assert fake_engine == []

    def test_wrongly_typed_config_value(self, fake_engine, tmp_path, capsys):
        path = tmp_path / "crawler.yaml"
        path.write_text("fetch:\n  connect_timeout_seconds: ten\n")

        code = cli.main(["https://example.com/", "2", "-c", str(path)])

        assert code == cli.EXIT_ERROR
        assert "connect_timeout_seconds" in capsys.readouterr().err
        assert fake_engine == []

    def test_interrupted_run(self, monkeypatch, capsys):
        class AbortedEngine:
            def __init__(self, config):
                pass

            def run(self, seed_url):
                return CrawlResult(seed_url=seed_url, visited=frozenset({seed_url}),
                                   runtime_seconds=0.1, workers_started=1, workers_failed=0,
                                   stop_requests=1, monitor_polls=0, aborted=True)

        monkeypatch.setattr(cli, "CrawlEngine", AbortedEngine)

        code = cli.main(["https://example.com/", "1"])

        assert code == cli.EXIT_INTERRUPTED
        assert "Total unique pages visited: 1" in capsys.readouterr().out

    def test_log_file(self, fake_engine, tmp_path):
        log_file = tmp_path / "logs" / "crawl.log"

        cli.main(["https://example.com/", "1", "--interval", "0.05", "--log-file", str(log_file)])

        assert log_file.exists()
        assert "Injected seed URL" in log_file.read_text()
