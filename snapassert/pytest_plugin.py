"""pytest integration.

Install with the ``pytest`` extra (``pip install snapassert[pytest]``).
Enable it from a conftest with ``pytest_plugins = ["snapassert.pytest_plugin"]``
and use the ``checker`` fixture::

    def test_title(checker, page):
        checker.check(checker.that(lambda: page.title() == "Home", "page.title() == 'Home'"))
        checker.check(checker.snapshot("home/menu", lambda: page.menu_items()))

Failed or errored checks fail the test once it has finished running.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from snapassert.checker import Checker
from snapassert.models.config import AssertConfig
from snapassert.models.report import Report
from snapassert.reporter.sinks import CollectingSink, FanOutSink, LoggingSink, write_json_report
from snapassert.snapshot.store import SnapshotStore

logger = logging.getLogger(__name__)

CONFIG_KEY = pytest.StashKey[AssertConfig]()
STORE_KEY = pytest.StashKey[SnapshotStore]()
REPORTS_KEY = pytest.StashKey[list[Report]]()
TEST_SINK_KEY = pytest.StashKey[CollectingSink]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("snapassert", "retrying assertions and snapshots")
    group.addoption("--snapshot-dir", default=None, help="Directory holding snapshot files")
    group.addoption("--assert-timeout", type=float, default=None,
                    help="Seconds to keep retrying a failing assertion")
    group.addoption("--snapshot-config", default=None, help="JSON config file for snapassert")
    group.addoption("--assert-report", default=None, help="Write all assertion reports to this JSON file")
    parser.addini("snapshot_dir", "Directory holding snapshot files", default="")
    parser.addini("assert_timeout", "Seconds to keep retrying a failing assertion", default="")


def build_config(config: pytest.Config) -> AssertConfig:
    """Merge the config file, ini values and command-line options."""
    config_file = config.getoption("snapshot_config")
    base = AssertConfig.load(config_file) if config_file else AssertConfig()
    data = base.model_dump()

    snapshot_dir = config.getoption("snapshot_dir") or config.getini("snapshot_dir")
    if snapshot_dir:
        data["snapshot_dir"] = snapshot_dir
    if not Path(data["snapshot_dir"]).is_absolute():
        data["snapshot_dir"] = str(config.rootpath / data["snapshot_dir"])

    timeout = config.getoption("assert_timeout")
    if timeout is None and config.getini("assert_timeout"):
        timeout = float(config.getini("assert_timeout"))
    if timeout is not None:
        data["timeout_seconds"] = timeout
    return AssertConfig(**data)


def pytest_configure(config: pytest.Config) -> None:
    assert_config = build_config(config)
    config.stash[CONFIG_KEY] = assert_config
    config.stash[STORE_KEY] = SnapshotStore(assert_config.snapshot_path)
    config.stash[REPORTS_KEY] = []


@pytest.fixture(scope="session")
def assert_config(pytestconfig: pytest.Config) -> AssertConfig:
    return pytestconfig.stash[CONFIG_KEY]


@pytest.fixture
def checker(request: pytest.FixtureRequest, assert_config: AssertConfig) -> Checker:
    """A Checker whose failures fail the requesting test."""
    test_sink = CollectingSink()
    request.node.stash[TEST_SINK_KEY] = test_sink
    session_reports = _SessionSink(request.config.stash[REPORTS_KEY], request.node.nodeid)
    return Checker(
        assert_config,
        sink=FanOutSink(test_sink, session_reports, LoggingSink(logger)),
        store=request.config.stash[STORE_KEY],
    )


class _SessionSink:
    def __init__(self, reports: list[Report], nodeid: str):
        self.reports = reports
        self.nodeid = nodeid

    def emit(self, report: Report) -> None:
        self.reports.append(report.model_copy(update={"message": report.message or self.nodeid}))


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item):
    result = yield
    sink = item.stash.get(TEST_SINK_KEY, None)
    if sink is not None and sink.failures:
        pytest.fail("\n\n".join(r.render() for r in sink.failures), pytrace=False)
    return result


def pytest_terminal_summary(terminalreporter, exitstatus: int, config: pytest.Config) -> None:
    store = config.stash.get(STORE_KEY, None)
    if store is None or not store.baselines_written:
        return
    terminalreporter.section("snapshots written")
    for path in store.baselines_written:
        terminalreporter.write_line(f" > Snapshot written : {path.resolve()}")


def pytest_unconfigure(config: pytest.Config) -> None:
    report_path = config.getoption("assert_report", None)
    reports = config.stash.get(REPORTS_KEY, None)
    if report_path and reports is not None:
        write_json_report(reports, Path(report_path))
