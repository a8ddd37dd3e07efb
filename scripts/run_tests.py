import sys
import datetime
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from mdcraft.version_info import __version__

TESTS_DIR = PROJECT_ROOT / 'tests'
RESULTS_LOG = TESTS_DIR / 'latest_results.log'


class ResultsLog:
    """pytest plugin recording one line per test outcome, then a tally."""

    def __init__(self, path: Path):
        self.path = path
        self.lines = []
        self.counts = {}

    def pytest_runtest_logreport(self, report):
        # Setup/teardown only count when they fail or skip the test
        if report.when != 'call' and report.passed:
            return
        outcome = report.outcome if report.when == 'call' else f"{report.outcome} ({report.when})"
        self.counts[outcome] = self.counts.get(outcome, 0) + 1
        self.lines.append(f"{outcome.upper():<20} {report.nodeid} [{report.duration:.3f}s]")
        if report.failed:
            self.lines.append(f"    {report.longreprtext.splitlines()[-1] if report.longreprtext else ''}")

    def pytest_sessionfinish(self, session, exitstatus):
        tally = ', '.join(f"{n} {outcome}" for outcome, n in sorted(self.counts.items())) or 'no tests'
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write(f"mdcraft v{__version__} test run {datetime.datetime.now():%Y-%m-%d %H:%M:%S}\n\n")
            f.write('\n'.join(self.lines) + '\n\n')
            f.write(f"{tally}; exit status {int(exitstatus)}\n")


def main(argv=None):
    """Run the suite; extra arguments (e.g. '-k editing') go straight to pytest."""
    print(f"mdcraft v{__version__}: results log at {RESULTS_LOG}")
    return pytest.main(['-ra', str(TESTS_DIR), *(argv or [])], plugins=[ResultsLog(RESULTS_LOG)])


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
