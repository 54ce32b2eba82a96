"""
Console walkthrough, blocking and async.
"""
import pytest

from apps.samples.models import Sample
from apps.samples.scripts import demo
from datarepo.database.sql_driver import SQLDriver


@pytest.mark.parametrize("extra_args", [[], ["--async"]])
def test_demo_walkthrough(tmp_path, capsys, extra_args):
    url = f"sqlite:///{tmp_path / 'demo.db'}"

    assert demo.main(["--database-url", url, "--reset", *extra_args]) == 0

    out = capsys.readouterr().out
    assert "# of records : 3" in out
    assert "2 | Fox" in out
    assert "2 | Dog" in out

    driver = SQLDriver(url)
    with driver.new_session() as session:
        assert session.get(Sample, 1) is None
        assert session.get(Sample, 2).name == "Dog"
        assert session.get(Sample, 3).name == "Cat"
    driver.engine.dispose()


def test_run_scenario_reports_results(session):
    from apps.samples.service import SampleService

    lines = []
    result = demo.run_scenario(SampleService(session), echo=lines.append)

    assert result == {"deleted": 1, "count": 2, "names": ["Dog", "Cat"]}
    assert lines[0] == "# of records : 3\n"
