from pathlib import Path

import pytest
from typer.testing import CliRunner

from santra.cli import app
from santra.models.idea import IdeaPayload
from santra.services import config as config_module
from santra.services.idea_store import IdeaStore

runner = CliRunner()


@pytest.fixture
def ideas_dir(monkeypatch, tmp_path: Path) -> Path:
    path = tmp_path / "ideas"
    monkeypatch.setenv("IDEAS_PATH", str(path))
    config_module.reload_config()
    yield path
    monkeypatch.undo()
    config_module.reload_config()


def _seed(ideas_dir: Path) -> None:
    store = IdeaStore()
    store.save(IdeaPayload(id="a", title="Apple Orchard Plan", refined="Plant apples.", tags=["farming"]))
    store.save(IdeaPayload(id="b", title="Cider Press", refined="Press apples.", connections=["apple orchard"]))


def test_list_on_empty_directory(ideas_dir: Path) -> None:
    result = runner.invoke(app, ["list"])

    assert result.exit_code == 0
    assert "No ideas yet" in result.output


def test_list_json(ideas_dir: Path) -> None:
    _seed(ideas_dir)

    result = runner.invoke(app, ["list", "--json"])

    assert result.exit_code == 0
    assert '"Apple Orchard Plan"' in result.output
    assert '"Cider Press"' in result.output


def test_show_missing_idea_fails(ideas_dir: Path) -> None:
    result = runner.invoke(app, ["show", "missing"])

    assert result.exit_code == 1
    assert "Idea not found" in result.output


def test_graph_writes_svg(ideas_dir: Path, tmp_path: Path) -> None:
    _seed(ideas_dir)
    target = tmp_path / "graph.svg"

    result = runner.invoke(app, ["graph", "--svg", str(target), "--highlight", "a"])

    assert result.exit_code == 0
    assert "2 nodes, 1 connection" in result.output
    svg = target.read_text(encoding="utf-8")
    assert svg.startswith("<svg")
    assert 'class="node highlighted" data-id="a"' in svg


def test_submit_requires_text(ideas_dir: Path) -> None:
    result = runner.invoke(app, ["submit", "   "])

    assert result.exit_code == 1
