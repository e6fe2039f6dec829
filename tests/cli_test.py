import argparse
import json

import pytest
import yaml

from nimq import cli
from nimq.core.q_table import QTableRepository
from nimq.core.storage import JsonFileKeyValueStore


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    for name in ("NIMQ_STORAGE_PATH", "NIMQ_SEED", "NIMQ_EPISODES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

    path = tmp_path / "nimq.yml"
    path.write_text(
        yaml.safe_dump(
            {
                "q_learning": {"episodes": 300, "start_piles": [1, 2, 2]},
                "storage": {"path": str(tmp_path / "storage.json")},
                "seed": 5,
            }
        ),
        encoding="utf-8",
    )
    return str(path)


def stored_repository(tmp_path) -> QTableRepository:
    return QTableRepository(JsonFileKeyValueStore(str(tmp_path / "storage.json")))


def test_no_arguments_prints_help():
    with pytest.raises(SystemExit) as exc:
        cli.main([])
    assert exc.value.code == 1


def test_init_writes_config(tmp_path):
    path = tmp_path / "generated.yml"
    cli.main(["init", "--path", str(path)])
    assert yaml.safe_load(path.read_text(encoding="utf-8"))["storage"]["key"] == "nim-qtable"


def test_train_saves_table(config_path, tmp_path):
    cli.main(["train", "--config_path", config_path, "--version", "test"])

    repository = stored_repository(tmp_path)
    assert repository.load() is not None
    assert repository.load_metadata().episodes == 300
    assert repository.load_metadata().version.startswith("test_")


def test_train_with_missing_config_fails(tmp_path):
    with pytest.raises(SystemExit) as exc:
        cli.main(["train", "--config_path", str(tmp_path / "nope.yml")])
    assert exc.value.code == 1


def test_export_then_import(config_path, tmp_path):
    cli.main(["train", "--config_path", config_path, "--episodes", "50"])
    exported = tmp_path / "table.json"
    cli.main(["export", "--config_path", config_path, "--output", str(exported)])

    table = json.loads(exported.read_text(encoding="utf-8"))
    assert "[1,2,2]" in table

    stored_repository(tmp_path).clear()
    cli.main(["import", "--config_path", config_path, "--input", str(exported)])
    assert stored_repository(tmp_path).load().serialize() == json.dumps(table, separators=(",", ":"))


def test_export_without_table_fails(config_path, tmp_path):
    with pytest.raises(SystemExit):
        cli.main(["export", "--config_path", config_path, "--output", str(tmp_path / "out.json")])


def test_import_rejects_malformed_file(config_path, tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{nope", encoding="utf-8")
    with pytest.raises(SystemExit):
        cli.main(["import", "--config_path", config_path, "--input", str(bad)])


def test_evaluate_trains_on_first_use(config_path, tmp_path, capsys):
    cli.main(["evaluate", "--config_path", config_path, "--games", "20"])

    assert "games=20" in capsys.readouterr().out
    assert stored_repository(tmp_path).load() is not None


def test_play_rejects_bad_input_and_quits(config_path):
    args = argparse.Namespace(config_path=config_path, seed=None, difficulty="easy", ai_first=False)
    replies = iter(["hello", "9 9", "q"])
    output = []

    assert cli.handle_play_command(args, input_fn=lambda prompt: next(replies), output_fn=output.append)
    assert output.count("Invalid move, try again.") == 2
    assert output[-1] == "Game abandoned."


def test_play_full_game(config_path):
    args = argparse.Namespace(config_path=config_path, seed=3, difficulty="hard", ai_first=True)
    output = []

    def first_legal_move(prompt):
        piles_line = [line for line in output if line.startswith("Piles:")][-1]
        counts = [int(chunk.split()[1]) for chunk in piles_line[len("Piles: "):].split("  ")]
        pile = next(i for i, c in enumerate(counts) if c > 0)
        return f"{pile + 1} 1"

    assert cli.handle_play_command(args, input_fn=first_legal_move, output_fn=output.append)
    assert output[-1] in ("You win!", "Computer wins!")
