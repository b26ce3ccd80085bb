import json

from dfamin.main import build_arg_parser, main

DFA = {
    "name": "demo",
    "states": ["q1", "q2", "q3", "q4"],
    "alphabet": ["0", "1"],
    "start_state": "q1",
    "accept_states": ["q2", "q3"],
    "transitions": {
        "q1": {"0": "q2", "1": "q3"},
        "q2": {"0": "q3", "1": "q2"},
        "q3": {"0": "q3", "1": "q2"},
        "q4": {"0": "q2", "1": "q3"},
    },
}


def _input(tmp_path, data=DFA):
    path = tmp_path / "demo.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_parser_defaults() -> None:
    args = build_arg_parser().parse_args(["in.json"])
    assert args.output is None
    assert args.max_states > 0
    assert not args.verbose


def test_prints_table(tmp_path, capsys) -> None:
    assert main([_input(tmp_path)]) == 0

    out = capsys.readouterr().out
    assert "Original DFA loaded: demo" in out
    assert "demo__MIN" in out
    assert "S0 {q2,q3}*" in out
    assert "Removed unreachable: 1" in out


def test_writes_output(tmp_path, capsys) -> None:
    out_path = tmp_path / "min.json"

    assert main([_input(tmp_path), "-o", str(out_path), "--name", "small"]) == 0

    data = json.loads(out_path.read_text(encoding="utf-8"))
    assert data["name"] == "small"
    assert data["states"] == ["S0", "S1"]


def test_writes_plot(tmp_path) -> None:
    png = tmp_path / "plots" / "min.png"
    assert main([_input(tmp_path), "--plot", str(png)]) == 0
    assert png.exists()


def test_reports_construction_errors(tmp_path, capsys) -> None:
    assert main([_input(tmp_path), "--max-states", "2"]) == 1
    assert "Error" in capsys.readouterr().err


def test_reports_unknown_start(tmp_path, capsys) -> None:
    assert main([_input(tmp_path, dict(DFA, start_state="q9"))]) == 1
    assert "q9" in capsys.readouterr().err


def test_reports_missing_file(tmp_path, capsys) -> None:
    assert main([str(tmp_path / "missing.json")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_rejects_bad_limits(tmp_path, capsys) -> None:
    assert main([_input(tmp_path), "--max-states", "0"]) == 2


def test_reports_malformed_transitions(tmp_path, capsys) -> None:
    data = dict(DFA, transitions={"q1": None})
    assert main([_input(tmp_path, data)]) == 1
    assert "transitions of 'q1'" in capsys.readouterr().err


def test_reports_unwritable_output(tmp_path, capsys) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    assert main([_input(tmp_path), "-o", str(blocker / "min.json")]) == 1
    assert "cannot write" in capsys.readouterr().err


def test_reports_unwritable_plot(tmp_path, capsys) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    assert main([_input(tmp_path), "--plot", str(blocker / "min.png")]) == 1
    assert "cannot write" in capsys.readouterr().err
