import json

import pandas as pd

from chef_reduce.cli.reduce_cli import main


def test_reduce_command_writes_output(make_recipe, write_recipe, tmp_path, capsys):
    src = write_recipe(make_recipe({"root": ["baz"], "baz": [], "bar": []}, members=["root"]))
    out = tmp_path / "reduced.json"
    assert main(["-q", "reduce", str(src), str(out), "--report"]) == 0
    report = json.loads(capsys.readouterr().out)
    assert report["keep"] == ["baz", "root"]
    assert report["dropped_manifests"] == ["bar/Cargo.toml"]
    data = json.loads(out.read_text(encoding="utf-8"))
    assert len(data["skeleton"]["manifests"]) == 3


def test_reduce_command_reports_error_chain(make_recipe, write_recipe, tmp_path, capsys):
    recipe = make_recipe({"root": []}, members=["root"])
    recipe.skeleton.lock_file = "[[package]\n"
    src = write_recipe(recipe)
    out = tmp_path / "reduced.json"
    assert main(["-q", "reduce", str(src), str(out)]) == 3
    err = capsys.readouterr().err
    assert "error: lock file is not valid toml" in err
    assert "caused by:" in err
    assert not out.exists()


def test_reduce_command_dependency_table_flag(make_recipe, write_recipe, tmp_path):
    recipe = make_recipe({"root": [], "testkit": []}, members=["root"])
    recipe.skeleton.manifests[1].contents += '\n[dev-dependencies]\ntestkit = { path = "../testkit" }\n'
    src = write_recipe(recipe)
    out = tmp_path / "reduced.json"
    args = ["-q", "reduce", str(src), str(out), "--dependency-table", "dependencies", "--dependency-table", "dev-dependencies"]
    assert main(args) == 0
    paths = [m["relative_path"] for m in json.loads(out.read_text(encoding="utf-8"))["skeleton"]["manifests"]]
    assert "testkit/Cargo.toml" in paths


def test_invalid_config_returns_usage_error(make_recipe, write_recipe, tmp_path):
    src = write_recipe(make_recipe({"root": []}, members=["root"]))
    cfg = tmp_path / "bad.yml"
    cfg.write_text("nope: 1\n", encoding="utf-8")
    assert main(["-q", "reduce", str(src), str(tmp_path / "o.json"), "--config", str(cfg)]) == 2


def test_no_command_prints_help():
    assert main([]) == 2


def test_batch_command(make_recipe, write_recipe, tmp_path):
    write_recipe(make_recipe({"root": ["baz"], "baz": [], "bar": []}, members=["root"]), "good.json")
    broken = make_recipe({"root": []}, members=["root"])
    broken.skeleton.manifests = broken.skeleton.manifests[1:]
    write_recipe(broken, "broken.json")
    spec = tmp_path / "spec.yml"
    spec.write_text(
        "defaults:\n"
        "  settings:\n"
        "    json_indent: 2\n"
        "runs:\n"
        "  - name: good\n"
        "    input: good.json\n"
        "    output: out/good.json\n"
        "  - name: broken\n"
        "    input: broken.json\n"
        "    output: out/broken.json\n",
        encoding="utf-8",
    )
    summary = tmp_path / "summary.csv"
    assert main(["-q", "batch", "--spec", str(spec), "--output", str(summary)]) == 5

    reduced = json.loads((tmp_path / "out" / "good.json").read_text(encoding="utf-8"))
    assert [m["relative_path"] for m in reduced["skeleton"]["manifests"]] == [
        "Cargo.toml", "root/Cargo.toml", "baz/Cargo.toml",
    ]
    assert not (tmp_path / "out" / "broken.json").exists()

    df = pd.read_csv(summary)
    assert list(df["name"]) == ["good", "broken"]
    good = df.set_index("name").loc["good"]
    assert good["members"] == 3
    assert good["kept"] == 2
    assert good["dropped_manifests"] == 1


def test_batch_fail_fast(make_recipe, write_recipe, tmp_path):
    broken = make_recipe({"root": []}, members=["root"])
    broken.skeleton.manifests = broken.skeleton.manifests[1:]
    write_recipe(broken, "broken.json")
    spec = tmp_path / "spec.json"
    spec.write_text(json.dumps([{"input": "broken.json", "output": "out.json"}]), encoding="utf-8")
    assert main(["-q", "batch", "--spec", str(spec), "--fail-fast"]) == 3


def test_batch_bad_spec(tmp_path):
    spec = tmp_path / "spec.yml"
    spec.write_text("runs: 3\n", encoding="utf-8")
    assert main(["-q", "batch", "--spec", str(spec)]) == 2
