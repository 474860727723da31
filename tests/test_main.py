import pytest

from wordlesolver.main import run

from conftest import ANSWERS, DICTIONARY_LINES

@pytest.fixture
def resources(tmp_path):
    dictionary = tmp_path / "dictionary.txt"
    dictionary.write_text("\n".join(DICTIONARY_LINES) + "\n")
    answers = tmp_path / "answers.txt"
    answers.write_text("\n".join(ANSWERS))
    return ["--set", "paths.dictionary", str(dictionary),
            "--set", "paths.answers", str(answers)]

def test_run_benchmark(resources, tmp_path, capsys):
    entropy_log = tmp_path / "entropy.csv"
    run(["-i", "escore", "-m", "4", "--set", "paths.entropy_log", str(entropy_log)] + resources)
    out = capsys.readouterr().out
    assert "guessed 'crane' in" in out
    assert "average score: " in out
    assert entropy_log.exists()

def test_run_precompute(resources, tmp_path, capsys):
    cache_file = tmp_path / "cache.npy"
    run(["-i", "precalc", "--precompute",
         "--set", "paths.pattern_cache", str(cache_file),
         "--set", "paths.entropy_log", "none"] + resources)
    assert cache_file.exists()
    assert "average score: " in capsys.readouterr().out

def test_run_config_error(resources, capsys):
    with pytest.raises(SystemExit) as excinfo:
        run(["--set", "game.max_turns", "lots"] + resources)
    assert excinfo.value.code == 1
    assert "game.max_turns" in capsys.readouterr().err

def test_run_malformed_dictionary(tmp_path, capsys):
    dictionary = tmp_path / "dictionary.txt"
    dictionary.write_text("tares 5\ncrane\n")
    with pytest.raises(SystemExit) as excinfo:
        run(["--set", "paths.dictionary", str(dictionary)])
    assert excinfo.value.code == 1
    assert "dictionary.txt:2" in capsys.readouterr().err

def test_run_precompute_without_cache_path(resources, capsys):
    with pytest.raises(SystemExit) as excinfo:
        run(["--precompute", "--set", "paths.pattern_cache", "none"] + resources)
    assert excinfo.value.code == 1
    assert "paths.pattern_cache" in capsys.readouterr().err
