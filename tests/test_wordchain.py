import pytest

import cli
import wordchain
from pathgen import ConfigurationError
from wordchain import Dashboard, SearchResult, filter_words, is_valid_chain, load_words
from conftest import TOY_WORDS, TOY_CHAIN


class FakeCorpus:
    def __init__(self, words=None):
        self._words = words

    def words(self):
        if self._words is None:
            raise LookupError("Resource words not found.")
        return self._words


# =============================================================================
# Validation
# =============================================================================
def test_valid_chain():
    assert is_valid_chain(TOY_CHAIN)
    assert is_valid_chain(["kmnop"])
    assert is_valid_chain([])


def test_repeated_word_is_invalid():
    assert not is_valid_chain(["abcd", "abcd"])


def test_key_mismatch_is_invalid():
    assert not is_valid_chain(["xabcy", "zcdeq"])
    assert not is_valid_chain(list(reversed(TOY_CHAIN)))


# =============================================================================
# Loading
# =============================================================================
def test_load_words_filters_by_length(words_file):
    assert load_words(5, words_file) == TOY_WORDS
    assert load_words(4, words_file) == ["abcd"]


def test_load_words_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_words(5, str(tmp_path / "missing.txt"))


def test_load_words_undecodable_file(tmp_path):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"xabcy\n\xff\xfe\xfabad\n")
    with pytest.raises(ConfigurationError):
        load_words(5, str(path))


def test_load_words_lowercases_file_words(tmp_path):
    path = tmp_path / "mixed.txt"
    path.write_text("XABCY ybcdz Xabcy YBCDZ\n")
    assert load_words(5, str(path)) == ["xabcy", "ybcdz"]


def test_cli_undecodable_file(tmp_path, capsys):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"\xff\xfe")
    assert cli.main(["--mode", "single", "--words-file", str(path)]) == 1
    assert "Error:" in capsys.readouterr().err


def test_load_words_without_matches(words_file):
    with pytest.raises(ConfigurationError):
        load_words(9, words_file)


def test_filter_words_rejects_short_lengths():
    with pytest.raises(ConfigurationError):
        filter_words(["ab"], 2)


def test_load_words_from_corpus(monkeypatch):
    monkeypatch.setattr(wordchain, "nltk_words", FakeCorpus(["Xabcy", "ybcdz", "ab", "xabcy"]))
    assert load_words(5) == ["xabcy", "ybcdz"]


def test_missing_corpus_is_a_configuration_error(monkeypatch):
    monkeypatch.setattr(wordchain, "nltk_words", FakeCorpus())
    with pytest.raises(ConfigurationError):
        load_words(5)


# =============================================================================
# Dashboard
# =============================================================================
def test_format_table():
    results = [
        SearchResult("hill-climbing", 5, 6, TOY_CHAIN, attempts=12, search_seconds=0.5,
                     total_seconds=0.75, params={"max_attempts": 10}, valid=True),
        SearchResult("hill-climbing", 6, 3, ["abcdef"], params={"max_attempts": 10}, valid=False),
    ]
    table = Dashboard.format_table(results)
    lines = table.splitlines()
    assert "Word Length" in lines[1] and "Max Attempts" in lines[1] and "Correct" in lines[1]
    assert "0.5000" in lines[3] and "True" in lines[3]
    assert "False" in lines[4]
    assert len({len(line) for line in lines}) == 1


def test_sweep_status_names_next_length():
    status = Dashboard.sweep_status(2, [4, 5, 6, 7])
    assert "2/4 lengths" in status
    assert "solving length 6" in status
    assert "estimating..." in status


def test_sweep_status_when_finished():
    status = Dashboard.sweep_status(3, [4, 5, 6], start_time=0.0)
    assert "3/3 lengths" in status and "done" in status
    assert "·" not in status


def test_simulate_sweeps_lengths(words_file, capsys):
    results = wordchain.simulate("greedy", words_file=words_file, min_length=4, max_length=5)
    assert [r.word_length for r in results] == [4, 5]
    assert results[1].path == TOY_CHAIN
    assert all(r.valid for r in results)
    assert "2 word lengths solved" in capsys.readouterr().out


def test_simulate_rejects_empty_range(words_file):
    with pytest.raises(ConfigurationError):
        wordchain.simulate(words_file=words_file, min_length=6, max_length=5)


# =============================================================================
# CLI
# =============================================================================
def test_cli_single(words_file, capsys):
    code = cli.main(["--mode", "single", "--length", "5", "--strategy", "dfs", "--words-file", words_file])
    out = capsys.readouterr().out
    assert code == 0
    assert " -> ".join(TOY_CHAIN) in out
    assert "Correct: True" in out


def test_cli_simulate(words_file, capsys):
    code = cli.main(["--strategy", "annealing", "--words-file", words_file, "--min-length", "5",
                     "--max-length", "5", "--temperature", "20", "--cooling-factor", "0.5", "--seed", "1"])
    out = capsys.readouterr().out
    assert code == 0
    assert "Cooling Factor" in out


def test_cli_reports_configuration_errors(tmp_path, capsys):
    code = cli.main(["--mode", "single", "--words-file", str(tmp_path / "missing.txt")])
    assert code == 1
    assert "Error:" in capsys.readouterr().err


def test_cli_rejects_bad_cooling_factor(words_file, capsys):
    code = cli.main(["--mode", "single", "--words-file", words_file, "--cooling-factor", "1.2"])
    assert code == 1
    assert "cooling_factor" in capsys.readouterr().err
