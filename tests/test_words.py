import random

from imposter.words import FALLBACK_WORDS, WordList, load_words


def test_load_words_cleans_the_file(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("# comment\npizza\n\nice cream\nRobot\nPIZZA\n", encoding="utf-8")
    assert load_words(str(path)) == ["PIZZA", "ROBOT"]


def test_missing_file_falls_back(tmp_path):
    assert load_words(str(tmp_path / "nope.txt")) == FALLBACK_WORDS


def test_empty_file_falls_back(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("# only comments\n", encoding="utf-8")
    assert load_words(str(path)) == FALLBACK_WORDS


def test_pick_comes_from_the_list():
    words = WordList(["A", "B", "C"], random.Random(3))
    assert len(words) == 3
    assert {words.pick() for _ in range(50)} <= {"A", "B", "C"}


def test_from_file(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("castle\n", encoding="utf-8")
    assert WordList.from_file(str(path)).pick() == "CASTLE"


def test_empty_list_is_kept():
    assert len(WordList([])) == 0
