"""
Tests for the word store: decoding, merge rules and bundle sync.
"""

import json

import pytest

from core.word_store import Word, WordStore, merge_words, words_from_json


def _flags(words):
    return [(w.text, w.is_learned) for w in words]


class TestWordRecord:
    def test_from_dict_defaults(self):
        w = Word.from_dict({"word": "cat"})
        assert w.text == "cat"
        assert w.meaning == ""
        assert w.is_learned is False

    def test_round_trip_keys(self):
        w = Word("cat", "a small feline", "The cat sat.", "/kat/", True)
        assert w.to_dict() == {
            "word": "cat",
            "meaning": "a small feline",
            "example": "The cat sat.",
            "pronunciation": "/kat/",
            "isLearned": True,
        }

    def test_identity_ignores_id(self):
        assert Word("cat") == Word("cat")
        assert Word("cat").id != Word("cat").id

    def test_missing_word_rejected(self):
        with pytest.raises(ValueError):
            Word.from_dict({"meaning": "no text"})

    def test_non_list_payload_rejected(self):
        with pytest.raises(ValueError, match="array"):
            words_from_json({"word": "cat"})


class TestMerge:
    def test_flag_carried_over_and_extra_dropped(self):
        bundle = [Word("cat", is_learned=False)]
        persisted = [Word("cat", is_learned=True), Word("dog", is_learned=True)]
        assert _flags(merge_words(bundle, persisted)) == [("cat", True)]

    def test_new_bundle_word_defaults_unlearned(self):
        merged = merge_words([Word("cat"), Word("owl")], [Word("cat", is_learned=True)])
        assert _flags(merged) == [("cat", True), ("owl", False)]

    def test_content_comes_from_bundle(self):
        merged = merge_words(
            [Word("cat", meaning="new meaning")],
            [Word("cat", meaning="old meaning", is_learned=True)],
        )
        assert merged[0].meaning == "new meaning"

    def test_duplicate_bundle_texts_collapse(self):
        merged = merge_words([Word("cat", meaning="first"), Word("cat", meaning="second")], [])
        assert len(merged) == 1
        assert merged[0].meaning == "first"


class TestSync:
    def test_merge_example(self, tmp_path, word_file):
        bundle = word_file(tmp_path / "bundle.json", ["cat"])
        persisted = word_file(tmp_path / "words.json", ["cat", "dog"], learned={"cat", "dog"})
        words = WordStore(bundle, persisted).sync()
        assert _flags(words) == [("cat", True)]

    def test_persisted_file_rewritten(self, tmp_path, word_file):
        bundle = word_file(tmp_path / "bundle.json", ["cat"])
        persisted = word_file(tmp_path / "words.json", ["cat", "dog"], learned={"cat"})
        WordStore(bundle, persisted).sync()
        data = json.loads(persisted.read_text(encoding="utf-8"))
        assert [(d["word"], d["isLearned"]) for d in data] == [("cat", True)]

    def test_missing_persisted_uses_bundle(self, store):
        words = store.sync()
        assert len(words) == 10
        assert not any(w.is_learned for w in words)
        assert store.words_path.exists()

    def test_corrupt_persisted_uses_bundle(self, store):
        store.words_path.parent.mkdir(parents=True)
        store.words_path.write_text("{not json", encoding="utf-8")
        words = store.sync()
        assert len(words) == 10

    def test_bundle_learned_flags_ignored(self, tmp_path, word_file):
        bundle = word_file(tmp_path / "bundle.json", ["cat"], learned={"cat"})
        words = WordStore(bundle, tmp_path / "words.json").sync()
        assert _flags(words) == [("cat", False)]

    def test_unreadable_bundle_is_noop(self, tmp_path, word_file):
        persisted = word_file(tmp_path / "words.json", ["cat"], learned={"cat"})
        before = persisted.read_text(encoding="utf-8")
        assert WordStore(tmp_path / "missing.json", persisted).sync() is None
        assert persisted.read_text(encoding="utf-8") == before

    def test_sync_is_idempotent(self, tmp_path, word_file):
        bundle = word_file(tmp_path / "bundle.json", ["cat", "owl", "emu"])
        persisted = word_file(tmp_path / "words.json", ["owl", "yak"], learned={"owl"})
        store = WordStore(bundle, persisted)
        first = store.sync()
        second = store.sync()
        assert first == second

    def test_delete_missing_file_is_fine(self, store):
        store.delete()
        assert not store.words_path.exists()
