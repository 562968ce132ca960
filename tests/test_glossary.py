import pytest

from modlang.glossary import (
    _pluralize,
    apply_dictionary,
    build_dictionary,
    glossary_to_map,
    load_dictionary,
)


def test_longest_term_wins():
    table = build_dictionary({"rod": "çubuk", "fishing rod": "olta"})
    out = apply_dictionary("a fishing rod", table)
    assert "olta" in out
    assert "çubuk" not in out


def test_case_insensitive_match_keeps_capital():
    table = build_dictionary({"fishing rod": "olta"})
    assert apply_dictionary("Fishing Rod", table) == "Olta"
    assert apply_dictionary("FISHING ROD", table) == "Olta"


def test_word_boundaries():
    table = build_dictionary({"rod": "çubuk"})
    assert apply_dictionary("Rodent rods", table) == "Rodent çubuk"


def test_plural_variants_do_not_override_explicit_entries():
    table = build_dictionary({"glass": "cam", "glasses": "gözlük", "berry": "dut"})
    assert apply_dictionary("glasses", table) == "gözlük"
    assert apply_dictionary("berries", table) == "dut"


def test_plural_variants_can_be_disabled():
    table = build_dictionary({"diamond": "elmas"}, plural_variants=False)
    assert apply_dictionary("diamonds", table) == "diamonds"


def test_deletion_consumes_following_blank():
    table = build_dictionary({"the": "", "sword": "kılıç"})
    assert apply_dictionary("the sword", table) == "kılıç"
    assert [e.source for e in table] == ["the", "sword", "swords"]


def test_pluralize():
    assert _pluralize("berry") == ["berries"]
    assert _pluralize("key") == ["keys"]
    assert _pluralize("box") == ["boxes"]
    assert _pluralize("torch") == ["torches"]


def test_glossary_to_map_skips_drafts():
    rows = [{"term": "ore", "translation": "cevher"}, {"term": "ingot", "translation": ""}]
    assert glossary_to_map(rows) == {"ore": "cevher"}


def test_load_dictionary_json_and_csv(tmp_path):
    json_path = tmp_path / "terms.json"
    json_path.write_text('{"ore": "cevher", "a": ""}', encoding="utf-8")
    assert load_dictionary(json_path, merge_defaults=False) == {"ore": "cevher", "a": ""}

    csv_path = tmp_path / "terms.csv"
    csv_path.write_text("term,translation\nore,cevher\ningot,\n", encoding="utf-8")
    assert load_dictionary(csv_path, merge_defaults=False) == {"ore": "cevher"}

    merged = load_dictionary(csv_path)
    assert merged["diamond"] == "elmas"
    assert merged["ore"] == "cevher"


def test_load_dictionary_rejects_non_object(tmp_path):
    path = tmp_path / "terms.json"
    path.write_text('["ore"]', encoding="utf-8")
    with pytest.raises(ValueError):
        load_dictionary(path, merge_defaults=False)
