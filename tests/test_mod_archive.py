import json
import runpy
import sys
import zipfile
from pathlib import Path

import pytest

from modlang.mod_archive import (
    LangResource,
    ModMetadata,
    extract_translatable_files,
    file_type,
    find_mods,
    has_locale_file,
    inject_translations,
    is_language_file,
    read_mod_metadata,
    summarize_mod,
    target_path,
)


def test_is_language_file():
    assert is_language_file("assets/examplemod/lang/en_us.json")
    assert is_language_file("lang/en_us.json")
    assert is_language_file("data/examplemod/patchouli_books/guide/en_us/entries/intro.json")
    assert is_language_file("data/examplemod/advancements/root.json")
    assert not is_language_file("assets/examplemod/models/item/gem.json")
    assert not is_language_file("assets/examplemod/lang/en_us.lang")


def test_file_type():
    assert file_type("assets/x/lang/en_us.json") == "lang"
    assert file_type("data/x/patchouli_books/g/en_us/a.json") == "patchouli"
    assert file_type("data/x/quests/q.json") == "quest"
    assert file_type("assets/x/texts/t.json") == "unknown"


def test_target_path():
    assert target_path("assets/x/lang/en_us.json") == "assets/x/lang/tr_tr.json"
    assert target_path("data/x/patchouli_books/g/en_us/entries/a.json") == "data/x/patchouli_books/g/tr_tr/entries/a.json"
    assert target_path("assets/x/lang/en_us.json", target_locale="de_de") == "assets/x/lang/de_de.json"


def test_find_mods(tmp_path):
    (tmp_path / "sub").mkdir()
    for name in ("a.jar", "sub/b.zip", "notes.txt"):
        (tmp_path / name).write_bytes(b"")
    assert [p.name for p in find_mods(tmp_path)] == ["a.jar", "b.zip"]
    assert [p.name for p in find_mods(tmp_path, recursive=False)] == ["a.jar"]


def test_read_mod_metadata_fabric(make_jar):
    jar = make_jar({"fabric.mod.json": {"id": "examplemod", "name": "Example Mod", "version": "1.2.0"}})
    assert read_mod_metadata(jar) == ModMetadata("examplemod", "Example Mod", "1.2.0", "fabric")


def test_read_mod_metadata_forge(make_jar):
    toml = 'modLoader="javafml"\n[[mods]]\nmodId="examplemod"\nversion="2.0"\ndisplayName="Example Mod"\n'
    jar = make_jar({"META-INF/mods.toml": toml})
    assert read_mod_metadata(jar) == ModMetadata("examplemod", "Example Mod", "2.0", "forge")

    legacy = make_jar({"mcmod.info": [{"modid": "oldmod", "name": "Old Mod", "version": "0.9"}]}, name="old.jar")
    assert read_mod_metadata(legacy) == ModMetadata("oldmod", "Old Mod", "0.9", "forge")

    assert read_mod_metadata(make_jar({"readme.txt": "hi"}, name="bare.jar")) is None


def test_extract_translatable_files_skips_invalid_json(make_jar):
    jar = make_jar(
        {
            "assets/examplemod/lang/en_us.json": {"item.examplemod.gem": "Diamond Gem"},
            "assets/examplemod/lang/de_de.json": {"item.examplemod.gem": "Diamantjuwel"},
            "assets/examplemod/models/item/gem.json": {"parent": "item/generated"},
            "assets/broken/lang/en_us.json": "{oops",
            "data/examplemod/patchouli_books/guide/en_us/entries/intro.json": {"name": "Intro"},
        }
    )
    resources = extract_translatable_files(jar)
    assert [(r.path, r.type) for r in resources] == [
        ("assets/examplemod/lang/en_us.json", "lang"),
        ("data/examplemod/patchouli_books/guide/en_us/entries/intro.json", "patchouli"),
    ]


def test_inject_translations_replaces_existing_target(make_jar, tmp_path):
    jar = make_jar(
        {
            "assets/examplemod/lang/en_us.json": {"k": "Stone"},
            "assets/examplemod/lang/tr_tr.json": {"k": "eski"},
            "assets/examplemod/textures/gem.png": "png",
        }
    )
    res = LangResource(path="assets/examplemod/lang/en_us.json", content='{"k": "Stone"}', type="lang")
    res.translated = '{"k": "Taş"}'
    skipped = LangResource(path="assets/other/lang/en_us.json", content="{}")

    out = tmp_path / "out" / jar.name
    written = inject_translations(jar, [res, skipped], out)
    assert written == ["assets/examplemod/lang/tr_tr.json"]

    with zipfile.ZipFile(out) as zf:
        names = zf.namelist()
        assert names.count("assets/examplemod/lang/tr_tr.json") == 1
        assert "assets/examplemod/textures/gem.png" in names
        assert json.loads(zf.read("assets/examplemod/lang/tr_tr.json").decode("utf-8")) == {"k": "Taş"}


def test_inject_translations_removes_partial_archive(make_jar, tmp_path, monkeypatch):
    jar = make_jar({"assets/examplemod/lang/en_us.json": {"k": "Stone"}})
    res = LangResource(path="assets/examplemod/lang/en_us.json", content='{"k": "Stone"}', type="lang")
    res.translated = '{"k": "Taş"}'

    def disk_full(self, *args, **kwargs):
        raise OSError("No space left on device")

    monkeypatch.setattr(zipfile.ZipFile, "writestr", disk_full)
    out = tmp_path / "out" / jar.name
    with pytest.raises(OSError):
        inject_translations(jar, [res], out)
    assert list((tmp_path / "out").iterdir()) == []


def test_has_locale_file(make_jar):
    jar = make_jar(
        {
            "assets/examplemod/lang/en_us.json": {"k": "Stone"},
            "assets/examplemod/lang/tr_tr.json": {"k": "Taş"},
        }
    )
    assert has_locale_file(jar, "en_us")
    assert has_locale_file(jar, "tr_tr")
    assert not has_locale_file(jar, "de_de")


def test_summarize_mod(make_jar):
    jar = make_jar(
        {
            "fabric.mod.json": {"id": "examplemod", "name": "Example Mod", "version": "1.2.0"},
            "assets/examplemod/lang/en_us.json": {"a": "Stone", "b": "Diamond", "c": "Copper"},
            "data/examplemod/patchouli_books/guide/en_us/entries/intro.json": {"name": "Intro"},
        }
    )
    s = summarize_mod(jar)
    assert (s.name, s.mod_id, s.version, s.loader) == ("Example Mod", "examplemod", "1.2.0", "fabric")
    assert s.has_source
    assert not s.has_target
    assert s.key_count == 3
    assert s.size == jar.stat().st_size


def test_summarize_mod_without_metadata(make_jar):
    s = summarize_mod(make_jar({"readme.txt": "hi"}, name="bare.jar"))
    assert s.name == "bare"
    assert s.mod_id is None
    assert not s.has_source
    assert s.key_count == 0


def test_mod_info_script(make_jar, monkeypatch, capsys):
    jar = make_jar(
        {
            "META-INF/mods.toml": 'modId="examplemod"\nversion="2.0"\ndisplayName="Example Mod"\n',
            "assets/examplemod/lang/en_us.json": {"a": "Stone"},
            "assets/examplemod/lang/tr_tr.json": {"a": "Taş"},
        }
    )
    script = Path(__file__).resolve().parents[1] / "scripts" / "mod_info.py"
    monkeypatch.setattr(sys, "argv", ["mod_info.py", str(jar)])
    runpy.run_path(str(script), run_name="__main__")
    out = capsys.readouterr().out
    assert "Example Mod (examplemod 2.0, forge)" in out
    assert "tr_tr: yes" in out
    assert "keys: 1" in out
