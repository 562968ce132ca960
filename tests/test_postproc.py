from modlang.postproc import has_untranslated_content, quality_check, validate_translation


def test_format_mismatch_falls_back_to_original():
    assert quality_check("Deals %s damage", "Hasar verir") == "Deals %s damage"
    ok, issues = validate_translation("Deals %s damage", "Hasar verir")
    assert not ok
    assert any("Format specifier" in x for x in issues)


def test_empty_candidate_falls_back():
    assert quality_check("Deals %s damage", "  ") == "Deals %s damage"
    assert validate_translation("Hi", "") == (False, ["Empty translation"])


def test_structurally_valid_candidate_is_accepted():
    assert quality_check("Deals %s damage", "%s hasar verir") == "%s hasar verir"
    # wording is never judged
    assert quality_check("Diamond", "Banana") == "Banana"


def test_has_untranslated_content():
    assert has_untranslated_content("Diamond sword")
    assert not has_untranslated_content("Elmas kılıç")
    assert not has_untranslated_content("123 !!")
    assert not has_untranslated_content("")
