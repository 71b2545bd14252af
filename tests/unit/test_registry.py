"""
Tests for the variable name registry.
"""
import warnings

import pytest

from satisfiability import Bool, DuplicateName, DuplicateNameWarning, Int, NameRegistry
from satisfiability.expr import default_registry, reset_registry, set_duplicate_name_warning


def test_register_reports_duplicate_on_second_call():
    reg = NameRegistry(warn_duplicates=False)

    assert reg.register("x") is False
    assert reg.register("x") is True
    assert "x" in reg
    assert len(reg) == 1


def test_reset_allows_clean_registration():
    reg = NameRegistry(warn_duplicates=False)
    reg.register("x")

    reg.reset()

    assert "x" not in reg
    assert reg.register("x") is False


def test_duplicate_warns_by_default():
    Bool("x")

    with pytest.warns(DuplicateNameWarning, match="Duplicate variable name x"):
        Bool("x")


def test_first_registration_never_warns():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        Bool("fresh")
        Int(2, "arr")


def test_duplicate_silent_when_disabled():
    set_duplicate_name_warning(False)
    Bool("x")

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        Bool("x")


def test_duplicate_fatal():
    set_duplicate_name_warning(True, fatal=True)
    Bool("x")

    with pytest.raises(DuplicateName):
        Bool("x")


def test_array_elements_registered():
    Bool(2, "z")

    assert "z_1" in default_registry()
    with pytest.warns(DuplicateNameWarning):
        Bool("z_2")


def test_explicit_registry_handle():
    reg = NameRegistry(warn_duplicates=False)

    Bool("x", registry=reg)

    assert "x" in reg
    assert "x" not in default_registry()


def test_reset_registry():
    Bool("x")
    reset_registry()

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        Bool("x")
