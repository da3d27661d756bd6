import pytest

from llvm_typeid import DescriptorError, ResolutionError, TypeIDError, TypeSpecError
from llvm_typeid.errors import REGISTRY, Category, ErrorMessage, _register, lookup, raise_error


def test_category_picks_exception_class():
    with pytest.raises(DescriptorError):
        raise_error("TE0005")
    with pytest.raises(ResolutionError):
        raise_error("TE0012", name="Node")
    with pytest.raises(ResolutionError):
        raise_error("TE0020", type="void")
    with pytest.raises(TypeSpecError):
        raise_error("TE0040", text="x", detail="y")


def test_message_carries_code_and_text():
    with pytest.raises(TypeIDError) as excinfo:
        raise_error("TE0012", name="Node")
    assert excinfo.value.code == "TE0012"
    assert excinfo.value.text == "struct 'Node' contains itself by value"
    assert str(excinfo.value) == "TE0012: struct 'Node' contains itself by value"


def test_missing_format_key():
    with pytest.raises(KeyError) as excinfo:
        raise_error("TE0012")
    # str(KeyError) is the repr of its message, so read the argument itself
    assert excinfo.value.args[0].startswith("TE0012 needs 'name' to format")


def test_unknown_code():
    with pytest.raises(KeyError) as excinfo:
        raise_error("TE9999")
    assert excinfo.value.args[0] == "unknown error code: TE9999"


def test_lookup():
    message = lookup("TE0014")
    assert message.category is Category.RESOLUTION
    assert message.format(type="S[2]", element="%\"S\"") == "array 'S[2]' has incomplete element type '%\"S\"'"


def test_duplicate_code_rejected():
    with pytest.raises(ValueError, match="error code TE0001 is already registered"):
        _register(ErrorMessage("TE0001", "again", Category.DESCRIPTOR))


def test_codes_are_unique_and_documented():
    for code, message in REGISTRY.items():
        assert code == message.code
        assert code.startswith("TE")
        assert message.doc
