import pytest

from llvm_typeid import ResolutionError, TargetInfo

X86_64_LINUX = "e-m:e-p270:32:32-p271:32:32-p272:64:64-i64:64-i128:128-f80:128-n8:16:32:64-S128"
I386_LINUX = "e-m:e-p:32:32-p270:32:32-p271:32:32-p272:64:64-i128:128-f64:32:64-f80:32-n8:16:32-S128"


def test_defaults():
    target = TargetInfo()
    assert target.char_bits == 8
    assert target.pointer_size == 8
    assert target.pointer_align == 8


def test_x86_64_layout_keeps_64_bit_pointers():
    target = TargetInfo.from_data_layout(X86_64_LINUX)
    assert target.pointer_bits == 64
    assert target.int_align[64] == 8
    assert target.int_align[128] == 16
    assert target.float_align[80] == 16


def test_i386_layout():
    target = TargetInfo.from_data_layout(I386_LINUX)
    assert target.pointer_size == 4
    assert target.pointer_align == 4
    assert target.float_align[64] == 4


def test_pointer_abi_alignment_may_differ_from_size():
    target = TargetInfo.from_data_layout("p:64:32")
    assert target.pointer_size == 8
    assert target.pointer_align == 4


def test_char_bits_passed_through():
    assert TargetInfo.from_data_layout("e", char_bits=16).char_bits == 16
    assert TargetInfo.from_triple("x86_64-pc-linux-gnu", char_bits=32).char_bits == 32


@pytest.mark.parametrize("component", ["i64", "p:abc:64", "f32:x"])
def test_malformed_layout(component):
    with pytest.raises(ResolutionError) as excinfo:
        TargetInfo.from_data_layout(f"e-{component}")
    assert excinfo.value.code == "TE0021"
    assert component in str(excinfo.value)


@pytest.mark.parametrize("triple, pointer_bits", [
    ("x86_64-pc-linux-gnu", 64),
    ("arm64-apple-darwin25.0.0", 64),
    ("aarch64-unknown-linux-gnu", 64),
    ("i686-pc-windows-msvc", 32),
    ("wasm32-unknown-unknown", 32),
    ("armv7-unknown-linux-gnueabihf", 32),
])
def test_from_triple(triple, pointer_bits):
    assert TargetInfo.from_triple(triple).pointer_bits == pointer_bits


def test_host_target():
    target = TargetInfo.host()
    assert target.pointer_bits in (32, 64)
    assert target.char_bits == 8
