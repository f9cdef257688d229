import pytest

from cminusc.cli import (
    ArgumentError,
    HelpRequested,
    has_help_option,
    options_text,
    parse_arguments,
    usage_text,
)
from cminusc.tree import CodeType


@pytest.fixture
def source(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "prog.c").write_text("void main(void) {}\n")
    return "prog.c"


def test_usage_text():
    assert usage_text("cmc") == "Uso: cmc <arquivo> <opção>"


def test_options_text_lists_options():
    text = options_text()
    assert text.startswith("Compilador C- para a máquina iZero...")
    assert "\t-k, --kernel\tCompila código para o kernel" in text


def test_has_help_option():
    assert has_help_option(["cmc", "x", "--help"])
    assert has_help_option(["cmc", "-h"])
    assert not has_help_option(["cmc", "x.c", "-k"])


def test_missing_file_argument():
    with pytest.raises(ArgumentError, match="Uso: cmc"):
        parse_arguments(["cmc"])


def test_help_raises(source):
    with pytest.raises(HelpRequested) as info:
        parse_arguments(["cmc", source, "-h"])
    assert str(info.value) == options_text()


def test_default_program(source):
    info = parse_arguments(["cmc", source])
    assert info.code_type is CodeType.PROGRAM
    assert info.pgm == source
    assert info.offset == 0


def test_extension_appended(source):
    info = parse_arguments(["cmc", "prog"])
    assert info.pgm == "prog.c"


@pytest.mark.parametrize(
    "option, kind",
    [
        ("-k", CodeType.KERNEL),
        ("--kernel", CodeType.KERNEL),
        ("-b", CodeType.BIOS),
        ("--bios", CodeType.BIOS),
    ],
)
def test_code_type_options(source, option, kind):
    assert parse_arguments(["cmc", source, option]).code_type is kind


def test_offset_option(source):
    info = parse_arguments(["cmc", source, "250"])
    assert info.code_type is CodeType.PROGRAM
    assert info.offset == 250


def test_non_numeric_offset_is_zero(source):
    assert parse_arguments(["cmc", source, "abc"]).offset == 0


def test_file_not_found(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError, match="missing.c"):
        parse_arguments(["cmc", "missing"])


def test_too_many_arguments(source):
    with pytest.raises(ArgumentError):
        parse_arguments(["cmc", source, "-k", "extra"])