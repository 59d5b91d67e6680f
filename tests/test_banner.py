import pytest

from springkit.gs.banner import VERSION, print_banner, render_banner, set_banner


@pytest.fixture
def restore_banner():
    yield
    set_banner("")


def test_render_empty():
    assert render_banner("", "v1") == ""


def test_render_pinned_example():
    assert render_banner("abcdef", "ab") == "\n\x1b[36mabcdef\x1b[0m\n\n  ab"


def test_render_lines_are_coloured():
    text = render_banner("one\ntwo\n", "x")
    assert "\x1b[36mone\x1b[0m\n" in text
    assert "\x1b[36mtwo\x1b[0m\n" in text
    assert text.startswith("\n")
    assert text.endswith("x")


def test_render_no_padding_when_version_longer():
    text = render_banner("ab", "longversion")
    assert text.endswith("\nlongversion")


def test_render_leading_newline_not_doubled():
    text = render_banner("\nabc", "v")
    assert text.startswith("\x1b[36m\x1b[0m\n")


def test_print_banner(capsys, restore_banner):
    set_banner("hello banner")
    print_banner()
    out = capsys.readouterr().out
    assert "\x1b[36mhello banner\x1b[0m" in out
    assert out.rstrip("\n").endswith(VERSION)


def test_print_empty_banner(capsys, restore_banner):
    set_banner("")
    print_banner()
    assert capsys.readouterr().out == ""