###############################################################################
#
# MIT License
#
# Copyright (c) 2025 Advanced Micro Devices, Inc.
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
###############################################################################
import pytest
import yaml

from journalcheck.statefile import Statefile, reset_statefile


def test_load_missing_file_creates_it(tmp_path):
    path = tmp_path / "state.yaml"
    statefile = Statefile.load(path)
    assert path.exists()
    assert statefile.cursor == ""


def test_update_cursor_roundtrip(tmp_path):
    path = tmp_path / "state.yaml"
    Statefile.load(path).update_cursor("s=0123;i=4a;b=cafe;m=1;t=2;x=3")
    assert yaml.safe_load(path.read_text()) == {"cursor": "s=0123;i=4a;b=cafe;m=1;t=2;x=3"}
    assert Statefile.load(path).cursor == "s=0123;i=4a;b=cafe;m=1;t=2;x=3"


def test_update_leaves_no_temp_files(tmp_path):
    path = tmp_path / "state.yaml"
    statefile = Statefile.load(path)
    statefile.update_cursor("a")
    statefile.update_cursor("b")
    assert [p.name for p in tmp_path.iterdir()] == ["state.yaml"]


def test_reset(tmp_path):
    path = tmp_path / "state.yaml"
    statefile = Statefile(path)
    statefile.update_cursor("abc")
    statefile.reset()
    assert path.read_text() == ""
    assert statefile.cursor == ""


def test_load_ignores_garbage(tmp_path, caplog):
    path = tmp_path / "state.yaml"
    path.write_text("old-format\n")
    with caplog.at_level("WARNING"):
        assert Statefile.load(path).cursor == ""
    assert "malformed" in caplog.text


@pytest.mark.parametrize("content", ["1: foo\n", "cursor: [a, b]\n", "? [x]\n: y\n"])
def test_load_ignores_unexpected_mapping(tmp_path, content):
    path = tmp_path / "state.yaml"
    path.write_text(content)
    assert Statefile.load(path).cursor == ""


def test_load_ignores_invalid_yaml(tmp_path):
    path = tmp_path / "state.yaml"
    path.write_text("cursor: [unclosed\n")
    assert Statefile.load(path).cursor == ""


def test_reset_statefile_truncates(tmp_path):
    path = tmp_path / "cursor"
    path.write_text("s=abc\n")
    reset_statefile(path)
    assert path.read_text() == ""
