# -*- coding: utf-8 -*-
#
# This file is part of `abcscore`, a library for ABC music notation
#
# Copyright © 2019-2022 by Wilbert Berendsen <info@wilbertberendsen.nl>
#
# This module is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This module is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


"""
Test the header parser and splitting the body in voices.
"""

### find abcscore
import sys
sys.path.insert(0, '.')

from abcscore import header, voices
from abcscore.header import Voice


TUNE = """\
X:1
T:Title
T:Subtitle
C:Trad.
M:6/8
L:1/8
Q:3/8=120
%%scale 0.8
% a comment
K:G
V:1 clef=treble name="Flute"
abc|
"""


def test_header():
    lines = TUNE.splitlines()
    h = header.parse(lines)
    assert h.reference_number == '1'
    assert h.reference() == 1
    assert h.title == 'Title'
    assert h.composer == 'Trad.'
    assert h.meter == '6/8'
    assert h.unit_note_length == '1/8'
    assert h.tempo == '3/8=120'
    assert h.key == 'G'
    assert h.extra_fields == [('T', 'Subtitle')]
    assert h.directives == ['%%scale 0.8']
    assert h.comments == ['% a comment']
    assert len(h.voices) == 1
    v = h.voices[0]
    assert (v.id, v.name, v.clef) == ('1', 'Flute', 'treble')
    assert v.line == 'V:1 clef=treble name="Flute"'
    # the voice declaration after the key is still header
    assert h.body_start == 11
    assert lines[h.body_start] == 'abc|'
    assert h.lines == lines[:11]


def test_voice_switch():
    lines = ["X:1", "K:C", "V:1", "abc|"]
    h = header.parse(lines)
    # a V: line without parameters after the key switches voices in the body
    assert h.body_start == 2
    assert h.lines == ["X:1", "K:C"]

    lines = ["X:1", "V:S name=Soprano", "V:A clef=alto", "K:C", "V:S", "abc|"]
    h = header.parse(lines)
    assert h.body_start == 4
    assert [v.id for v in h.voices] == ['S', 'A']
    assert h.voice('S').name == 'Soprano'
    assert h.voice('A').name == 'A'
    assert h.voice('A').clef == 'alto'
    assert h.voice('T') is None


def test_voice():
    v = Voice.from_string('T1 nm="Tenor 1" clef=treble-8va')
    assert (v.id, v.name, v.clef) == ('T1', 'Tenor 1', 'treble-8va')
    v = Voice.from_string('B bass')
    assert (v.id, v.name, v.clef) == ('B', 'B', 'bass')
    assert Voice.has_params('T1 clef=bass')
    assert Voice.has_params('T1 bass')
    assert not Voice.has_params('T1')


def test_no_header():
    h = header.parse(["abc|def|"])
    assert h.key is None
    assert h.body_start == 0


def test_body_voices():
    body = voices.read([
        "V:1",
        "abc|def|",
        "w:one two",
        "V:2",
        "ABC|DEF|",
        "V:1",
        "ga|",
    ])
    assert list(body.voices) == ['1', '2']
    assert [t.type for t in body.voices['1']] == [
        'note', 'note', 'note', 'bar', 'note', 'note', 'note', 'bar',
        'lyrics', 'line_break', 'note', 'note', 'bar']
    assert body.voices['1'][8].syllables == ['one', 'two']
    assert body.voice_lines == ["V:1", "V:2", "V:1"]
    assert body.interleave == [['1', '2'], ['1']]
    assert body.group_bar_counts == [[2, 2], [1]]
    assert [voice_id for voice_id, tokens in body.streams()] == ['1', '2']


def test_body_inline_voices():
    body = voices.read(["[V:1]abc|[V:2]ABC|"])
    assert [t.type for t in body.voices['1']] == ['note', 'note', 'note', 'bar']
    assert [t.type for t in body.voices['2']] == ['note', 'note', 'note', 'bar']
    assert body.inline_voice_markers == {'1': '[V:1]', '2': '[V:2]'}
    assert body.interleave == [['1', '2']]
    assert body.group_bar_counts == [[1, 1]]
    assert body.voice_lines == []


def test_body_lines():
    body = voices.read([
        "%%MIDI program 1",
        "% just a comment",
        "abc|\\",
        "def|",
        "K:D",
        "ga|",
        "W:Some words",
    ])
    assert body.directives == ["%%MIDI program 1"]
    assert body.comments == ["% just a comment"]
    assert body.words == ["W:Some words"]
    tokens = body.voices['1']
    assert [t.type for t in tokens] == [
        'note', 'note', 'note', 'bar', 'line_break',
        'note', 'note', 'note', 'bar', 'line_break',
        'inline_field', 'line_break', 'note', 'note', 'bar']
    assert tokens[4].continuation
    assert not tokens[9].continuation
    assert tokens[10].value == 'K:D'


if __name__ == "__main__" and 'test_main' in globals():
    test_main()
