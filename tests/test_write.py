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
Test writing ABC, replaying the original text and reconstructing it.
"""

### find abcscore
import sys
sys.path.insert(0, '.')

import pytest

from abcscore import parse, serialize
from abcscore.key import Clef, KeySignature
from abcscore.meter import TimeSignature
from abcscore.pitch import Pitch
from abcscore.score import (
    Barline, Document, Measure, Note, Part, PartInfo, initial_attributes,
)
from abcscore.write import WriterOptions


TUNES = [
    # a plain tune
    "X:1\nT:Test\nM:4/4\nL:1/8\nK:G\n|: GABc d2 B2 | \"D7\" A>B c/d/e/f/ g4 :|\n",
    # voices declared in the header, switched in the body
    "X:1\nT:Duet\nM:2/4\nL:1/8\nV:1 name=\"Upper\"\nV:2 clef=bass name=\"Lower\"\nK:C\n"
    "V:1\ncdef|g4|\nV:2\nC,D,E,F,|G,4|\n",
    # inline voices
    "X:1\nL:1/4\nK:C\n[V:1]cd|[V:2]CD|\n",
    # grace notes, tuplets, chords, ties and lyrics
    "X:1\nM:3/4\nL:1/8\nK:D\n{g}A2 (3Bcd [DF]2-|[DF]6|\nw:Hel-lo world\n",
    # endings
    "X:1\nL:1/4\nK:C\n|: CDEF |1 GABc :|2 cBAG |]\n",
    # continued lines, a key change and comments
    "X:2\nL:1/8\nK:Am\n% comment\nABcd|\\\nefga|\nK:C\nc8|]\n",
    # tempo, words and directives
    "X:3\nT:Tempo\nQ:1/4=96\nK:F\n%%MIDI program 1\nFGAB|c4|]\nW:Some words\n",
]


def check_reparse(text):
    """Check that writing and reading back gives the same document."""
    d = parse(text)
    written = serialize(d, replay=False)
    d2 = parse(written)
    assert d.equals(d2)
    # writing again gives the same text
    assert serialize(d2, replay=False) == written


def test_replay():
    for text in TUNES:
        assert serialize(parse(text)) == text
    # without a trailing newline
    assert serialize(parse("X:1\nK:C\nabc")) == "X:1\nK:C\nabc"
    assert serialize(parse("X:1\nK:C\nabc|\n"), reference_number=5) == "X:5\nK:C\nabc|\n"


def test_reparse():
    for text in TUNES:
        check_reparse(text)


def test_reconstruct():
    d = parse(TUNES[0])
    assert serialize(d, replay=False) == (
        "X:1\nT:Test\nM:4/4\nL:1/8\nK:G\n"
        "|: GABc d2 B2| \"D7\" A3/2B/ c/d/e/f/ g4:|\n")

    # these are written back exactly
    for text in TUNES[1], TUNES[3]:
        assert serialize(parse(text), replay=False) == text

    assert serialize(parse(TUNES[2]), replay=False) == "X:1\nL:1/4\nK:C\n[V:1]cd|\n[V:2]CD|\n"
    assert serialize(parse(TUNES[4]), replay=False) == \
        "X:1\nL:1/4\nK:C\n|: CDEF|[1 GABc:|[2 cBAG|]\n"
    assert serialize(parse(TUNES[5]), replay=False) == \
        "X:2\nL:1/8\nK:Am\n% comment\nABcd|\\\nefga|\n[K:C]c8|]\n"
    assert serialize(parse(TUNES[6]), replay=False, reference_number=4) == \
        "X:4\nT:Tempo\nQ:1/4=96\nK:F\n%%MIDI program 1\nFGAB|c4|]\nW:Some words\n"


def test_line_breaks():
    text = "X:1\nL:1/8\nK:C\nCDEF|GABc|\ncdef|gabc|\n"
    assert serialize(parse(text), replay=False) == text
    text = "X:1\nL:1/8\nK:C\nCDEF|GABc|cdef|gabc|\n"
    assert serialize(parse(text), replay=False, line_width=10) == \
        "X:1\nL:1/8\nK:C\nCDEF|GABc|\ncdef|gabc|\n"


def test_options():
    text = 'X:1\nL:1/8\nK:C\n"C"!p!CDEF|"G"GABc|\nw:a b c d e f g h\n'
    d = parse(text)
    assert serialize(d, replay=False) == text
    assert serialize(d, replay=False, chord_symbols=False, dynamics=False, lyrics=False) == \
        "X:1\nL:1/8\nK:C\nCDEF|GABc|\n"

    with pytest.raises(TypeError):
        serialize(text)
    with pytest.raises(ValueError):
        serialize(d, line_length=72)
    with pytest.raises(ValueError):
        WriterOptions(_private=1)
    assert WriterOptions(line_width=40).line_width == 40


def test_verses():
    text = "X:1\nL:1/8\nK:C\nABcd|\nw:one two-\nw:uno * tres\n"
    d = parse(text)
    written = serialize(d, replay=False)
    assert written == "X:1\nL:1/8\nK:C\nABcd|\nw:one two-\nw:uno * tres\n"
    check_reparse(text)


def test_without_origin():
    attributes = initial_attributes(TimeSignature('2', 4), KeySignature(0), Clef())
    d = Document(
        Part(
            Measure(
                Note(Pitch('C', 4), 960, note_type='quarter'),
                Note(Pitch('E', 4), 960, note_type='quarter'),
                number='1', attributes=attributes,
                barlines=[Barline('right', 'light-heavy')]),
            id='P1', name='Music'),
        title='Test', part_list=[PartInfo('P1', 'Music')])
    text = serialize(d)
    assert text == "X:1\nT:Test\nM:2/4\nL:1/16\nK:C\nC4E4|]\n"
    assert parse(text).equals(d)

    # two parts get voice declarations
    bass = initial_attributes(TimeSignature('2', 4), KeySignature(-1), Clef('F', 4))
    d = Document(
        Part(Measure(Note(Pitch('A', 4), 1920, note_type='half'), attributes=attributes),
             id='P1', name='Voice 1'),
        Part(Measure(Note(Pitch('D', 3), 1920, note_type='half'), attributes=bass),
             id='P2', name='Voice 2'))
    text = serialize(d, reference_number=7)
    assert text == (
        "X:7\nM:2/4\nL:1/16\n"
        "V:1 name=\"Voice 1\"\nV:2 clef=bass name=\"Voice 2\"\nK:C\n"
        "V:1\nA8|\nV:2\n[K:F]D,8|\n")
    assert parse(text).parts()[1][0].attributes.key == KeySignature(-1)


def test_first_measure_changes():
    # a meter or key change before the first bar is not in the header
    text = "X:1\nK:C\nM:3/4\nABC|\n"
    assert serialize(parse(text), replay=False) == "X:1\nK:C\n[M:3/4]ABC|\n"
    check_reparse(text)
    assert parse(serialize(parse(text), replay=False)).parts()[0][0].attributes.time == TimeSignature('3', 4)

    text = "X:1\nK:C\n[K:G]AB|\n"
    assert serialize(parse(text), replay=False) == text
    check_reparse(text)

    # nothing is added when the first measure agrees with the header
    text = "X:1\nM:3/4\nK:D\nABC|\n"
    assert serialize(parse(text), replay=False) == text


def test_grace_notes():
    text = "X:1\nL:1/8\nK:C\nA2 {g}B2 {/ag}c2|\n"
    assert serialize(parse(text), replay=False) == text
    check_reparse(text)
    n = list(parse(text).parts()[0].notes())
    assert [x.acciaccatura for x in n] == [False, False, False, True, True, False]


if __name__ == "__main__" and 'test_main' in globals():
    test_main()
