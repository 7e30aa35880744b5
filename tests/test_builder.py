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
Test building measures from ABC tokens.
"""

from fractions import Fraction

### find abcscore
import sys
sys.path.insert(0, '.')

from abcscore import parse
from abcscore.builder import MusicBuilder
from abcscore.key import KeySignature
from abcscore.lang.abc import tokenize
from abcscore.meter import TimeSignature
from abcscore.pitch import Pitch
from abcscore.score import (
    Backup, Barline, Direction, Harmony, Lyric, Note, Part, Slur, TimeModification,
)
from abcscore.time import Time


def build(text, unit=Fraction(1, 8)):
    """Return the list of measures for one line of ABC music."""
    return MusicBuilder(unit, TimeSignature('4', 4)).build(tokenize(text))


def notes(measures):
    """Return all notes of the measures."""
    return [n for m in measures for n in m / Note]


def check_barlines(text, *expected):
    """Check the barlines of every measure built from the text."""
    measures = build(text)
    assert [m.barlines for m in measures] == list(expected)


def test_chord():
    measures = build('[CEG]2')
    assert len(measures) == 1
    n = notes(measures)
    assert len(n) == 3
    assert [x.chord for x in n] == [False, True, True]
    assert [x.duration for x in n] == [960, 960, 960]
    assert [x.pitch for x in n] == [Pitch('C', 4), Pitch('E', 4), Pitch('G', 4)]
    assert [r.time for r in Time().positions(measures[0])] == [0, 0, 0]
    assert Time().cursor(measures[0]) == 960


def test_chord_durations():
    builder = MusicBuilder(Fraction(1, 8), TimeSignature('4', 4))
    n = notes(builder.build(tokenize('[C2E]')))
    assert [x.duration for x in n] == [960, 480]
    assert builder.individual_chord_durations

    builder = MusicBuilder(Fraction(1, 8), TimeSignature('4', 4))
    n = notes(builder.build(tokenize('[C2E]2')))
    # the chord length wins when it is given
    assert [x.duration for x in n] == [960, 960]
    assert not builder.individual_chord_durations


def test_ties():
    n = notes(build('C2-C2'))
    assert n[0].ties == ['start']
    assert n[1].ties == ['stop']
    assert n[0].pitch == n[1].pitch
    assert (n[0].tie, n[1].tie) == ('start', 'stop')

    n = notes(build('C-C-C'))
    assert [x.tie for x in n] == ['start', 'continue', 'stop']

    # across a bar line, skipping other notes
    measures = build('C4- E|C4')
    n = notes(measures)
    assert n[0].tie == 'start'
    assert n[1].tie is None
    assert n[2].tie == 'stop'

    # a tie after a chord ties all notes, inside only one
    n = notes(build('[CE]-[CE]'))
    assert [x.tie for x in n] == ['start', 'start', 'stop', 'stop']
    n = notes(build('[C-E][CE]'))
    assert [x.tie for x in n] == ['start', None, 'stop', None]

    # unmatched
    part = Part(*build('C-D'))
    assert list(part.unmatched_ties()) == [notes(part)[0]]
    assert list(Part(*build('C-C')).unmatched_ties()) == []
    # a tie on a rest is ignored
    assert [x.ties for x in notes(build('z-z'))] == [[], []]


def test_tuplet():
    n = notes(build('(3ABC D'))
    assert [x.duration for x in n] == [320, 320, 320, 480]
    assert [x.time_modification for x in n] == [TimeModification(3, 2)] * 3 + [None]
    assert n[0].note_type == 'eighth'

    n = notes(build('(3:2:2AB C'))
    assert [x.duration for x in n] == [320, 320, 480]

    n = notes(build('(2AB'))
    assert [x.duration for x in n] == [720, 720]


def test_slurs():
    n = notes(build('(AB)'))
    assert n[0].slurs == [Slur('start', 1)]
    assert n[1].slurs == [Slur('stop', 1)]

    n = notes(build('((AB)C)'))
    assert n[0].slurs == [Slur('start', 1), Slur('start', 2)]
    assert n[1].slurs == [Slur('stop', 2)]
    assert n[2].slurs == [Slur('stop', 1)]

    # an unmatched slur end is dropped
    n = notes(build('A)B'))
    assert [x.slurs for x in n] == [[], []]


def test_grace():
    measures = build('{ga}A2')
    n = notes(measures)
    assert [x.grace for x in n] == [True, True, False]
    assert [x.duration for x in n] == [0, 0, 960]
    assert n[0].note_type == 'eighth'
    assert [r.time for r in Time().positions(measures[0])] == [0, 0, 0]
    assert Time().cursor(measures[0]) == 960
    # a slash makes an acciaccatura
    n = notes(build('{/g}A {b}c'))
    assert [x.acciaccatura for x in n] == [True, False, False, False]


def test_overlay():
    measures = build('AB & cd|')
    m = measures[0]
    assert [type(e) for e in m] == [Note, Note, Backup, Note, Note]
    assert m[2].duration == 960
    assert [r.time for r in Time().positions(m)] == [0, 480, 960, 0, 480]
    assert Time().length(m) == 960
    # nothing to rewind
    assert [type(e) for e in build('& AB|')[0]] == [Note, Note]


def test_broken_rhythm():
    assert [x.duration for x in notes(build('A>B'))] == [720, 240]
    assert [x.duration for x in notes(build('A<B'))] == [240, 720]
    assert [x.duration for x in notes(build('A>>B'))] == [840, 120]
    n = notes(build('A>B'))
    assert (n[0].note_type, n[0].dots) == ('eighth', 1)
    assert (n[1].note_type, n[1].dots) == ('16th', 0)
    assert [x.duration for x in notes(build('[CE]>G'))] == [720, 720, 240]


def test_rests():
    n = notes(build('z2 x Z'))
    assert [x.rest for x in n] == [True, True, True]
    assert [x.duration for x in n] == [960, 480, 3840]
    assert [x.invisible for x in n] == [False, True, False]
    assert [x.measure_rest for x in n] == [False, False, True]
    assert n[2].note_type == 'whole'
    n = notes(build('X'))
    assert n[0].invisible and n[0].measure_rest


def test_barlines():
    check_barlines('abc|', [])
    check_barlines('abc|]', [Barline('right', 'light-heavy')])
    check_barlines('abc||', [Barline('right', 'light-light')])
    check_barlines('abc[|', [Barline('right', 'heavy-light')])
    check_barlines('abc:|]', [Barline('right', 'light-heavy', 'backward')])
    check_barlines('|: abc :: def :|',
        [Barline('left', 'heavy-light', 'forward'), Barline('right', 'light-heavy', 'backward')],
        [Barline('left', 'heavy-light', 'forward'), Barline('right', 'light-heavy', 'backward')])
    check_barlines('abc |: def :|',
        [],
        [Barline('left', 'heavy-light', 'forward'), Barline('right', 'light-heavy', 'backward')])


def test_endings():
    measures = build('|1 abc :|2 def |')
    assert len(measures) == 2
    m1, m2 = measures
    assert m1.barline('left') == Barline('left', ending_number='1', ending_type='start')
    assert m1.barline('right') == Barline('right', 'light-heavy', 'backward', '1', 'stop')
    assert m2.barline('left') == Barline('left', ending_number='2', ending_type='start')
    assert m2.barline('right') == Barline('right', ending_number='2', ending_type='stop')


def test_attachments():
    m = build('"Am" !f! A !trill!B "^Fine"c')[0]
    assert [type(e) for e in m] == [Harmony, Direction, Note, Direction, Note, Note]
    assert (m[0].root_step, m[0].kind) == ('A', 'minor')
    assert (m[1].kind, m[1].value) == ('dynamics', 'f')
    assert (m[3].kind, m[3].text) == ('words', '!trill!')
    assert m[2].space_before
    assert m[0].space_before is False
    assert m[3].space_before
    assert not m[4].space_before


def test_inline_fields():
    n = notes(build('A [L:1/4] A'))
    assert [x.duration for x in n] == [480, 960]

    measures = build('A|[K:D]B|[M:3/4]c|')
    assert measures[0].attributes.divisions == 960
    assert measures[0].attributes.time == TimeSignature('4', 4)
    assert measures[1].attributes.key == KeySignature(2, 'major')
    assert measures[1].attributes.time is None
    assert measures[2].attributes.time == TimeSignature('3', 4)
    assert measures[2].attributes.key is None

    m = build('[P:A]B')[0]
    assert m[0].text == '[P:A]'


def test_measure_numbers():
    measures = build('A|B|c|d')
    assert [m.number for m in measures] == ['1', '2', '3', '4']
    # the last measure does not need a bar line
    assert notes([measures[3]])[0].pitch == Pitch('D', 5)


def test_lyrics():
    d = parse("X:1\nL:1/8\nK:C\nABcd|\nw:Tra-la-li Ja!\nw:one * three\n")
    n = list(d.parts()[0].notes())
    assert [x.lyrics[0] for x in n] == [
        Lyric('Tra', 'begin'), Lyric('la', 'middle'), Lyric('li', 'end'), Lyric('Ja!', 'single')]
    assert n[0].lyrics[1] == Lyric('one', 'single', 2)
    assert len(n[1].lyrics) == 1
    assert n[2].lyrics[1] == Lyric('three', 'single', 2)

    # lyrics apply to the notes since the previous lyric line
    d = parse("X:1\nL:1/8\nK:C\nAB|\nw:a b\ncd|\nw:c d\n")
    n = list(d.parts()[0].notes())
    assert [x.lyrics[0].text for x in n] == ['a', 'b', 'c', 'd']
    assert [x.lyrics[0].number for x in n] == [1, 1, 1, 1]



def test_malformed_lengths():
    d = parse("X:1\nL:1/8\nK:C\nA/0 B|\n")
    assert [x.duration for x in d.parts()[0].notes()] == [240, 480]
    n = notes(build('(3:0ABC'))
    assert [x.duration for x in n] == [320, 320, 320]
    assert n[0].time_modification == TimeModification(3, 2)
    n = notes(build('(0AB'))
    assert [x.duration for x in n] == [480, 480]
    assert [x.time_modification for x in n] == [None, None]


def test_duration_conservation():
    d = parse("X:1\nM:3/4\nL:1/8\nK:C\nA2 B2 (3cde|[CE]4 z2|{g}A>B c/d/ e3|ABc & z6|\n")
    t = Time()
    for m in d.parts()[0]:
        assert t.cursor(m) == t.nominal(TimeSignature("3", 4))
        assert t.length(m) == t.nominal(TimeSignature('3', 4))


if __name__ == "__main__" and 'test_main' in globals():
    test_main()
