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
Pitches in ABC notation.

A note name in ABC is a letter, optionally preceded by an accidental and
followed by octave marks. Upper case letters denote the octave starting at
middle C, lower case letters the octave above. Each ``'`` raises and each
``,`` lowers the octave by one::

    >>> from abcscore.pitch import from_string, to_string
    >>> pitch, accidental = from_string("^c'")
    >>> pitch
    <Pitch step='C', octave=6, alter=1 (^c')>
    >>> accidental
    'sharp'
    >>> to_string(pitch)
    "^c'"

An explicit natural (``=F``) has an alter of 0, and is only distinguished
from a plain ``F`` by the accidental display hint ``'natural'``.

"""

import re


STEPS = 'CDEFGAB'

#: ABC accidental prefix to (alter, display hint)
ACCIDENTALS = {
    '^^': (2, 'double-sharp'),
    '^': (1, 'sharp'),
    '=': (0, 'natural'),
    '_': (-1, 'flat'),
    '__': (-2, 'flat-flat'),
}

_alter_to_prefix = {
    2: '^^',
    1: '^',
    -1: '_',
    -2: '__',
}

_pitch_re = re.compile(r"(\^\^|\^|__|_|=)?([A-Ga-g])([',]*)")


class Pitch:
    """A pitch with ``step``, ``octave``, and ``alter`` attributes.

    The ``step`` is a letter from ``'C'`` to ``'B'``, the ``octave`` is an
    integer where 4 is the octave starting at middle C, and ``alter`` the
    chromatic alteration in semitones.

    Pitches compare equal when their attributes are the same, and also support
    the ``>``, ``<``, ``>=`` and ``<=`` operators. These operators compare on
    octave first, then step, then alter.

    ``format(pitch)`` returns the ABC notation.

    """
    def __init__(self, step, octave, alter=0):
        self.step = step
        self.octave = octave
        self.alter = alter

    def __format__(self, format_spec):
        return format(to_string(self), format_spec)

    def __repr__(self):
        return "<{} step={!r}, octave={}, alter={} ({})>".format(
            self.__class__.__name__, self.step, self.octave, self.alter, self)

    def _as_tuple(self):
        """Return our attributes as a sortable tuple."""
        return (self.octave, STEPS.index(self.step), self.alter)

    def __eq__(self, other):
        return isinstance(other, Pitch) and self._as_tuple() == other._as_tuple()

    def __ne__(self, other):
        return not self == other

    def __gt__(self, other):
        if isinstance(other, Pitch):
            return self._as_tuple() > other._as_tuple()
        return NotImplemented

    def __lt__(self, other):
        if isinstance(other, Pitch):
            return self._as_tuple() < other._as_tuple()
        return NotImplemented

    def __ge__(self, other):
        if isinstance(other, Pitch):
            return self._as_tuple() >= other._as_tuple()
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, Pitch):
            return self._as_tuple() <= other._as_tuple()
        return NotImplemented

    __hash__ = None

    def copy(self):
        """Return a new Pitch with our attributes."""
        return type(self)(self.step, self.octave, self.alter)

    def same_note(self, other):
        """Return True if other has the same step and octave.

        Ties are matched this way, the alteration is not considered.

        """
        return self.step == other.step and self.octave == other.octave


def octave_to_string(octave):
    """Return the octave marks for a lower case (octave >= 5) or upper case
    letter.

    """
    if octave >= 5:
        return "'" * (octave - 5)
    return "," * (4 - octave)


def octave_from_string(marks):
    """Return the octave shift of a string of ``'`` and ``,`` marks."""
    return marks.count("'") - marks.count(",")


def from_string(text):
    """Read an ABC note name and return a tuple (pitch, accidental).

    The accidental is the display hint (e.g. ``'sharp'`` or ``'natural'``) or
    None if no accidental was written. Returns (None, None) if the text is not
    a note name.

    """
    m = _pitch_re.match(text)
    if not m:
        return None, None
    prefix, letter, marks = m.groups()
    octave = (5 if letter.islower() else 4) + octave_from_string(marks)
    alter, accidental = ACCIDENTALS.get(prefix, (0, None))
    return Pitch(letter.upper(), octave, alter), accidental


def to_string(pitch, accidental=None):
    """Return the ABC note name for the pitch.

    A natural sign is only written if ``accidental`` is ``'natural'``.

    """
    if pitch.alter:
        prefix = _alter_to_prefix.get(pitch.alter, '')
    elif accidental == 'natural':
        prefix = '='
    else:
        prefix = ''
    letter = pitch.step.lower() if pitch.octave >= 5 else pitch.step
    return prefix + letter + octave_to_string(pitch.octave)
