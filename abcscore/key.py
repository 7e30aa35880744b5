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
Key signatures and clefs.

A key signature in the score is expressed by the number of fifths (negative
for flats) and the mode. The ABC ``K:`` field names the tonic and the mode::

    >>> from abcscore.key import from_string, to_string
    >>> from_string('Ddor')
    <KeySignature fifths=0, mode='dorian'>
    >>> to_string(from_string('F#m'))
    'F#m'

Unrecognized key text falls back to C major, an unrecognized clef name to the
treble clef.

"""

import logging
import re


#: The number of fifths of each mode relative to the major key on the same tonic.
mode_offset = {
    'major': 0,
    'ionian': 0,
    'minor': -3,
    'aeolian': -3,
    'dorian': -2,
    'phrygian': -4,
    'lydian': 1,
    'mixolydian': -1,
    'locrian': -5,
}

#: The mode names by their three-letter ABC abbreviation.
mode_names = {
    'maj': 'major',
    'ion': 'ionian',
    'min': 'minor',
    'aeo': 'aeolian',
    'dor': 'dorian',
    'phr': 'phrygian',
    'lyd': 'lydian',
    'mix': 'mixolydian',
    'loc': 'locrian',
}

_mode_suffix = {
    'major': '',
    'minor': 'm',
    'ionian': 'ion',
    'aeolian': 'aeo',
    'dorian': 'dor',
    'phrygian': 'phr',
    'lydian': 'lyd',
    'mixolydian': 'mix',
    'locrian': 'loc',
}

_fifths_order = 'FCGDAEB'

_key_re = re.compile(r'\s*([A-G])([#b]?)\s*([A-Za-z]*)')
_clef_re = re.compile(r'(?:^|\s)clef=(\S+)')

#: Clef name to (sign, line).
clefs = {
    'treble': ('G', 2),
    'treble-8va': ('G', 2),
    'treble+8': ('G', 2),
    'bass': ('F', 4),
    'bass3': ('F', 4),
    'alto': ('C', 3),
    'tenor': ('C', 4),
    'soprano': ('C', 1),
    'mezzo': ('C', 2),
    'mezzo-soprano': ('C', 2),
    'baritone': ('C', 5),
    'perc': ('percussion', None),
    'percussion': ('percussion', None),
}

_clef_names = {
    ('G', 2): 'treble',
    ('F', 4): 'bass',
    ('C', 3): 'alto',
    ('C', 4): 'tenor',
    ('C', 1): 'soprano',
    ('C', 2): 'mezzo',
    ('C', 5): 'baritone',
    ('percussion', None): 'perc',
}


class KeySignature:
    """A key signature with ``fifths`` and ``mode`` attributes."""
    def __init__(self, fifths=0, mode='major'):
        self.fifths = fifths
        self.mode = mode

    def __repr__(self):
        return "<{} fifths={}, mode={!r}>".format(
            self.__class__.__name__, self.fifths, self.mode)

    def __eq__(self, other):
        return isinstance(other, KeySignature) and \
            (self.fifths, self.mode) == (other.fifths, other.mode)

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def copy(self):
        """Return a new KeySignature with our attributes."""
        return type(self)(self.fifths, self.mode)


class Clef:
    """A clef with ``sign`` (``'G'``, ``'F'``, ``'C'`` or ``'percussion'``)
    and ``line`` attributes.

    """
    def __init__(self, sign='G', line=2):
        self.sign = sign
        self.line = line

    def __repr__(self):
        return "<{} sign={!r}, line={}>".format(
            self.__class__.__name__, self.sign, self.line)

    def __eq__(self, other):
        return isinstance(other, Clef) and \
            (self.sign, self.line) == (other.sign, other.line)

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def name(self):
        """Return the ABC clef name, or None if there is no name for our sign and line."""
        return _clef_names.get((self.sign, self.line))


def tonic(fifths):
    """Return the name of the major key with the number of fifths, e.g. ``'Bb'``.

    Also works outside the -7..7 range, so that it can be used for modes.

    """
    n = fifths + 1
    accidentals = n // 7
    return _fifths_order[n % 7] + ('#' * accidentals if accidentals > 0 else 'b' * -accidentals)


def mode_from_string(text):
    """Return the mode name for the ABC mode text, e.g. ``'m'`` or ``'Mix'``.

    Returns None if the text does not denote a mode; an empty text is major.

    """
    text = text.lower()
    if not text:
        return 'major'
    elif text == 'm':
        return 'minor'
    return mode_names.get(text[:3])


def from_string(text):
    """Return a :class:`KeySignature` for the ABC key text, e.g. ``'Bb'``,
    ``'Am'`` or ``'E dorian'``.

    Falls back to C major if the key is not recognized.

    """
    m = _key_re.match(text)
    if m:
        letter, accidental, word = m.groups()
        mode = mode_from_string(word) or 'major'
        fifths = _fifths_order.index(letter) - 1
        if accidental == '#':
            fifths += 7
        elif accidental == 'b':
            fifths -= 7
        fifths += mode_offset[mode]
        if -7 <= fifths <= 7:
            return KeySignature(fifths, mode)
    if text.strip() and text.strip().lower() != 'none' and not text.lstrip().startswith('clef='):
        logging.debug("unrecognized key %r, using C major", text)
    return KeySignature(0, 'major')


def to_string(key):
    """Return the ABC key text for a :class:`KeySignature`."""
    mode = key.mode if key.mode in mode_offset else 'major'
    return tonic(key.fifths - mode_offset[mode]) + _mode_suffix[mode]


def clef_from_string(name):
    """Return a :class:`Clef` for the ABC clef name.

    Falls back to the treble clef if the name is not recognized.

    """
    try:
        sign, line = clefs[name.lower()]
    except KeyError:
        logging.debug("unrecognized clef %r, using treble clef", name)
        sign, line = 'G', 2
    return Clef(sign, line)


def clef_in_field(text):
    """Return the clef name given in a ``K:`` or ``V:`` field, or None.

    Both ``clef=bass`` and a bare clef name like ``bass`` are recognized.

    """
    m = _clef_re.search(text)
    if m:
        return m.group(1)
    for word in text.split():
        if word.lower() in clefs:
            return word
