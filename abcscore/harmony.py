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
Recognize chord symbols like ``"Am7"`` or ``"G/B"``.

A chord symbol consists of a root (a letter from A to G and an optional ``#``
or ``b``), an optional quality and an optional bass note after a slash. Text
that does not start with a root is not a chord symbol (ABC uses quoted text
also for annotations like ``"^Fine"``) and yields None.

"""

import re

from .score import Harmony


#: Quality texts with their harmony kind; longer texts come first.
qualities = (
    ('maj7', 'major-seventh'),
    ('min7', 'minor-seventh'),
    ('dim7', 'diminished-seventh'),
    ('aug7', 'augmented-seventh'),
    ('sus4', 'suspended-fourth'),
    ('sus2', 'suspended-second'),
    ('add11', 'major'),
    ('add9', 'major'),
    ('add', 'major'),
    ('maj', 'major'),
    ('min', 'minor'),
    ('dim', 'diminished'),
    ('aug', 'augmented'),
    ('sus', 'suspended-fourth'),
    ('M7', 'major-seventh'),
    ('m7', 'minor-seventh'),
    ('m6', 'minor-sixth'),
    ('m9', 'minor-ninth'),
    ('m', 'minor'),
    ('11', 'dominant-11th'),
    ('13', 'dominant-13th'),
    ('7', 'dominant'),
    ('6', 'major-sixth'),
    ('9', 'dominant-ninth'),
)

#: The quality text written for each harmony kind.
kind_texts = {
    'major': '',
    'minor': 'm',
    'dominant': '7',
    'major-seventh': 'maj7',
    'minor-seventh': 'm7',
    'diminished': 'dim',
    'diminished-seventh': 'dim7',
    'augmented': 'aug',
    'augmented-seventh': 'aug7',
    'major-sixth': '6',
    'minor-sixth': 'm6',
    'dominant-ninth': '9',
    'minor-ninth': 'm9',
    'suspended-fourth': 'sus4',
    'suspended-second': 'sus2',
    'dominant-11th': '11',
    'dominant-13th': '13',
}

_alters = {'#': 1, 'b': -1, '': 0}

_chord_re = re.compile(r'([A-G])([#b]?)({})?(?:/([A-G])([#b]?))?'.format(
    '|'.join(re.escape(q) for q, kind in qualities)))

_kinds = dict(qualities)


def from_string(text):
    """Return a :class:`~.score.Harmony` for the chord symbol text, or None.

    For example::

        >>> h = from_string('F#m7/C#')
        >>> h.root_step, h.root_alter, h.kind, h.bass_step, h.bass_alter
        ('F', 1, 'minor-seventh', 'C', 1)

    """
    m = _chord_re.fullmatch(text.strip())
    if not m:
        return None
    step, alter, quality, bass_step, bass_alter = m.groups()
    return Harmony(step, _alters[alter], _kinds.get(quality, 'major'),
                   bass_step, _alters[bass_alter or ''] if bass_step else 0)


def to_string(harmony):
    """Return the chord symbol text (without quotes) for a Harmony."""
    def note(step, alter):
        return step + {1: '#', -1: 'b'}.get(alter, '')

    text = note(harmony.root_step, harmony.root_alter) + kind_texts.get(harmony.kind, '')
    if harmony.bass_step:
        text += '/' + note(harmony.bass_step, harmony.bass_alter)
    return text
