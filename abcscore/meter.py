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
Time signatures and the ABC ``M:`` field.

Besides numeric meters like ``3/4`` or ``2+3/8``, ABC knows ``C`` (common
time, 4/4) and ``C|`` (cut time, 2/2). An absent or unrecognized meter is 4/4.

The meter also determines the default unit note length when there is no
``L:`` field: 1/16 for meters smaller than 3/4, and 1/8 otherwise.

"""

import fractions
import re

from .duration import DIVISIONS


_meter_re = re.compile(r'(\d+(?:\+\d+)*)/(\d+)$')


class TimeSignature:
    """A time signature with ``beats``, ``beat_type`` and ``symbol`` attributes.

    ``beats`` is a string, because it can be a sum like ``'2+3'``.
    ``symbol`` is None, ``'common'`` or ``'cut'``.

    """
    def __init__(self, beats='4', beat_type=4, symbol=None):
        self.beats = beats
        self.beat_type = beat_type
        self.symbol = symbol

    def __repr__(self):
        return "<{} {}/{}{}>".format(self.__class__.__name__, self.beats, self.beat_type,
            " ({})".format(self.symbol) if self.symbol else "")

    def __eq__(self, other):
        return isinstance(other, TimeSignature) and \
            (self.beats, self.beat_type, self.symbol) == (other.beats, other.beat_type, other.symbol)

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def copy(self):
        """Return a new TimeSignature with our attributes."""
        return type(self)(self.beats, self.beat_type, self.symbol)

    def fraction(self):
        """Return the measure length as a Fraction of a whole note."""
        return fractions.Fraction(sum(int(b) for b in self.beats.split('+')), self.beat_type)

    def divisions(self):
        """Return the measure length in divisions."""
        return round(self.fraction() * 4 * DIVISIONS)


def from_string(text):
    """Return a :class:`TimeSignature` for the ABC meter text.

    For example::

        >>> from abcscore.meter import from_string
        >>> from_string('6/8')
        <TimeSignature 6/8>
        >>> from_string('C|')
        <TimeSignature 2/2 (cut)>

    """
    text = text.strip() if text else ''
    if text == 'C':
        return TimeSignature('4', 4, 'common')
    elif text == 'C|':
        return TimeSignature('2', 2, 'cut')
    m = _meter_re.match(text)
    if m:
        return TimeSignature(m.group(1), int(m.group(2)))
    return TimeSignature('4', 4)


def to_string(time):
    """Return the ABC meter text for a :class:`TimeSignature`."""
    if time.symbol == 'common':
        return 'C'
    elif time.symbol == 'cut':
        return 'C|'
    return '{}/{}'.format(time.beats, time.beat_type)


def default_unit_length(time):
    """Return the unit note length (a Fraction) to use when no ``L:`` is given."""
    if time is None or time.fraction() >= fractions.Fraction(3, 4):
        return fractions.Fraction(1, 8)
    return fractions.Fraction(1, 16)


def unit_length_from_string(text, time=None):
    """Return the unit note length for the ``L:`` text, e.g. ``'1/8'``.

    If the text is empty or not valid, the default for the time signature
    is returned.

    """
    if text:
        m = re.match(r'\s*(\d+)(?:/(\d+))?', text)
        if m:
            num, den = int(m.group(1)), int(m.group(2) or 1)
            if num and den:
                return fractions.Fraction(num, den)
    return default_unit_length(time)
