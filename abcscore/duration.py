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
Functions to deal with ABC note lengths and score durations.

In ABC, a note length is written as a suffix relative to the unit note length
(the ``L:`` field), e.g. ``2`` (twice the unit), ``/`` (half the unit), ``3/2``
etc. Such a length is handled as a :class:`~fractions.Fraction` multiple of the
unit note length, where the unit note length itself is a Fraction of a whole
note.

In the score, durations are integers expressed in divisions; there are
:data:`DIVISIONS` divisions per quarter note.

A duration can also be split in two values, log and dot-count, where the log
value is 0 for a whole note, 1 for a half note, 2 for a crotchet, -1 for a
breve, etc. This is used to determine the note type.

"""

import fractions
import math
import re


#: Divisions per quarter note
DIVISIONS = 960

#: Note type names by log value
NOTE_TYPES = {
    -2: 'long',
    -1: 'breve',
    0: 'whole',
    1: 'half',
    2: 'quarter',
    3: 'eighth',
    4: '16th',
    5: '32nd',
    6: '64th',
}

_suffix_re = re.compile(r'(\d*)(/*)(\d*)')


def log_dotcount(value):
    r"""Return the integer two-tuple (log, dotcount) for the duration value.

    The ``value`` may be a Fraction, integer or floating point value, where a
    whole note is 1. For example::

        >>> from abcscore.duration import log_dotcount
        >>> log_dotcount(1)
        (0, 0)
        >>> log_dotcount(1/2)
        (1, 0)
        >>> log_dotcount(3/4)
        (1, 1)
        >>> log_dotcount(7/16)
        (2, 2)

    The value is truncated to a duration that can be expressed by a note length
    and a number of dots.

    """
    mantisse, exponent = math.frexp(value)
    dotcount = int(-1 - math.log2(1 - mantisse))
    log = 1 - exponent
    return log, dotcount


def duration(log, dotcount=0):
    r"""Return the duration as a Fraction of a whole note.

    See for an explanation of the ``log`` and ``dotcount`` values
    :func:`log_dotcount`.

    """
    numer = ((2 << dotcount) - 1) << 3
    denom = 1 << (dotcount + log + 3)
    return fractions.Fraction(numer, denom)


def note_type(divisions):
    """Return a two-tuple (type, dots) for a duration in divisions.

    The type is a name like ``'quarter'`` or ``'16th'``. Durations that can't
    be expressed with up to two dots get the closest undotted type. For
    example::

        >>> note_type(1440)
        ('quarter', 1)
        >>> note_type(320)       # a triplet eighth
        ('16th', 0)

    """
    if divisions > 0:
        value = fractions.Fraction(divisions, 4 * DIVISIONS)
        log, dots = log_dotcount(value)
        if dots <= 2 and log in NOTE_TYPES and duration(log, dots) == value:
            return NOTE_TYPES[log], dots
    quarters = divisions / DIVISIONS
    log = min(NOTE_TYPES, key=lambda log: abs(quarters - 4 / 2 ** log))
    return NOTE_TYPES[log], 0


def type_to_fraction(name):
    """Return the duration of a note type name as a Fraction of a whole note.

    Returns None for an unknown name.

    """
    for log, type_name in NOTE_TYPES.items():
        if type_name == name:
            return duration(log)


def from_string(text):
    """Read an ABC length suffix and return a two-tuple (numerator, denominator).

    An empty suffix is ``(1, 1)``. A trailing run of slashes halves the length
    for every slash. Examples::

        >>> from_string('')
        (1, 1)
        >>> from_string('3/2')
        (3, 2)
        >>> from_string('//')
        (1, 4)
        >>> from_string('/8')
        (1, 8)
        >>> from_string('/0')
        (1, 2)

    """
    num, slashes, den = _suffix_re.match(text).groups()
    num = int(num) if num else 1
    den = int(den) if den else 0
    if not den:
        # a missing (or zero) denominator halves for every slash
        den = 2 ** len(slashes)
    return num, den


def to_string(value, explicit_half=False):
    """Write a Fraction (a multiple of the unit note length) as an ABC suffix.

    The fraction is reduced, and written in the shortest form::

        >>> to_string(Fraction(1))
        ''
        >>> to_string(Fraction(3))
        '3'
        >>> to_string(Fraction(1, 2))
        '/'
        >>> to_string(Fraction(1, 2), explicit_half=True)
        '/2'
        >>> to_string(Fraction(1, 4))
        '/4'
        >>> to_string(Fraction(3, 2))
        '3/2'

    """
    value = fractions.Fraction(value)
    num, den = value.numerator, value.denominator
    if den == 1:
        return '' if num == 1 else format(num)
    elif num == 1:
        return '/' if den == 2 and not explicit_half else '/{}'.format(den)
    return '{}/{}'.format(num, den)


def to_divisions(length, unit):
    """Return the duration in divisions of ``length`` times the ``unit`` note length."""
    return round(fractions.Fraction(length) * unit * 4 * DIVISIONS)


def to_length(divisions, unit):
    """Return the Fraction multiple of the ``unit`` note length for the divisions."""
    return fractions.Fraction(divisions, 4 * DIVISIONS) / unit
