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


r"""
Functionality to compute the time position of entries in a measure.

Entries are stored in their original order. A :class:`~.score.Backup`
rewinds the cursor, a :class:`~.score.Forward` advances it, chord members
and grace notes do not advance it at all. An example::

    >>> import abcscore, abcscore.time
    >>> d = abcscore.parse("X:1\nM:2/4\nL:1/8\nK:C\nAB c2 & z4|\n")
    >>> m = d.parts()[0][0]
    >>> t = abcscore.time.Time()
    >>> [r.time for r in t.positions(m)]
    [0, 480, 960, 1920, 0]
    >>> t.length(m), t.nominal(m.attributes.time)
    (1920, 1920)

"""


import collections

from .score import Backup, Forward, Note


#: The result value of the :meth:`~Time.positions` method.
Result = collections.namedtuple("Result", "node time")
Result.node.__doc__ = "The entry."
Result.time.__doc__ = "The onset of the entry in divisions."


class Time:
    """Compute the position of entries and the length of measures, in divisions."""

    def __repr__(self):
        return "<{}>".format(type(self).__name__)

    @staticmethod
    def advance(entry):
        """Return the amount of divisions the entry moves the cursor."""
        if isinstance(entry, Note):
            return entry.duration if entry.advances() else 0
        elif isinstance(entry, Backup):
            return -entry.duration
        elif isinstance(entry, Forward):
            return entry.duration
        return 0

    def positions(self, measure):
        """Yield a :class:`Result` two-tuple(node, time) for every entry in the measure.

        The time of a chord member is the time of the preceding note.

        """
        time = previous = 0
        for entry in measure:
            if isinstance(entry, Note) and entry.chord:
                yield Result(entry, previous)
                continue
            yield Result(entry, time)
            if isinstance(entry, Note):
                previous = time
            time += self.advance(entry)

    def position(self, node):
        """Return the onset of the node in its measure."""
        for result in self.positions(node.parent):
            if result.node is node:
                return result.time

    def cursor(self, measure):
        """Return the cursor position after the last entry of the measure."""
        return sum(self.advance(entry) for entry in measure)

    def length(self, measure):
        """Return the furthest position reached in the measure."""
        time = end = 0
        for entry in measure:
            time += self.advance(entry)
            end = max(end, time)
        return end

    @staticmethod
    def nominal(time_signature):
        """Return the length in divisions of a measure in the time signature."""
        return time_signature.divisions()
