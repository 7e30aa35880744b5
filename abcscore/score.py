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
The score model.

A score is a tree of :class:`~.node.Node` objects::

    Document
     ╰╴Part (one per voice)
        ╰╴Measure
           ├╴Note
           ├╴Backup / Forward
           ├╴Direction / Harmony
           ╰╴AttributesChange

The entries of a measure are kept in their original order, which is not
necessarily the time order: a :class:`Backup` rewinds the time cursor of the
measure, chord members and grace notes do not advance it. Use
:class:`~.time.Time` to compute the onset of entries.

Values that are not nodes (pitch, time and key signature, clef, barlines,
lyrics, slurs) are plain objects that compare by value.

Nodes compare by identity; use :meth:`~.node.Node.equals` to compare two
(sub)trees by value. The ``space_before`` attribute of entries and the
:attr:`Document.origin` are not compared, they only serve to write back the
text in the way it was read.

"""

from .duration import DIVISIONS
from .node import Node


class _Value:
    """Base class for simple value objects that compare by their ``_fields``."""
    _fields = ()

    def _as_tuple(self):
        return tuple(getattr(self, name) for name in self._fields)

    def __eq__(self, other):
        return type(other) is type(self) and self._as_tuple() == other._as_tuple()

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def __repr__(self):
        return "<{} {}>".format(type(self).__name__, ", ".join(
            "{}={!r}".format(name, value)
            for name, value in zip(self._fields, self._as_tuple())
                if value is not None))


class Attributes(_Value):
    """The attributes established or changed at a measure.

    Every attribute may be None, meaning it is unchanged.

    """
    _fields = ('divisions', 'time', 'key', 'clef')

    def __init__(self, divisions=None, time=None, key=None, clef=None):
        self.divisions = divisions      #: divisions per quarter note
        self.time = time                #: :class:`~.meter.TimeSignature`
        self.key = key                  #: :class:`~.key.KeySignature`
        self.clef = clef                #: :class:`~.key.Clef`


class Barline(_Value):
    """A barline at the ``'left'`` or ``'right'`` of a measure.

    ``style`` is None for a regular barline, or a name like ``'light-heavy'``.
    ``repeat`` is None, ``'forward'`` or ``'backward'``. An ending (volta) is
    described by ``ending_number`` (e.g. ``'1'`` or ``'1,2'``) and
    ``ending_type`` (``'start'`` or ``'stop'``).

    """
    _fields = ('location', 'style', 'repeat', 'ending_number', 'ending_type')

    def __init__(self, location, style=None, repeat=None, ending_number=None, ending_type=None):
        self.location = location
        self.style = style
        self.repeat = repeat
        self.ending_number = ending_number
        self.ending_type = ending_type


class Lyric(_Value):
    """A lyric syllable; ``syllabic`` is ``'single'``, ``'begin'``, ``'middle'``
    or ``'end'``, ``number`` the verse.

    """
    _fields = ('text', 'syllabic', 'number')

    def __init__(self, text, syllabic='single', number=1):
        self.text = text
        self.syllabic = syllabic
        self.number = number


class Slur(_Value):
    """A slur ``'start'`` or ``'stop'`` with its nesting number."""
    _fields = ('type', 'number')

    def __init__(self, type, number=1):
        self.type = type
        self.number = number


class TimeModification(_Value):
    """A tuplet ratio: ``actual`` notes in the time of ``normal`` notes."""
    _fields = ('actual', 'normal')

    def __init__(self, actual, normal):
        self.actual = actual
        self.normal = normal


class PartInfo(_Value):
    """A part declaration in the part list."""
    _fields = ('id', 'name')

    def __init__(self, id, name=None):
        self.id = id
        self.name = name


class ScoreNode(Node):
    """Base class for the nodes of the score tree.

    The attributes named in ``_fields`` are compared by :meth:`body_equals`
    and shown by ``repr()``.

    """
    _fields = ()

    def body_equals(self, other):
        return all(getattr(self, name) == getattr(other, name) for name in self._fields)

    def _repr_fields(self):
        """Return the text describing our attributes in ``repr()``."""
        return " ".join("{}={!r}".format(name, getattr(self, name))
            for name in self._fields if getattr(self, name) not in (None, False, [], ()))

    def __repr__(self):
        text = self._repr_fields()
        if len(self):
            c = "child" if len(self) == 1 else "children"
            text = "{} ({} {})".format(text, len(self), c).strip()
        return "<{}{}>".format(type(self).__name__, " " + text if text else "")


class Document(ScoreNode):
    """The root of a score, containing :class:`Part` nodes.

    ``part_list`` is the list of :class:`PartInfo` declarations. ``origin`` is
    None or an :class:`~.origin.Origin` describing the text the document was
    read from.

    """
    _fields = ('title', 'composer', 'part_list')

    def __init__(self, *parts, title=None, composer=None, part_list=None, origin=None):
        super().__init__(*parts)
        self.title = title
        self.composer = composer
        self.part_list = part_list if part_list is not None else []
        self.origin = origin

    def _repr_fields(self):
        return repr(self.title) if self.title else ""

    def parts(self):
        """Return the list of parts."""
        return list(self / Part)


class Part(ScoreNode):
    """A part (one voice), containing :class:`Measure` nodes."""
    _fields = ('id', 'name')

    def __init__(self, *measures, id='P1', name=None):
        super().__init__(*measures)
        self.id = id
        self.name = name

    def notes(self):
        """Yield all notes (and rests) of this part."""
        return self // Note

    def unmatched_ties(self):
        """Yield the notes that start a tie not stopped by a later note."""
        pending = []
        for note in self // Note:
            if note.grace or note.pitch is None:
                continue
            if 'stop' in note.ties:
                for start in pending:
                    if start.pitch.same_note(note.pitch):
                        pending.remove(start)
                        break
            if 'start' in note.ties:
                pending.append(note)
        yield from pending


class Measure(ScoreNode):
    """A measure, containing the entries.

    ``number`` is a string. ``attributes`` is None or the
    :class:`Attributes` that are set at this measure, ``barlines`` a list of
    :class:`Barline` objects.

    """
    _fields = ('number', 'attributes', 'barlines')

    def __init__(self, *entries, number='1', attributes=None, barlines=None):
        super().__init__(*entries)
        self.number = number
        self.attributes = attributes
        self.barlines = barlines if barlines is not None else []

    def _repr_fields(self):
        return repr(self.number)

    def barline(self, location):
        """Return the barline at the ``'left'`` or ``'right'``, if any."""
        for b in self.barlines:
            if b.location == location:
                return b


class Entry(ScoreNode):
    """Base class for the entries of a measure.

    ``space_before`` is True if the entry was preceded by whitespace in the
    text it was read from.

    """
    space_before = False


class Note(Entry):
    """A note, rest or unpitched note.

    A note has a ``pitch``; a rest has ``rest`` set to True (and may be a
    ``measure_rest`` or ``invisible``). The ``duration`` is in divisions.

    ``chord`` is True for the second and further notes of a chord, they share
    the onset of the preceding note. ``grace`` notes have a duration of 0,
    ``acciaccatura`` is True for grace notes written with a slash.

    ``ties`` is a list containing ``'stop'`` and/or ``'start'``, ``slurs``
    a list of :class:`Slur` objects and ``lyrics`` a list of :class:`Lyric`
    objects. ``time_modification`` is set for notes in a tuplet. ``accidental``
    is the display hint of a written accidental, and ``note_type`` and ``dots``
    describe the written note value.

    """
    _fields = (
        'pitch', 'rest', 'measure_rest', 'invisible', 'unpitched', 'duration',
        'voice', 'staff', 'chord', 'grace', 'acciaccatura', 'ties', 'slurs',
        'time_modification', 'lyrics', 'accidental', 'note_type', 'dots',
    )

    def __init__(self, pitch=None, duration=0, *,
        rest=False,
        measure_rest=False,
        invisible=False,
        unpitched=False,
        voice=1,
        staff=1,
        chord=False,
        grace=False,
        acciaccatura=False,
        time_modification=None,
        accidental=None,
        note_type=None,
        dots=0,
    ):
        super().__init__()
        self.pitch = pitch
        self.duration = duration
        self.rest = rest
        self.measure_rest = measure_rest
        self.invisible = invisible
        self.unpitched = unpitched
        self.voice = voice
        self.staff = staff
        self.chord = chord
        self.grace = grace
        self.acciaccatura = acciaccatura
        self.ties = []
        self.slurs = []
        self.time_modification = time_modification
        self.lyrics = []
        self.accidental = accidental
        self.note_type = note_type
        self.dots = dots

    def _repr_fields(self):
        if self.rest:
            text = 'Z' if self.measure_rest else 'x' if self.invisible else 'z'
        else:
            text = format(self.pitch) if self.pitch else '?'
        flags = [name for name in ('chord', 'grace') if getattr(self, name)]
        if self.tie:
            flags.append('tie=' + self.tie)
        return " ".join([text, format(self.duration)] + flags)

    @property
    def tie(self):
        """``'start'``, ``'stop'``, ``'continue'`` or None."""
        if 'start' in self.ties:
            return 'continue' if 'stop' in self.ties else 'start'
        elif 'stop' in self.ties:
            return 'stop'

    def advances(self):
        """Return True if this note advances the time cursor."""
        return not (self.chord or self.grace)


class Backup(Entry):
    """Rewind the time cursor by ``duration`` divisions."""
    _fields = ('duration',)

    def __init__(self, duration):
        super().__init__()
        self.duration = duration


class Forward(Entry):
    """Advance the time cursor by ``duration`` divisions without sounding."""
    _fields = ('duration', 'voice', 'staff')

    def __init__(self, duration, voice=1, staff=1):
        super().__init__()
        self.duration = duration
        self.voice = voice
        self.staff = staff


class Direction(Entry):
    """A dynamics, metronome or words marking.

    ``kind`` is ``'dynamics'`` (with ``value``, e.g. ``'mf'``),
    ``'metronome'`` (with ``beat_unit`` and ``per_minute``) or ``'words'``
    (with ``text``).

    """
    _fields = ('kind', 'value', 'text', 'beat_unit', 'per_minute', 'placement')

    def __init__(self, kind, value=None, text=None, beat_unit=None, per_minute=None, placement=None):
        super().__init__()
        self.kind = kind
        self.value = value
        self.text = text
        self.beat_unit = beat_unit
        self.per_minute = per_minute
        self.placement = placement


class Harmony(Entry):
    """A chord symbol."""
    _fields = ('root_step', 'root_alter', 'kind', 'bass_step', 'bass_alter')

    def __init__(self, root_step, root_alter=0, kind='major', bass_step=None, bass_alter=0):
        super().__init__()
        self.root_step = root_step
        self.root_alter = root_alter
        self.kind = kind
        self.bass_step = bass_step
        self.bass_alter = bass_alter


class AttributesChange(Entry):
    """A change of attributes inside a measure."""
    _fields = ('attributes',)

    def __init__(self, attributes):
        super().__init__()
        self.attributes = attributes


def initial_attributes(time=None, key=None, clef=None):
    """Return the Attributes for the first measure of a part."""
    return Attributes(DIVISIONS, time, key, clef)
