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
Build the measures of a part from the tokens of one voice.

The :class:`MusicBuilder` is a state machine that handles the tokens one by
one. The state it keeps is split in small objects, one per concern:

* :class:`PendingItems`: chord symbols, dynamics and decorations waiting for
  the next note,
* :class:`PendingChanges`: key and meter changes waiting for the measure
  to be finished,
* :class:`ChordState`: the notes between ``[`` and ``]``,
* :class:`TupletState`: the active tuplet ratio and the number of notes left,
* :class:`SlurState`: the slur nesting depth and the slur starts waiting for
  the next note,
* :class:`LyricCursor`: the notes that can receive lyrics, and how far lyric
  lines have been applied.

Ties are completed after the whole voice is built: every tie start is paired
with the next note of the same step and octave.

"""

import fractions
import logging

from parce.util import Dispatcher

from . import duration, harmony, key, meter
from .score import (
    Attributes, Backup, Barline, Direction, Lyric, Measure, Note, Slur,
    TimeModification, initial_attributes,
)


#: Decorations that are dynamics.
DYNAMICS = frozenset((
    'pppppp', 'ppppp', 'pppp', 'ppp', 'pp', 'p',
    'mp', 'mf',
    'f', 'ff', 'fff', 'ffff', 'fffff', 'ffffff',
    'sf', 'sfz', 'sffz', 'sfp', 'sfpp', 'fp', 'rf', 'rfz', 'fz', 'pf',
))

#: Bar type to barline (style, repeat).
BAR_STYLES = {
    'start-repeat': ('heavy-light', 'forward'),
    'end-repeat': ('light-heavy', 'backward'),
    'final': ('light-heavy', None),
    'double': ('light-light', None),
    'heavy-light': ('heavy-light', None),
}


class PendingItems:
    """Entries (harmonies and directions) waiting to be added before the next note."""
    def __init__(self):
        self.items = []

    def push(self, entry):
        self.items.append(entry)

    def take(self):
        """Return the waiting entries in their original order and forget them."""
        items, self.items = self.items, []
        return items


class PendingChanges:
    """Attribute changes waiting for the measure to be finished.

    A change is consumed exactly once, by the next finished measure.

    """
    def __init__(self):
        self.key = None
        self.time = None
        self.clef = None

    def take(self):
        """Return an Attributes object with the changes (or None) and forget them."""
        if self.key or self.time or self.clef:
            attributes = Attributes(time=self.time, key=self.key, clef=self.clef)
            self.key = self.time = self.clef = None
            return attributes


class ChordState:
    """The note tokens between ``[`` and ``]``, with the indices of tied notes."""
    def __init__(self):
        self.active = False
        self.members = []
        self.ties = set()

    def begin(self):
        self.active = True
        self.members = []
        self.ties = set()

    def add(self, token):
        self.members.append(token)

    def tie(self):
        """Tie the last note that was added."""
        if self.members:
            self.ties.add(len(self.members) - 1)

    def end(self):
        """Return the tuple (members, ties) and stop accumulating."""
        self.active = False
        return self.members, self.ties


class TupletState:
    """The active tuplet: ``p`` notes in the time of ``q``, ``remaining`` notes to go."""
    def __init__(self):
        self.p = self.q = None
        self.remaining = 0

    def start(self, p, q, r):
        self.p, self.q, self.remaining = p, q, r

    def active(self):
        return self.remaining > 0

    def scale(self, divisions):
        """Return the divisions scaled by the tuplet ratio, if a tuplet is active."""
        if self.active():
            return round(divisions * self.q / self.p)
        return divisions

    def modification(self):
        """Return the TimeModification for a note in the tuplet, or None."""
        if self.active():
            return TimeModification(self.p, self.q)

    def count(self):
        """Count one note (or chord) of the tuplet."""
        if self.active():
            self.remaining -= 1


class SlurState:
    """The slur nesting depth and the number of slur starts not yet attached."""
    def __init__(self):
        self.depth = 0
        self.pending = 0

    def open(self):
        self.depth += 1
        self.pending += 1

    def starts(self):
        """Return the list of Slur starts for the next note, numbered by depth."""
        slurs = []
        while self.pending:
            slurs.append(Slur('start', self.depth - self.pending + 1))
            self.pending -= 1
        return slurs

    def close(self):
        """Return the Slur stop, or None if no slur is open."""
        if self.depth:
            self.depth -= 1
            if self.pending > self.depth:
                self.pending = self.depth
            return Slur('stop', self.depth + 1)


class LyricCursor:
    """Assigns the syllables of lyric lines to the notes before them.

    A lyric line applies to the notes added since the previous lyric line. A
    lyric line that directly follows another applies to the same notes as
    the next verse.

    """
    def __init__(self):
        self.notes = []
        self.position = 0
        self.last_start = None
        self.verse = 1
        self.added = False

    def add(self, note):
        """Add a note that can receive a syllable."""
        self.notes.append(note)
        self.added = True

    def apply(self, syllables):
        """Apply the syllables to the notes."""
        if not self.added and self.last_start is not None:
            start = self.last_start
            self.verse += 1
        else:
            start = self.position
            self.verse = 1
        previous = None
        for syllable, note in zip(syllables, self.notes[start:]):
            if syllable not in ('', '*', '_'):
                hyphen = syllable.endswith('-')
                text = syllable[:-1] if hyphen else syllable
                if previous and previous.endswith('-'):
                    syllabic = 'middle' if hyphen else 'end'
                else:
                    syllabic = 'begin' if hyphen else 'single'
                note.lyrics.append(Lyric(text, syllabic, self.verse))
            previous = syllable
        self.last_start = start
        self.position = len(self.notes)
        self.added = False


class MusicBuilder:
    """Builds the list of measures for one voice from its tokens.

    ``unit`` is the unit note length (a Fraction of a whole note), ``time``,
    ``key`` and ``clef`` the attributes of the first measure.

    After :meth:`build`, ``line_breaks`` contains the measure counts at each
    line end (negative for a continued line), and ``individual_chord_durations``
    and ``explicit_half`` tell something about the way the lengths were
    written.

    """

    _token = Dispatcher()

    def __init__(self, unit, time=None, key=None, clef=None):
        self.unit = unit
        self.time = time or meter.TimeSignature()
        self.key = key
        self.clef = clef
        self.measures = []
        self.entries = []
        self.barlines = []
        self.position = 0
        self.pending = PendingItems()
        self.changes = PendingChanges()
        self.chord = ChordState()
        self.tuplet = TupletState()
        self.slurs = SlurState()
        self.lyrics = LyricCursor()
        self.grace = False
        self.acciaccatura = False
        self.ending = None
        self.broken = None
        self.space = False
        self.last_group = []
        self.last_note = None
        self.line_breaks = []
        self.individual_chord_durations = False
        self.explicit_half = False
        self._initial_time = self.time

    def build(self, tokens):
        """Handle all tokens and return the list of measures."""
        for token in tokens:
            self._token(token.type, token)
        self.flush_pending()
        if self.entries:
            self.finish_measure()
        resolve_ties(self.measures)
        return self.measures

    ## helpers
    def take_space(self):
        """Return True if whitespace preceded, and reset the flag."""
        space, self.space = self.space, False
        return space

    def length(self, token):
        """Return the length of the token as a Fraction multiple of the unit."""
        if token.suffix == '/2':
            self.explicit_half = True
        return fractions.Fraction(token.num, token.den)

    def create_note(self, pitch, length, grace=False, **attrs):
        """Create a Note with the length in units, scaled by an active tuplet."""
        written = duration.to_divisions(length, self.unit)
        note_type, dots = duration.note_type(written)
        return Note(pitch,
            0 if grace else self.tuplet.scale(written),
            grace = grace,
            acciaccatura = grace and self.acciaccatura,
            time_modification = None if grace else self.tuplet.modification(),
            note_type = note_type,
            dots = dots,
            **attrs)

    def flush_pending(self):
        """Add the waiting harmonies and directions to the measure."""
        self.entries.extend(self.pending.take())

    def add_notes(self, notes):
        """Add a note, rest or the notes of a chord to the measure."""
        space = self.take_space()
        self.flush_pending()
        lead = notes[0]
        lead.space_before = space
        if not lead.rest:
            lead.slurs.extend(self.slurs.starts())
        if not lead.grace and self.broken:
            stretch(notes, self.broken)
            self.broken = None
        self.entries.extend(notes)
        if not lead.grace:
            self.position += lead.duration
            self.tuplet.count()
        for note in notes:
            if note.pitch and not (note.grace or note.chord):
                self.lyrics.add(note)
        self.last_group = notes
        self.last_note = notes[-1]

    def left_barline(self):
        """Return the left barline of the current measure, creating it if needed."""
        for b in self.barlines:
            if b.location == 'left':
                return b
        b = Barline('left')
        self.barlines.append(b)
        return b

    def finish_measure(self, bar_type=None):
        """Finish the current measure, ``bar_type`` determines the right barline."""
        attributes = None
        if not self.measures:
            attributes = initial_attributes(self._initial_time, self.key, self.clef)
        changes = self.changes.take()
        if changes:
            if attributes:
                attributes.time = changes.time or attributes.time
                attributes.key = changes.key or attributes.key
                attributes.clef = changes.clef or attributes.clef
            else:
                attributes = changes
        style, repeat = BAR_STYLES.get(bar_type, (None, None))
        if style or repeat or self.ending:
            barline = Barline('right', style, repeat)
            if self.ending:
                barline.ending_number = self.ending
                barline.ending_type = 'stop'
            self.barlines.append(barline)
        self.ending = None
        self.measures.append(Measure(*self.entries,
            number = format(len(self.measures) + 1),
            attributes = attributes,
            barlines = self.barlines))
        self.entries = []
        self.barlines = []
        self.position = 0

    ## token handlers
    @_token('space')
    def space_token(self, token):
        if not self.chord.active:
            self.space = True

    @_token('note')
    def note_token(self, token):
        if self.chord.active:
            self.chord.add(token)
            return
        note = self.create_note(token.pitch, self.length(token), self.grace,
                                accidental=token.accidental)
        self.add_notes([note])

    @_token('rest')
    def rest_token(self, token):
        if self.chord.active:
            return
        if token.value in 'ZX':
            note_type, dots = duration.note_type(self.time.divisions())
            note = Note(None, self.time.divisions(), rest=True, measure_rest=True,
                        invisible=token.value == 'X', note_type=note_type, dots=dots)
        else:
            note = self.create_note(None, self.length(token), rest=True,
                                    invisible=token.value == 'x')
        self.add_notes([note])

    @_token('chord_start')
    def chord_start_token(self, token):
        self.chord.begin()

    @_token('chord_end')
    def chord_end_token(self, token):
        if not self.chord.active:
            return
        members, ties = self.chord.end()
        if not members:
            return
        chord_length = self.length(token)
        individual = not token.has_length() and any(m.has_length() for m in members)
        if individual:
            self.individual_chord_durations = True
        notes = []
        for i, member in enumerate(members):
            length = self.length(member) if individual else chord_length
            note = self.create_note(member.pitch, length, self.grace,
                                    accidental=member.accidental, chord=i > 0)
            if i in ties:
                note.ties.append('start')
            notes.append(note)
        self.add_notes(notes)

    @_token('grace_start')
    def grace_start_token(self, token):
        self.grace = True
        self.acciaccatura = token.acciaccatura

    @_token('grace_end')
    def grace_end_token(self, token):
        self.grace = False
        self.acciaccatura = False

    @_token('tie')
    def tie_token(self, token):
        if self.chord.active:
            self.chord.tie()
            return
        notes = [n for n in self.last_group if not n.rest]
        if not notes:
            logging.debug("tie without a preceding note dropped")
        for note in notes:
            if 'start' not in note.ties:
                note.ties.append('start')

    @_token('slur_start')
    def slur_start_token(self, token):
        self.slurs.open()

    @_token('slur_end')
    def slur_end_token(self, token):
        slur = self.slurs.close()
        if slur and self.last_note:
            self.last_note.slurs.append(slur)
        else:
            logging.debug("unmatched slur end dropped")

    @_token('tuplet')
    def tuplet_token(self, token):
        self.tuplet.start(token.p, token.q, token.r)

    @_token('broken')
    def broken_token(self, token):
        notes = self.last_group
        if not notes or notes[0].grace:
            logging.debug("broken rhythm %r without a preceding note dropped", token.text)
            return
        short = fractions.Fraction(1, 2 ** token.count)
        long = 2 - short
        before, after = (long, short) if token.value == '>' else (short, long)
        old = notes[0].duration
        stretch(notes, before)
        if notes[0] in self.entries:
            self.position += notes[0].duration - old
        self.broken = after

    @_token('bar')
    def bar_token(self, token):
        self.flush_pending()
        self.space = False
        bar_type = token.value
        if bar_type == 'double-repeat':
            self.finish_measure('end-repeat')
            self.start_repeat()
        elif bar_type in ('end-repeat', 'end-repeat-final'):
            self.finish_measure('end-repeat')
        elif bar_type == 'start-repeat':
            if self.entries:
                self.finish_measure()
            self.start_repeat()
        elif bar_type == 'final':
            self.finish_measure('final')
        elif self.entries or self.barlines:
            self.finish_measure(bar_type)

    def start_repeat(self):
        """Give the current measure a forward repeat at the left."""
        b = self.left_barline()
        b.style, b.repeat = BAR_STYLES['start-repeat']

    @_token('ending')
    def ending_token(self, token):
        b = self.left_barline()
        b.ending_number = token.value
        b.ending_type = 'start'
        self.ending = token.value

    @_token('chord_symbol')
    def chord_symbol_token(self, token):
        entry = harmony.from_string(token.value)
        if entry:
            entry.space_before = self.take_space()
            self.pending.push(entry)
        else:
            logging.debug("chord symbol %r not recognized, dropped", token.value)

    @_token('decoration')
    def decoration_token(self, token):
        if token.value in DYNAMICS:
            entry = Direction('dynamics', value=token.value, placement='below')
        else:
            entry = Direction('words', text=token.text)
        entry.space_before = self.take_space()
        self.pending.push(entry)

    @_token('lyrics')
    def lyrics_token(self, token):
        self.lyrics.apply(token.syllables)

    @_token('overlay')
    def overlay_token(self, token):
        if self.position > 0:
            entry = Backup(self.position)
            entry.space_before = self.take_space()
            self.entries.append(entry)
            self.position = 0

    @_token('inline_field')
    def inline_field_token(self, token):
        field, value = token.value.split(':', 1)
        value = value.strip()
        if field == 'L':
            self.unit = meter.unit_length_from_string(value, self.time)
            self.add_words('[L:{}]'.format(value))
        elif field == 'K':
            self.changes.key = key.from_string(value)
            clef = key.clef_in_field(value)
            if clef:
                self.changes.clef = key.clef_from_string(clef)
        elif field == 'M':
            self.time = self.changes.time = meter.from_string(value)
        else:
            logging.debug("inline field %r kept as text", token.text)
            self.add_words(token.text)

    def add_words(self, text):
        """Add a words direction to the measure."""
        entry = Direction('words', text=text)
        entry.space_before = self.take_space()
        self.entries.append(entry)

    @_token('line_break')
    def line_break_token(self, token):
        count = len(self.measures)
        self.line_breaks.append(-count if token.continuation else count)
        self.space = False


def stretch(notes, factor):
    """Multiply the duration of the notes with factor (for broken rhythm)."""
    for note in notes:
        note.duration = round(note.duration * factor)
        if not note.time_modification:
            note.note_type, note.dots = duration.note_type(note.duration)


def resolve_ties(measures):
    """Pair every tie start with the next note of the same step and octave."""
    notes = [n for m in measures for n in m / Note if n.pitch and not n.grace]
    for i, note in enumerate(notes):
        if 'start' in note.ties:
            for other in notes[i+1:]:
                if other.pitch.same_note(note.pitch):
                    if 'stop' not in other.ties:
                        other.ties.insert(0, 'stop')
                    break
            else:
                logging.debug("tie start on %s without a matching note", format(note.pitch))
