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
Write a :class:`~.score.Document` as ABC text.

Two strategies are combined. If the document was read from ABC text, and
the original text is still available in its :class:`~.origin.Origin`, that
text is returned verbatim (only the ``X:`` field may be replaced). Otherwise
the text is reconstructed from the document, still preferring the raw field
values and line breaks stored in the origin, if any::

    >>> import abcscore
    >>> d = abcscore.parse("X:1\nL:1/8\nK:D\n(3ABc d2 [DF]2-|[DF]4 z4|]\n")
    >>> print(abcscore.serialize(d, replay=False), end='')
    X:1
    L:1/8
    K:D
    (3ABc d2 [DF]2-|[DF]4 z4|]

Options are given as keyword arguments, see :class:`WriterOptions`.

"""

import fractions
import re

from . import duration, harmony, key, meter, pitch
from .origin import Origin
from .score import (
    Attributes, AttributesChange, Backup, Direction, Document, Forward,
    Harmony, Note,
)


#: The default number of notes q for a tuplet of p notes (as in the lexer).
TUPLET_DEFAULT_NORMAL = {
    2: 3,
    3: 2,
    4: 3,
}

#: Shorthand decoration characters, written verbatim.
SHORTHAND_DECORATIONS = '~.HLMOPRSTuv'

_x_re = re.compile(r'^X:.*$', re.M)


class WriterOptions:
    """The options for writing ABC text.

    ``reference_number``
        if not None, the ``X:`` field gets this number
    ``line_width``
        if not 0, and no line breaks were stored, lines are wrapped at a
        measure boundary before they get longer than this width
    ``chord_symbols``, ``dynamics``, ``lyrics``
        whether to write chord symbols, dynamics and lyrics (default True)
    ``replay``
        whether to return the original text if the document has it
        (default True)

    An unknown option raises a ValueError.

    """
    reference_number = None
    line_width = 0
    chord_symbols = True
    dynamics = True
    lyrics = True
    replay = True

    def __init__(self, **options):
        for name, value in options.items():
            if name.startswith('_') or not hasattr(type(self), name):
                raise ValueError("unknown option: {!r}".format(name))
            setattr(self, name, value)

    def __repr__(self):
        return "<{} {}>".format(type(self).__name__, self.__dict__)


class MeasureText:
    """The text of one measure, with the notes that can get lyrics."""
    def __init__(self, text, notes):
        self.text = text
        self.notes = notes


class AbcWriter:
    """Writes a Document as ABC text using :class:`WriterOptions`."""
    def __init__(self, options=None):
        self.options = options or WriterOptions()
        self.unit = fractions.Fraction(1, 8)
        self.time = None
        self.key = None
        self.has_lyrics = False

    def write(self, document):
        """Return the ABC text for the document."""
        origin = document.origin or Origin()
        if self.options.replay and origin.source_text is not None:
            return self.replay(origin.source_text)
        parts = document.parts()
        lines = self.header(document, origin)
        lines.extend(origin.body_directives)
        lines.extend(origin.body_comments)
        lines.extend(self.body(parts, origin))
        lines.extend(origin.words)
        return '\n'.join(lines) + '\n'

    def replay(self, text):
        """Return the original text, with the reference number replaced if desired."""
        if self.options.reference_number is not None:
            return _x_re.sub('X:{}'.format(self.options.reference_number), text, 1)
        return text

    def reference(self, origin):
        """Return the text of the ``X:`` line."""
        if self.options.reference_number is not None:
            return 'X:{}'.format(self.options.reference_number)
        return 'X:{}'.format(origin.reference_number or 1)

    ## header
    def header(self, document, origin):
        """Return the list of header lines."""
        parts = document.parts()
        attributes = first_attributes(parts)
        time = attributes.time if attributes and attributes.time else None
        key_signature = attributes.key if attributes and attributes.key else None
        # the time and key a reader of the header will assume
        if origin.header_lines or origin.meter is not None:
            self.time = meter.from_string(origin.meter)
        else:
            self.time = time
        if origin.header_lines or origin.key is not None:
            self.key = key.from_string(origin.key or '')
        else:
            self.key = key_signature or key.KeySignature()
        self.unit = meter.unit_length_from_string(origin.unit_note_length, self.time or meter.TimeSignature())
        if origin.header_lines:
            return [self.reference(origin) if line.startswith('X:') else line
                    for line in origin.header_lines]

        lines = [self.reference(origin)]
        if document.title:
            lines.append('T:' + document.title)
        if document.composer:
            lines.append('C:' + document.composer)
        lines.extend('{}:{}'.format(field, value) for field, value in origin.extra_fields)
        if origin.meter is not None:
            lines.append('M:' + origin.meter)
        elif time:
            lines.append('M:' + meter.to_string(time))
        if origin.unit_note_length is not None:
            lines.append('L:' + origin.unit_note_length)
        else:
            lines.append('L:{}/{}'.format(self.unit.numerator, self.unit.denominator))
        tempo = origin.tempo or tempo_text(parts)
        if tempo:
            lines.append('Q:' + tempo)
        if len(parts) > 1:
            for index, part in enumerate(parts):
                voice_id = voice_id_for(origin, index)
                lines.append(origin.voice_lines.get(voice_id) or voice_line(voice_id, part))
        lines.extend(origin.directives)
        if origin.key is not None:
            lines.append('K:' + origin.key)
        else:
            k = key.to_string(self.key)
            clef = attributes.clef if attributes else None
            if len(parts) == 1 and clef and clef != key.Clef() and clef.name():
                k += ' clef=' + clef.name()
            lines.append('K:' + k)
        return lines

    ## body
    def body(self, parts, origin):
        """Return the list of body lines for all parts."""
        texts = [PartWriter(self, origin).measures(part) for part in parts]
        lyrics = [any(note.lyrics for note in part.notes()) for part in parts]
        if len(parts) == 1 and not origin.body_voice_lines:
            self.has_lyrics = lyrics[0]
            return self.lines(texts[0], origin.line_breaks.get(0))

        result = []
        done = [0] * len(parts)
        def chunk(index, count=None):
            start = done[index]
            end = len(texts[index]) if count is None else min(start + count, len(texts[index]))
            if end > start or count is None and start == 0:
                breaks = origin.line_breaks.get(index)
                self.has_lyrics = lyrics[index]
                lines = self.lines(texts[index][start:end], breaks, start)
                voice_id = voice_id_for(origin, index)
                marker = origin.inline_voice_markers.get(voice_id)
                if marker and not origin.body_voice_lines and lines:
                    lines[0] = marker + lines[0]
                else:
                    result.append('V:' + voice_id)
                result.extend(lines)
            done[index] = end

        ids = [voice_id_for(origin, index) for index in range(len(parts))]
        for group, counts in zip(origin.voice_interleave, origin.group_bar_counts):
            for voice_id, count in zip(group, counts):
                if voice_id in ids and count:
                    chunk(ids.index(voice_id), count)
        for index in range(len(parts)):
            if done[index] < len(texts[index]) or not texts[index]:
                chunk(index)
        return result

    def lines(self, measures, breaks=None, offset=0):
        """Return the lines of text for a list of MeasureText objects.

        ``breaks`` is the list of stored line breaks (measure counts,
        negative for a continued line), ``offset`` the number of measures of
        the part already written.

        """
        breaks = breaks or []
        line_ends = set(abs(b) for b in breaks if b)
        continued = set(-b for b in breaks if b < 0)
        width = self.options.line_width

        lines = []
        text = ''
        notes = []
        for count, m in enumerate(measures, offset + 1):
            if not breaks and width and text and len(text) + len(m.text) > width:
                lines.append(text)
                lines.extend(self.lyrics(notes))
                text, notes = '', []
            text += m.text
            notes.extend(m.notes)
            if count in line_ends and count < offset + len(measures):
                if count in continued:
                    lines.append(text + '\\')
                else:
                    lines.append(text)
                    lines.extend(self.lyrics(notes))
                    notes = []
                text = ''
        if text:
            lines.append(text)
        lines.extend(self.lyrics(notes))
        return lines

    def lyrics(self, notes):
        """Return the ``w:`` lines for the notes of one line of music."""
        if not self.options.lyrics or not self.has_lyrics:
            return []
        verses = sorted(set(lyric.number for note in notes for lyric in note.lyrics)) or [1]
        if verses[0] != 1:
            verses.insert(0, 1)
        lines = []
        for verse in verses:
            syllables = []
            for note in notes:
                for lyric in note.lyrics:
                    if lyric.number == verse:
                        hyphen = '-' if lyric.syllabic in ('begin', 'middle') else ''
                        syllables.append(lyric.text + hyphen)
                        break
                else:
                    syllables.append('*')
            while syllables and syllables[-1] == '*':
                del syllables[-1]
            text = ''
            for syllable in syllables:
                if text and not text.endswith('-'):
                    text += ' '
                text += syllable
            lines.append('w:' + text)
        return lines


class PartWriter:
    """Writes the measures of one part.

    The state that continues over measure boundaries (unit length, tuplet
    countdown) is kept here.

    """
    def __init__(self, writer, origin):
        self.options = writer.options
        self.unit = writer.unit
        self.time = writer.time
        self.key = writer.key
        self.explicit_half = origin.explicit_half
        self.individual = origin.individual_chord_durations
        self.tuplet_remaining = 0
        self.first = True

    def measures(self, part):
        """Return the list of MeasureText objects for the part."""
        measures = list(part)
        result = []
        for i, m in enumerate(measures):
            following = measures[i+1] if i + 1 < len(measures) else None
            result.append(self.measure(m, following))
        return result

    def length(self, divisions):
        """Return the length suffix for the duration in divisions."""
        value = duration.to_length(divisions, self.unit).limit_denominator(256)
        return duration.to_string(value, self.explicit_half)

    def measure(self, measure, following):
        """Return a MeasureText for the measure."""
        out = []
        notes = []
        if self.first:
            changes = header_changes(measure.attributes, self.time, self.key)
            if changes:
                out.append(attributes_text(changes))
        elif measure.attributes:
            out.append(attributes_text(measure.attributes))
        self.first = False

        left = measure.barline('left')
        if left:
            if left.repeat == 'forward':
                out.append('|:')
            if left.ending_type == 'start' and left.ending_number:
                out.append('[' + left.ending_number)

        entries = list(measure)
        grace = False
        i = 0
        while i < len(entries):
            entry = entries[i]
            if isinstance(entry, Note):
                group = [entry]
                while i + 1 < len(entries) and isinstance(entries[i+1], Note) and entries[i+1].chord:
                    i += 1
                    group.append(entries[i])
                lead = group[0]
                if grace and not lead.grace:
                    out.append('}')
                if lead.space_before:
                    out.append(' ')
                if lead.grace and not grace:
                    out.append('{/' if lead.acciaccatura else '{')
                grace = lead.grace
                if not grace:
                    out.append(self.tuplet_prefix(entries, i - len(group) + 1))
                out.append(self.notes(group))
                if group[0].pitch and not grace:
                    notes.append(group[0])
            else:
                if grace:
                    out.append('}')
                    grace = False
                if entry.space_before:
                    out.append(' ')
                out.append(self.entry(entry))
            i += 1
        if grace:
            out.append('}')

        right = measure.barline('right')
        next_left = following.barline('left') if following is not None else None
        if not right and next_left and next_left.repeat == 'forward':
            bar = ''
        else:
            bar = bar_text(right)
        if left and left.repeat == 'forward' and not entries:
            out.append(' ')
        out.append(bar)
        return MeasureText(''.join(out), notes)

    def tuplet_prefix(self, entries, index):
        """Return the tuplet prefix (e.g. ``'(3'``) if a tuplet starts at the entry."""
        note = entries[index]
        if self.tuplet_remaining:
            self.tuplet_remaining -= 1
            return ''
        mod = note.time_modification
        if not mod:
            return ''
        # count the notes in the run with the same ratio
        run = 0
        for e in entries[index:]:
            if isinstance(e, Note):
                if e.chord or e.grace:
                    continue
                if e.time_modification != mod:
                    break
                run += 1
        p, q = mod.actual, mod.normal
        r = min(p, run)
        self.tuplet_remaining = r - 1
        if r != p:
            return '({}:{}:{}'.format(p, q, r)
        elif q != TUPLET_DEFAULT_NORMAL.get(p, 2):
            return '({}:{}'.format(p, q)
        return '({}'.format(p)

    def written(self, note):
        """Return the written duration of the note in divisions."""
        mod = note.time_modification
        if mod:
            return round(note.duration * mod.actual / mod.normal)
        return note.duration

    def grace_length(self, note):
        """Return the length suffix of a grace note, from its note type."""
        value = duration.type_to_fraction(note.note_type) if note.note_type else None
        if value is None:
            return ''
        value *= 2 - fractions.Fraction(1, 2 ** note.dots)
        return duration.to_string((value / self.unit).limit_denominator(256), self.explicit_half)

    def notes(self, group):
        """Return the text for a note, rest or chord."""
        lead = group[0]
        out = ['(' * sum(1 for s in lead.slurs if s.type == 'start')]
        if lead.rest:
            if lead.measure_rest:
                out.append('X' if lead.invisible else 'Z')
            else:
                out.append(('x' if lead.invisible else 'z') + self.note_length(lead))
        elif len(group) == 1:
            out.append(pitch.to_string(lead.pitch, lead.accidental) + self.note_length(lead))
            if 'start' in lead.ties:
                out.append('-')
        else:
            lengths = set(n.duration for n in group)
            individual = len(lengths) > 1 or self.individual and not lead.grace
            tie_all = all('start' in n.ties for n in group)
            out.append('[')
            for n in group:
                out.append(pitch.to_string(n.pitch, n.accidental))
                if individual:
                    out.append(self.note_length(n))
                if 'start' in n.ties and not tie_all:
                    out.append('-')
            out.append(']')
            if not individual:
                out.append(self.note_length(lead))
            if tie_all:
                out.append('-')
        out.append(')' * sum(1 for n in group for s in n.slurs if s.type == 'stop'))
        return ''.join(out)

    def note_length(self, note):
        if note.grace:
            return self.grace_length(note)
        return self.length(self.written(note))

    def entry(self, entry):
        """Return the text for an entry that is not a Note."""
        if isinstance(entry, Harmony):
            if self.options.chord_symbols:
                return '"{}"'.format(harmony.to_string(entry))
        elif isinstance(entry, Direction):
            if entry.kind == 'dynamics':
                if self.options.dynamics:
                    return '!{}!'.format(entry.value)
            elif entry.kind == 'words' and entry.text:
                text = entry.text
                if text.startswith('[L:'):
                    self.unit = meter.unit_length_from_string(text[3:-1])
                    return text
                elif text.startswith(('!', '[')) or text in SHORTHAND_DECORATIONS:
                    return text
                return '"^{}"'.format(text)
        elif isinstance(entry, Backup):
            return '&'
        elif isinstance(entry, Forward):
            return 'x' + self.length(entry.duration)
        elif isinstance(entry, AttributesChange):
            return attributes_text(entry.attributes)
        return ''


def first_attributes(parts):
    """Return the Attributes of the first measure of the first part, or None."""
    for part in parts:
        for measure in part:
            return measure.attributes
        break


def header_changes(attributes, time, key_signature):
    """Return Attributes with the time and key that differ from the header, or None.

    The first measure of a part can change what the header declares (e.g. a
    body ``M:`` line before the first bar).

    """
    if attributes:
        changes = Attributes()
        if attributes.time and attributes.time != time:
            changes.time = attributes.time
        if attributes.key and attributes.key != key_signature:
            changes.key = attributes.key
        if changes.time or changes.key:
            return changes


def attributes_text(attributes):
    """Return inline fields (``[M:..]``, ``[K:..]``) for an attributes change."""
    text = ''
    if attributes.time:
        text += '[M:{}]'.format(meter.to_string(attributes.time))
    if attributes.key:
        k = key.to_string(attributes.key)
        if attributes.clef and attributes.clef.name():
            k += ' clef=' + attributes.clef.name()
        text += '[K:{}]'.format(k)
    return text


def bar_text(barline):
    """Return the bar line text for the right barline (None for a regular bar)."""
    if barline:
        if barline.repeat == 'backward':
            return ':|'
        elif barline.style == 'light-heavy':
            return '|]'
        elif barline.style == 'light-light':
            return '||'
        elif barline.style == 'heavy-light':
            return '[|'
    return '|'


def tempo_text(parts):
    """Return the ``Q:`` text from the first metronome Direction, or None."""
    for part in parts:
        for measure in part:
            for d in measure / Direction:
                if d.kind == 'metronome' and d.per_minute:
                    beat = duration.type_to_fraction(d.beat_unit) or fractions.Fraction(1, 4)
                    return '{}/{}={}'.format(beat.numerator, beat.denominator, d.per_minute)
            break
        break


def voice_id_for(origin, index):
    """Return the voice id for the part with the index."""
    if index < len(origin.voice_ids):
        return origin.voice_ids[index]
    return format(index + 1)


def voice_line(voice_id, part):
    """Return a ``V:`` declaration line for a part."""
    text = 'V:' + voice_id
    for measure in part:
        attributes = measure.attributes
        if attributes and attributes.clef and attributes.clef != key.Clef() and attributes.clef.name():
            text += ' clef=' + attributes.clef.name()
        break
    if part.name:
        text += ' name="{}"'.format(part.name)
    return text


def serialize(document, **options):
    """Return the ABC text for the :class:`~.score.Document`.

    See :class:`WriterOptions` for the keyword arguments.

    """
    if not isinstance(document, Document):
        raise TypeError("expected a Document, not {}".format(type(document).__name__))
    return AbcWriter(WriterOptions(**options)).write(document)
