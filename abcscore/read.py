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
Read ABC text into a :class:`~.score.Document`.

The text is split in header and body by :mod:`.header`, the body is split
in token streams per voice by :mod:`.voices`, and every stream is built into
a :class:`~.score.Part` by a :class:`~.builder.MusicBuilder`.

Everything the score model can't hold is stored in an
:class:`~.origin.Origin` object, so that :func:`~.write.serialize` can write
the text back as it was::

    >>> import abcscore
    >>> d = abcscore.parse("X:1\nT:Scale\nL:1/4\nK:G\nGABc|defg|]\n")
    >>> d.title, len(d.parts()[0])
    ('Scale', 2)
    >>> d.parts()[0][0][0]
    <Note G 960>
    >>> abcscore.serialize(d) == d.origin.source_text
    True

"""

import fractions
import logging
import re

from . import duration, header, key, meter, voices
from .builder import MusicBuilder
from .origin import Origin
from .score import Direction, Document, Measure, Part, PartInfo


_tempo_re = re.compile(r'(?:(\d+)/(\d+)\s*=\s*)?(\d+)')


def parse(text):
    """Parse the ABC text of one tune and return a :class:`~.score.Document`."""
    lines = text.splitlines()
    h = header.parse(lines)
    body = voices.read(lines[h.body_start:])

    time = meter.from_string(h.meter)
    unit = meter.unit_length_from_string(h.unit_note_length, time)
    key_signature = key.from_string(h.key or '')

    origin = Origin(text)
    origin.reference_number = h.reference_number
    origin.title = h.title
    origin.composer = h.composer
    origin.unit_note_length = h.unit_note_length
    origin.meter = h.meter
    origin.key = h.key
    origin.tempo = h.tempo
    origin.header_lines = h.lines
    origin.extra_fields = h.extra_fields
    origin.directives = h.directives
    origin.comments = h.comments
    origin.voice_lines = {v.id: v.line for v in h.voices if v.line}
    origin.inline_voice_markers = body.inline_voice_markers
    origin.voice_interleave = body.interleave
    origin.group_bar_counts = body.group_bar_counts
    origin.body_voice_lines = bool(body.voice_lines)
    origin.body_directives = body.directives
    origin.body_comments = body.comments
    origin.words = body.words

    streams = body.streams() or [(h.voices[0].id if h.voices else '1', [])]
    parts = []
    part_list = []
    for index, (voice_id, tokens) in enumerate(streams):
        voice = h.voice(voice_id)
        if voice is None and len(streams) == 1 and h.voices:
            voice = h.voices[0]
        clef = part_clef(voice, h.key)
        builder = MusicBuilder(unit, time, key_signature.copy(), clef)
        measures = builder.build(tokens)
        if voice and voice.name:
            name = voice.name
        elif len(streams) == 1:
            name = 'Music'
        else:
            name = 'Voice {}'.format(index + 1)
        part_id = 'P{}'.format(index + 1)
        parts.append(Part(*measures, id=part_id, name=name))
        part_list.append(PartInfo(part_id, name))
        origin.voice_ids.append(voice_id)
        origin.line_breaks[index] = builder.line_breaks
        origin.explicit_half |= builder.explicit_half
        origin.individual_chord_durations |= builder.individual_chord_durations

    if h.tempo:
        add_tempo(parts[0], h.tempo)

    return Document(*parts, title=h.title, composer=h.composer,
                    part_list=part_list, origin=origin)


def part_clef(voice, key_text):
    """Return the Clef for a part, from the voice declaration or the ``K:`` field."""
    name = voice.clef if voice and voice.clef else key.clef_in_field(key_text or '')
    if name:
        return key.clef_from_string(name)
    return key.Clef()


def tempo_direction(text):
    """Return a metronome Direction for the ``Q:`` text, or None."""
    m = _tempo_re.search(text)
    if not m:
        logging.debug("tempo %r not recognized", text)
        return None
    num, den, per_minute = m.groups()
    beat = fractions.Fraction(int(num), int(den)) if num and den and int(den) else fractions.Fraction(1, 4)
    beat_unit, dots = duration.note_type(round(beat * 4 * duration.DIVISIONS))
    return Direction('metronome', beat_unit=beat_unit, per_minute=int(per_minute), placement='above')


def add_tempo(part, text):
    """Insert the metronome Direction for the ``Q:`` text at the start of the part."""
    direction = tempo_direction(text)
    if direction:
        if not len(part):
            part.append(Measure(number='1'))
        part[0].insert(0, direction)


def load(filename, encoding=None):
    """Read the file and return a :class:`~.score.Document`.

    The ``encoding`` defaults to UTF-8.

    """
    with open(filename, encoding=encoding or 'utf-8') as f:
        return parse(f.read())
