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
Parse the header of an ABC tune.

The header runs from the first line up to and including the ``K:`` field.
Some fields conventionally follow the key field (voice declarations,
``I:`` and ``N:`` fields) and directives and comments may be there too; these
are still part of the header when they come before the first line of music.

A ``V:`` line after the key field that has no parameters (only the voice id)
switches voices in the body and ends the header.

"""

import re

from . import key


#: Fields that are part of the header when they follow the ``K:`` field.
POST_KEY_FIELDS = ('I', 'N')

_field_re = re.compile(r'([A-Za-z]):\s*(.*)')
_param_re = re.compile(r'''(\w+)=("[^"]*"|'[^']*'|\S+)''')
_voice_words_re = re.compile(
    r'\b(Program|merge|up|down|bass|treble|alto|tenor|soprano|octave|snm|stem)\b', re.I)


class Voice:
    """A voice declaration from a ``V:`` field.

    ``id`` is the voice id, ``name`` the display name (from ``name=`` or
    ``nm=``, falling back to the id), ``clef`` the clef name if given and
    ``line`` the complete line of text.

    """
    def __init__(self, id, name=None, clef=None, line=None, params=None):
        self.id = id
        self.name = name or id
        self.clef = clef
        self.line = line
        self.params = params or {}

    def __repr__(self):
        return "<{} {!r} name={!r}>".format(self.__class__.__name__, self.id, self.name)

    @classmethod
    def from_string(cls, text, line=None):
        """Create a Voice from the value of a ``V:`` field, e.g. ``'T1 clef=bass nm="Tenor"'``."""
        text = text.strip()
        voice_id = text.split()[0] if text else '1'
        params = {name.lower(): value.strip('"\'') for name, value in _param_re.findall(text)}
        name = params.get('name') or params.get('nm')
        clef = params.get('clef') or key.clef_in_field(text[len(voice_id):])
        return cls(voice_id, name, clef, line, params)

    @staticmethod
    def has_params(text):
        """Return True if the ``V:`` field value declares something besides the id."""
        return bool(_param_re.search(text) or _voice_words_re.search(text))

    def update(self, other):
        """Take over the name, clef and line of another declaration of the same voice."""
        if 'name' in other.params or 'nm' in other.params:
            self.name = other.name
        if other.clef:
            self.clef = other.clef
        self.params.update(other.params)
        self.line = other.line


class Header:
    """The header of an ABC tune.

    The raw field texts are stored in the attributes ``reference_number``,
    ``title``, ``composer``, ``meter``, ``unit_note_length``, ``tempo`` and
    ``key`` (None if the field was absent). ``voices`` is the list of
    :class:`Voice` declarations, ``extra_fields`` a list of (letter, value)
    tuples for other fields.

    ``lines`` lists all header lines in their original order,
    ``directives`` the ``%%`` lines and ``comments`` the ``%`` lines.
    ``body_start`` is the index of the first line of the body.

    """
    def __init__(self):
        self.reference_number = None
        self.title = None
        self.composer = None
        self.meter = None
        self.unit_note_length = None
        self.tempo = None
        self.key = None
        self.voices = []
        self.extra_fields = []
        self.directives = []
        self.comments = []
        self.lines = []
        self.body_start = 0

    def voice(self, voice_id):
        """Return the Voice with the id, or None."""
        for v in self.voices:
            if v.id == voice_id:
                return v

    def reference(self):
        """Return the reference number as an integer, or None."""
        if self.reference_number:
            m = re.match(r'\d+', self.reference_number)
            if m:
                return int(m.group())


def parse(lines):
    """Parse the header from the list of lines and return a :class:`Header`."""
    h = Header()
    found_key = False
    after_key_done = False

    def in_header(index, text):
        """Add a line to the header; after the key it also moves the body start."""
        h.lines.append(text)
        if found_key:
            h.body_start = index + 1

    for i, raw in enumerate(lines):
        line = raw.strip()
        if not line:
            continue

        if line.startswith('%'):
            if not after_key_done:
                if line.startswith('%%'):
                    h.directives.append(line)
                    in_header(i, line)
                else:
                    h.comments.append(raw)
                    in_header(i, raw)
            continue

        m = _field_re.match(line)
        if m and (not found_key or m.group(1) == 'V' or m.group(1) in POST_KEY_FIELDS):
            field, value = m.group(1), m.group(2).strip()
            if field == 'V':
                voice = Voice.from_string(value, raw)
                switch = found_key and not Voice.has_params(value)
                if switch:
                    after_key_done = True
                existing = h.voice(voice.id)
                if existing is None:
                    h.voices.append(voice)
                elif not switch:
                    existing.update(voice)
                if not found_key or not (switch or after_key_done):
                    in_header(i, raw)
            elif found_key:
                if not after_key_done:
                    h.extra_fields.append((field, value))
                    in_header(i, line)
            elif field == 'X':
                h.reference_number = value
                in_header(i, line)
            elif field == 'T' and h.title is None:
                h.title = value
                in_header(i, line)
            elif field == 'C' and h.composer is None:
                h.composer = value
                in_header(i, line)
            elif field == 'M':
                h.meter = value
                in_header(i, line)
            elif field == 'L':
                h.unit_note_length = value
                in_header(i, line)
            elif field == 'Q':
                h.tempo = value
                in_header(i, line)
            elif field == 'K':
                h.key = value
                found_key = True
                in_header(i, line)
            else:
                h.extra_fields.append((field, value))
                in_header(i, line)
        elif found_key:
            # the first line of music
            break
    return h
