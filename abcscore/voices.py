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
Split the body of an ABC tune in token streams, one per voice.

Voices are switched by ``V:`` lines and by inline ``[V:..]`` fields. Besides
the music, the body may contain lyric lines (``w:``), words (``W:``), key,
meter and unit length changes on a line of their own, directives and
comments. Lyric lines and field lines become tokens in the stream of the
current voice; the rest is collected in the :class:`Body` for writing the
text back.

"""

import re

from .lang.abc import LineReader, Token, split_lyrics


#: Fields on a line of their own that change the music of the current voice.
MUSIC_FIELDS = ('K', 'L', 'M')

_field_re = re.compile(r'([A-Za-z]):\s*(.*)')
_directive_re = re.compile(r'%%[A-Za-z]')


class Body:
    """The body of an ABC tune, split in voices.

    ``voices`` is a dict mapping voice id to the list of :class:`Token`
    objects, in the order the voices were first seen.

    ``inline_voice_markers`` maps voice id to the first inline voice marker
    (e.g. ``'[V:1]'``), ``voice_lines`` lists the ``V:`` lines, and
    ``interleave`` lists the groups of voices that alternate in the text,
    with ``group_bar_counts`` holding the number of bars each voice had in
    each group. ``directives``, ``comments`` and ``words`` collect the
    directive, comment and ``W:`` lines.

    """
    def __init__(self):
        self.voices = {}
        self.inline_voice_markers = {}
        self.voice_lines = []
        self.interleave = []
        self.group_bar_counts = []
        self.directives = []
        self.comments = []
        self.words = []

    def streams(self):
        """Return a list of (voice_id, tokens) tuples for the voices that have tokens."""
        return [(voice_id, tokens) for voice_id, tokens in self.voices.items() if tokens]


class BodyReader:
    """Reads the lines of the body and distributes the tokens over the voices.

    The lines are tokenized using a :class:`~.lang.abc.LineReader`.

    """
    def __init__(self):
        self.line_reader = LineReader()
        self.body = Body()
        self.voice = '1'
        self.body.voices[self.voice] = []
        self.continuation = False
        self.group = []
        self.group_bar_counts = []
        self.bar_count = 0

    def read(self, lines):
        """Read all lines and return the :class:`Body`."""
        for line in lines:
            self.read_line(line)
        self.close_group()
        return self.body

    def tokens(self):
        """The token list of the current voice."""
        return self.body.voices[self.voice]

    def read_line(self, raw):
        """Read one line of the body."""
        stripped = raw.rstrip()
        continuation = stripped.endswith('\\')
        content = stripped[:-1] if continuation else raw
        line = content.strip()
        continued, self.continuation = self.continuation, False

        if line.startswith('W:'):
            self.body.words.append(raw)
        elif not line:
            pass
        elif line.startswith('%'):
            if _directive_re.match(line):
                self.body.directives.append(raw)
            else:
                self.body.comments.append(raw)
        elif line.startswith('V:'):
            self.voice_line(raw, line[2:].strip())
        elif line.startswith('w:'):
            text = line[2:].strip()
            self.tokens().append(Token('lyrics', line, value=text, syllables=split_lyrics(text)))
        elif _field_re.match(line) and not line.startswith('['):
            field, value = _field_re.match(line).groups()
            if field in MUSIC_FIELDS:
                self.line_break()
                self.tokens().append(Token('inline_field', line, value='{}:{}'.format(field, value)))
                self.line_break()
        else:
            if not continued:
                self.line_break()
            self.music(content)
            if continuation:
                self.tokens().append(Token('line_break', '\\\n', continuation=True))
                self.continuation = True

    def line_break(self):
        """Add a line break to the current voice, if it has tokens and does not
        end with a line break already.

        """
        tokens = self.tokens()
        if tokens and tokens[-1].type != 'line_break':
            tokens.append(Token('line_break', '\n'))

    def music(self, text):
        """Tokenize a line of music, handling inline voice switches."""
        for token in self.line_reader.tokens(text):
            if token.type == 'inline_field' and token.value.startswith('V:'):
                voice_id = token.value[2:].split()[0] if token.value[2:].split() else '1'
                self.switch(voice_id)
                self.body.inline_voice_markers.setdefault(voice_id, token.text)
                continue
            self.tokens().append(token)
            if token.type == 'bar':
                self.bar_count += 1

    def voice_line(self, raw, value):
        """Handle a ``V:`` line in the body."""
        voice_id = value.split()[0] if value else '1'
        if voice_id in self.group:
            self.close_group()
        self.body.voice_lines.append(raw)
        self.switch(voice_id)

    def switch(self, voice_id):
        """Make voice_id the current voice, tracking the interleave groups."""
        if not self.group or self.group[-1] != voice_id:
            if self.group:
                self.group_bar_counts.append(self.bar_count)
                self.bar_count = 0
            self.group.append(voice_id)
        self.voice = voice_id
        self.body.voices.setdefault(voice_id, [])

    def close_group(self):
        """Close the current group of interleaved voices."""
        if self.group:
            self.group_bar_counts.append(self.bar_count)
            self.body.interleave.append(self.group)
            self.body.group_bar_counts.append(self.group_bar_counts)
        self.group = []
        self.group_bar_counts = []
        self.bar_count = 0


def read(lines):
    """Read the body lines and return a :class:`Body`."""
    return BodyReader().read(lines)
