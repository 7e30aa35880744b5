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
ABC music language definition and the tokenizer for music lines.

The :class:`Abc` language lexes one line of ABC music. Many constructs share
their first character, so the order of the rules matters: a ``(`` followed by
a digit is a tuplet, not a slur; a ``[`` followed by a digit is an ending, a
``[`` followed by a letter and a colon an inline field, otherwise a chord.
Bar lines are matched longest first, so that ``:|]`` never becomes ``:|`` and
``]``.

Text that no rule matches (e.g. a quote or ``!`` without its closing
counterpart) is skipped, and lexing resumes at the next character.

The :class:`LineReader` turns the parce tokens into :class:`Token` objects,
which carry the interpreted values (pitch, length, tuplet ratio etc.)::

    >>> from abcscore.lang.abc import tokenize
    >>> [t.type for t in tokenize('(3ABc [CE]2 |]')]  # doctest: +NORMALIZE_WHITESPACE
    ['tuplet', 'note', 'note', 'note', 'space', 'chord_start', 'note',
     'note', 'chord_end', 'space', 'bar']

"""

import logging
import re

import parce
from parce import Language, lexicon
from parce.util import Dispatcher
import parce.action as a

from .. import duration, pitch


#: Bar line patterns and their bar type, longest first.
BARS = (
    (':|]', 'end-repeat-final'),
    (':||:', 'double-repeat'),
    ('::', 'double-repeat'),
    (':|:', 'double-repeat'),
    ('|:', 'start-repeat'),
    (':|', 'end-repeat'),
    ('||', 'double'),
    ('|]', 'final'),
    ('[|', 'heavy-light'),
    ('|', 'regular'),
)

#: The default number of notes q for a tuplet of p notes.
TUPLET_DEFAULT_NORMAL = {
    2: 3,
    3: 2,
    4: 3,
}

#: Shorthand decoration characters.
SHORTHAND_DECORATIONS = '~.HLMOPRSTuv'

RE_LENGTH = r"\d*(?:/(?:\d+|/*))?"
RE_NOTE = r"(?:\^\^|\^|__|_|=)?[A-Ga-g][',]*" + RE_LENGTH
RE_REST = r"[zZxX]" + RE_LENGTH

_bar_types = dict(BARS)
_tuplet_re = re.compile(r'\((\d+)(?::(\d*)(?::(\d*))?)?')
_length_re = re.compile(RE_LENGTH)


class Abc(Language):
    """Lexes a single line of ABC music (no header fields)."""
    @lexicon
    def root(cls):
        yield r'[ \t]+', a.Whitespace
        yield r'%.*', a.Comment
        yield r'"[^"]*"', a.String
        yield r'![^!]*!', a.Name.Decoration
        yield r'\{/?', a.Delimiter.Grace.Start
        yield r'\}', a.Delimiter.Grace.End
        yield r'\(\d+(?::\d*(?::\d*)?)?', a.Delimiter.Tuplet
        yield r'\(', a.Name.Symbol.Spanner.Slur
        yield r'\)', a.Name.Symbol.Spanner.Slur.End
        yield r'-', a.Name.Symbol.Spanner.Tie
        yield r'\[\d+(?:[,-]\d+)*', a.Delimiter.Ending
        yield r'\[[A-Za-z][A-Za-z]?:[^\]]*\]', a.Name.Tag
        yield '|'.join(re.escape(bar) for bar, bar_type in BARS), a.Delimiter.Bar
        yield r'(?<=\|)\d+(?:[,-]\d+)*', a.Delimiter.Ending
        yield r'&', a.Delimiter.Separator.VoiceSeparator
        yield r'\[', a.Delimiter.Chord.Start
        yield r'\]' + RE_LENGTH, a.Delimiter.Chord.End
        yield r'<+|>+', a.Operator
        yield r'[~.HLMOPRSTuv](?=[A-Ga-g^_=\[zx(!"~.HLMOPRSTuv])', a.Name.Decoration.Shorthand
        yield RE_NOTE, a.Text.Music.Pitch
        yield RE_REST, a.Text.Music.Rest


class Token:
    """A token of ABC music.

    Every token has a ``type`` (e.g. ``'note'`` or ``'bar'``) and the ``text``
    it was read from. Depending on the type, other attributes are set:

    ``note``
        ``pitch``, ``accidental`` (display hint), ``num`` and ``den`` (the
        length as a multiple of the unit note length) and ``suffix`` (the
        length text)
    ``rest``
        ``value`` (``'z'``, ``'Z'``, ``'x'`` or ``'X'``), ``num``, ``den`` and
        ``suffix``
    ``chord_end``
        ``num``, ``den`` and ``suffix``
    ``tuplet``
        ``p``, ``q`` and ``r``
    ``bar``
        ``value`` (the bar type, e.g. ``'start-repeat'``)
    ``broken``
        ``value`` (``'>'`` or ``'<'``) and ``count``
    ``ending``, ``chord_symbol``, ``decoration``, ``inline_field``
        ``value``, the text without delimiters
    ``lyrics``
        ``value`` (the text) and ``syllables``
    ``line_break``
        ``continuation`` (True if the line ended with a backslash)
    ``grace_start``
        ``acciaccatura`` (True for ``{/``)

    """
    value = None
    pitch = None
    accidental = None
    num = 1
    den = 1
    suffix = ''
    p = q = r = None
    count = 0
    syllables = ()
    continuation = False
    acciaccatura = False

    def __init__(self, type, text, **attrs):
        self.type = type
        self.text = text
        for name, value in attrs.items():
            setattr(self, name, value)

    def __repr__(self):
        return "<{} {} {!r}>".format(type(self).__name__, self.type, self.text)

    def has_length(self):
        """Return True if a length other than the unit length was written."""
        return (self.num, self.den) != (1, 1)


class LineReader:
    """Creates :class:`Token` objects from the parce tokens of a music line."""

    _action = Dispatcher()

    def tokens(self, text):
        """Yield the Tokens for one line of ABC music."""
        for t in parce.root(Abc.root, text).tokens():
            token = self._action(t.action, t.text)
            if token:
                yield token

    @staticmethod
    def length(text):
        """Return a dict with num, den and suffix for a length suffix text."""
        num, den = duration.from_string(text)
        return dict(num=num, den=den, suffix=text)

    @_action(a.Whitespace)
    def space(self, text):
        return Token('space', text)

    @_action(a.Comment)
    def comment(self, text):
        return None

    @_action(a.String)
    def chord_symbol(self, text):
        return Token('chord_symbol', text, value=text[1:-1])

    @_action(a.Name.Decoration)
    def decoration(self, text):
        return Token('decoration', text, value=text[1:-1])

    @_action(a.Name.Decoration.Shorthand)
    def shorthand_decoration(self, text):
        return Token('decoration', text, value=text)

    @_action(a.Delimiter.Grace.Start)
    def grace_start(self, text):
        return Token('grace_start', text, acciaccatura=text == '{/')

    @_action(a.Delimiter.Grace.End)
    def grace_end(self, text):
        return Token('grace_end', text)

    @_action(a.Delimiter.Tuplet)
    def tuplet(self, text):
        p, q, r = (int(n) if n else 0 for n in _tuplet_re.match(text).groups())
        if not p:
            logging.debug("tuplet %r without notes ignored", text)
            return None
        q = q or TUPLET_DEFAULT_NORMAL.get(p, 2)
        r = r or p
        return Token('tuplet', text, p=p, q=q, r=r)

    @_action(a.Name.Symbol.Spanner.Slur)
    def slur_start(self, text):
        return Token('slur_start', text)

    @_action(a.Name.Symbol.Spanner.Slur.End)
    def slur_end(self, text):
        return Token('slur_end', text)

    @_action(a.Name.Symbol.Spanner.Tie)
    def tie(self, text):
        return Token('tie', text)

    @_action(a.Delimiter.Ending)
    def ending(self, text):
        return Token('ending', text, value=text.lstrip('['))

    @_action(a.Name.Tag)
    def inline_field(self, text):
        return Token('inline_field', text, value=text[1:-1])

    @_action(a.Delimiter.Bar)
    def bar(self, text):
        return Token('bar', text, value=_bar_types[text])

    @_action(a.Delimiter.Separator.VoiceSeparator)
    def overlay(self, text):
        return Token('overlay', text)

    @_action(a.Delimiter.Chord.Start)
    def chord_start(self, text):
        return Token('chord_start', text)

    @_action(a.Delimiter.Chord.End)
    def chord_end(self, text):
        return Token('chord_end', text, **self.length(text[1:]))

    @_action(a.Operator)
    def broken(self, text):
        return Token('broken', text, value=text[0], count=len(text))

    @_action(a.Text.Music.Pitch)
    def note(self, text):
        p, accidental = pitch.from_string(text)
        marks = re.match(r"[\^_=]*[A-Ga-g][',]*", text).group()
        return Token('note', text, pitch=p, accidental=accidental,
                     **self.length(text[len(marks):]))

    @_action(a.Text.Music.Rest)
    def rest(self, text):
        return Token('rest', text, value=text[0], **self.length(text[1:]))


def tokenize(text):
    """Return the list of Tokens for one line of ABC music."""
    return list(LineReader().tokens(text))


def split_lyrics(text):
    """Split the text of a ``w:`` line in syllables.

    Words are split at whitespace and hyphens; a syllable that is followed by
    a hyphen keeps it::

        >>> split_lyrics('Tra-la-li Ja!')
        ['Tra-', 'la-', 'li', 'Ja!']

    Bar symbols (``|``), that only serve to align the lyrics, are left out.

    """
    syllables = []
    for word in text.split():
        if word == '|':
            continue
        parts = word.split('-')
        for i, part in enumerate(parts):
            if part == '' and i > 0:
                continue
            syllables.append(part + ('-' if i < len(parts) - 1 else ''))
    return syllables
