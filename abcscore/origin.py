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
Origin annotations: what a Document remembers of the ABC text it was read from.

The score model can't represent everything that is in an ABC file: the exact
text of header fields, comments, the order in which voices were interleaved,
where the lines were broken, etc. This information is stored in an
:class:`Origin` object, attached to the document as
:attr:`~.score.Document.origin`.

None of this is needed for the document to be valid. The writer in
:mod:`abcscore.write` uses it to reproduce the original text as closely as
possible: with the full source text it can even replay the text verbatim.

"""


class Origin:
    """Annotations describing the ABC text a Document was read from.

    All attributes are optional; lists and dicts default to empty.

    """
    def __init__(self, source_text=None):
        #: the full source text
        self.source_text = source_text

        ## raw header field values
        self.reference_number = None    #: the ``X:`` text
        self.title = None               #: the first ``T:`` text
        self.composer = None            #: the ``C:`` text
        self.unit_note_length = None    #: the ``L:`` text
        self.meter = None               #: the ``M:`` text
        self.key = None                 #: the ``K:`` text
        self.tempo = None               #: the ``Q:`` text

        #: all header lines (fields, directives, comments) in their order
        self.header_lines = []
        #: other header fields as (letter, value) tuples
        self.extra_fields = []
        #: ``%%`` directive lines in the header
        self.directives = []
        #: ``%`` comment lines in the header
        self.comments = []

        ## voices
        #: voice declaration lines by voice id
        self.voice_lines = {}
        #: voice ids in the order of the parts
        self.voice_ids = []
        #: inline voice markers (like ``[V:1]``) by voice id
        self.inline_voice_markers = {}
        #: list of lists of voice ids, one list per group of interleaved voices
        self.voice_interleave = []
        #: list of lists with the number of bars each voice had in a group
        self.group_bar_counts = []
        #: True if the body switched voices using ``V:`` lines
        self.body_voice_lines = False

        ## body
        #: ``%%`` directive lines in the body
        self.body_directives = []
        #: ``%`` comment lines in the body
        self.body_comments = []
        #: the ``W:`` (words) lines
        self.words = []
        #: per part index a list of measure counts after which a line ended,
        #: negative for a line continued with a backslash
        self.line_breaks = {}

        ## style
        #: True if a half unit length was written ``/2`` instead of ``/``
        self.explicit_half = False
        #: True if a chord used individual note lengths instead of a shared one
        self.individual_chord_durations = False

    def __repr__(self):
        return "<{} ({} header lines, voices {})>".format(
            self.__class__.__name__, len(self.header_lines), self.voice_ids)
