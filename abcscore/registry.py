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
The parce registry that knows the ABC language definition.

:func:`find` returns the root lexicon for ABC text, by name or by guessing
from a file name, mime type or the text itself::

    >>> import abcscore
    >>> abcscore.find('abc')
    Abc.root
    >>> abcscore.find(contents="X:1\nT:Tune\nK:C\nabc|\n")
    Abc.root

Languages that are not ABC are looked up in parce's own registry.

"""

__all__ = ['find', 'register']


import parce.registry


registry = parce.registry.Registry(parce.registry.registry)


def find(name=None, *, filename=None, mimetype=None, contents=None):
    """Return the root lexicon for the language ``name``.

    Without a name, the best suggestion for the ``filename``, ``mimetype``
    and ``contents`` is used. Languages that are not registered here are
    looked up in parce's own registry; returns None if nothing is found.

    """
    return registry.find(name, filename=filename, mimetype=mimetype, contents=contents)


def register(lexicon_name, *, name=None, desc=None, aliases=(), filenames=(),
             mimetypes=(), guesses=()):
    """Add a root lexicon by its dotted name to the registry.

    ``filenames``, ``mimetypes`` and ``guesses`` are lists of (pattern,
    weight) tuples, as for :meth:`parce.registry.Registry.add`.

    """
    registry.add(lexicon_name, name=name, desc=desc,
        aliases=list(aliases), filenames=list(filenames),
        mimetypes=list(mimetypes), guesses=list(guesses))


register("abcscore.lang.abc.Abc.root",
    name = "ABC",
    desc = "ABC music notation",
    aliases = ["abc"],
    filenames = [("*.abc", 1)],
    mimetypes = [("text/vnd.abc", 1)],
    guesses = [(r'^X:\s*\d', 0.8)],
)
