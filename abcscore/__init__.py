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
The abcscore module.

Read ABC music notation into a score tree, and write it back::

    >>> import abcscore
    >>> doc = abcscore.parse(text)
    >>> text = abcscore.serialize(doc)

"""

from .pkginfo import version, version_string
from .read import load, parse
from .registry import find
from .write import serialize


__all__ = ('find', 'load', 'parse', 'serialize', 'version', 'version_string')
